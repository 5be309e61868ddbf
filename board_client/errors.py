from __future__ import annotations

from typing import Any, Mapping, Optional

import requests


class ApiError(requests.HTTPError):
    """
    Non-2xx response from the board API.

    - status_code: HTTP status
    - message: server "error" field when present, otherwise a default message
    - payload: decoded JSON body (empty dict when the body is not JSON)
    """

    default_message = "요청 처리에 실패했습니다."

    def __init__(
        self,
        status_code: int,
        message: Optional[str] = None,
        payload: Optional[Mapping[str, Any]] = None,
        response: Optional[requests.Response] = None,
    ):
        self.status_code = status_code
        self.message = message or self.default_message
        self.payload = dict(payload or {})
        super().__init__(f"[{status_code}] {self.message}", response=response)


class AuthenticationRequired(ApiError):
    default_message = "로그인이 필요합니다."


class PermissionDenied(ApiError):
    default_message = "권한이 없습니다."


class EmailVerificationRequired(PermissionDenied):
    default_message = "이메일 인증이 필요합니다."


class NotFound(ApiError):
    default_message = "요청한 리소스를 찾을 수 없습니다."


class TokenAlreadyUsed(ApiError):
    default_message = "이미 인증된 이메일입니다."


class TokenExpired(ApiError):
    default_message = "인증 토큰이 만료되었습니다."


class TooManyRequests(ApiError):
    default_message = "요청이 너무 많습니다. 잠시 후 다시 시도해주세요."


class ServerError(ApiError):
    default_message = "서버 오류가 발생했습니다."


_STATUS_ERRORS: dict[int, type[ApiError]] = {
    401: AuthenticationRequired,
    403: PermissionDenied,
    404: NotFound,
    409: TokenAlreadyUsed,
    410: TokenExpired,
    429: TooManyRequests,
}


def error_for_status(
    status_code: int,
    payload: Optional[Mapping[str, Any]] = None,
    response: Optional[requests.Response] = None,
) -> ApiError:
    """Pick the ApiError subclass matching a failed response."""
    payload = payload or {}
    message = payload.get("error") if isinstance(payload.get("error"), str) else None

    if status_code == 403 and payload.get("emailVerificationRequired"):
        cls: type[ApiError] = EmailVerificationRequired
    elif status_code >= 500:
        cls = ServerError
    else:
        cls = _STATUS_ERRORS.get(status_code, ApiError)

    return cls(status_code, message=message, payload=payload, response=response)


class FormValidationError(ValueError):
    """Client-side validation failure; str(err) is the user-facing message."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)
