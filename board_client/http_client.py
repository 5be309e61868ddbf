from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional
from urllib.parse import quote, urlencode

import requests

from board_client.errors import ApiError, error_for_status

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = (429, 500, 502, 503, 504)


@dataclass(frozen=True)
class HttpConfig:
    base_url: str
    timeout_sec: float
    delay_sec: float
    max_retries: int
    backoff_base_sec: float
    backoff_max_sec: float
    user_agent: str


class HttpClient:
    """
    Thin HTTP client wrapper for the board API:
    - Session cookies (the server keeps the login in its HTTP session)
    - Timeout
    - Optional fixed delay between requests
    - Retry with exponential backoff, GET only
    - Non-2xx responses raised as ApiError subclasses
    """

    def __init__(self, config: HttpConfig, session: Optional[requests.Session] = None):
        self._cfg = config
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "User-Agent": self._cfg.user_agent,
                "Accept": "application/json",
                "Accept-Language": "ko-KR,ko;q=0.9,en;q=0.8",
            }
        )

    @property
    def base_url(self) -> str:
        return self._cfg.base_url.rstrip("/")

    def build_url(self, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Join base_url and path, appending percent-encoded query params.

        None and "" values are left out of the query string.
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        if not params:
            return url
        q = {k: v for k, v in params.items() if v is not None and v != ""}
        if not q:
            return url
        return f"{url}?{urlencode(q, quote_via=quote)}"

    def get_json(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        resp = self.request("GET", path, params=params)
        return _decode_json(resp)

    def get_bytes(self, path: str) -> requests.Response:
        """GET a binary resource; caller reads .content and headers."""
        return self.request("GET", path)

    def post_json(
        self,
        path: str,
        payload: Optional[Mapping[str, Any]] = None,
        files: Optional[Mapping[str, Any]] = None,
        data: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        if files is not None:
            resp = self.request("POST", path, files=files, data=data)
        else:
            resp = self.request("POST", path, json=payload)
        return _decode_json(resp)

    def put_json(self, path: str, payload: Mapping[str, Any]) -> Any:
        resp = self.request("PUT", path, json=payload)
        return _decode_json(resp)

    def delete_json(self, path: str) -> Any:
        resp = self.request("DELETE", path)
        return _decode_json(resp)

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        **kwargs: Any,
    ) -> requests.Response:
        """
        Send a request and return the 2xx response.

        Raises:
            ApiError: non-2xx response (after retries for GET)
            requests.RequestException: network errors (after retries for GET)
        """
        url = self.build_url(path, params)
        self._rate_limit()

        retries = self._cfg.max_retries if method == "GET" else 0
        attempt = 0
        while True:
            try:
                return self._send(method, url, **kwargs)
            except (ApiError, requests.RequestException) as e:
                if not _is_retryable(e) or attempt >= retries:
                    logger.debug("HTTP %s failed: url=%s err=%s", method, url, e)
                    raise
                sleep_sec = self._compute_backoff(attempt)
                logger.warning(
                    "HTTP %s failed (retrying): attempt=%s url=%s sleep=%.2fs err=%s",
                    method,
                    attempt + 1,
                    url,
                    sleep_sec,
                    e,
                )
                time.sleep(sleep_sec)
                attempt += 1

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        resp = self._session.request(method, url, timeout=self._cfg.timeout_sec, **kwargs)
        if not resp.ok:
            raise error_for_status(resp.status_code, _error_payload(resp), response=resp)
        return resp

    def _rate_limit(self) -> None:
        if self._cfg.delay_sec <= 0:
            return
        jitter = random.uniform(0.0, 0.1)
        time.sleep(self._cfg.delay_sec + jitter)

    def _compute_backoff(self, attempt: int) -> float:
        # Exponential backoff with cap + jitter
        base = self._cfg.backoff_base_sec * (2**attempt)
        capped = min(base, self._cfg.backoff_max_sec)
        return capped + random.uniform(0.0, 0.25)


def _is_retryable(exc: Exception) -> bool:
    if isinstance(exc, ApiError):
        return exc.status_code in RETRYABLE_STATUS
    return isinstance(exc, (requests.ConnectionError, requests.Timeout))


def _error_payload(resp: requests.Response) -> dict[str, Any]:
    try:
        body = resp.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _decode_json(resp: requests.Response) -> Any:
    if not resp.content:
        return {}
    return resp.json()
