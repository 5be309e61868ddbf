from __future__ import annotations

from typing import Optional

from board_client.content import html_to_text
from board_client.errors import FormValidationError

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
EXCEL_EXTENSIONS = (".xlsx", ".xls")


def validate_signup(email: str, password: str, password_confirm: str, name: str) -> None:
    if not email.strip():
        raise FormValidationError("이메일을 입력해주세요.", field="email")
    if not name.strip():
        raise FormValidationError("이름을 입력해주세요.", field="name")
    if password != password_confirm:
        raise FormValidationError("비밀번호가 일치하지 않습니다.", field="password_confirm")


def validate_password_change(current_password: str, new_password: str, new_password_confirm: str) -> None:
    if not current_password:
        raise FormValidationError("현재 비밀번호를 입력해주세요.", field="current_password")
    if new_password != new_password_confirm:
        raise FormValidationError("새 비밀번호가 일치하지 않습니다.", field="new_password_confirm")


def validate_post_form(title: str, content_html: str) -> None:
    """Title and body text are both required; images alone do not count as a body."""
    if not title.strip() or not html_to_text(content_html):
        raise FormValidationError("제목과 내용을 입력해주세요.")


def validate_comment(content: str) -> None:
    if not content.strip():
        raise FormValidationError("댓글 내용을 입력해주세요.", field="content")


def validate_attachment(filename: str, size: int) -> None:
    if size > MAX_UPLOAD_BYTES:
        raise FormValidationError(f'파일 "{filename}"의 크기가 10MB를 초과합니다.', field="file")


def validate_inline_image(filename: str, size: int, content_type: Optional[str]) -> None:
    if not content_type or not content_type.startswith("image/"):
        raise FormValidationError("이미지 파일만 첨부할 수 있습니다.", field="file")
    validate_attachment(filename, size)


def validate_excel(filename: str, size: int) -> None:
    if not filename.lower().endswith(EXCEL_EXTENSIONS):
        raise FormValidationError("엑셀 파일만 업로드 가능합니다. (.xlsx, .xls)", field="file")
    if size > MAX_UPLOAD_BYTES:
        raise FormValidationError("파일 크기는 10MB를 초과할 수 없습니다.", field="file")


def require_verification_token(token: Optional[str]) -> str:
    if not token or not token.strip():
        raise FormValidationError("유효하지 않은 인증 링크입니다.", field="token")
    return token.strip()
