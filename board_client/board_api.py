from __future__ import annotations

import logging
import mimetypes
import re
from pathlib import Path
from typing import Optional, Union

from board_client import forms
from board_client.http_client import HttpClient
from board_client.models import PAGE_SIZE, DownloadedFile
from board_client.schemas import (
    Comment,
    CurrentUser,
    ExcelUploadResult,
    FileAttachment,
    LoginResult,
    MessageResponse,
    PostDetail,
    PostPage,
    SavedPost,
    SignupResult,
    VerifyEmailResult,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_FILENAME_RE = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.IGNORECASE)


class BoardApi:
    """
    Typed wrapper over the board REST API.

    Scope:
    - /api/users: signup, email verification, login/logout, password change
    - /api/posts: list/detail/create/update/delete, Excel attachment
    - /api/comments and /api/files

    Login state lives in the HttpClient session cookies.
    Client-side form checks run before a request is sent.
    """

    def __init__(self, http: HttpClient):
        self.http = http

    # -------------------------
    # Users
    # -------------------------

    def signup(self, email: str, password: str, password_confirm: str, name: str) -> SignupResult:
        forms.validate_signup(email, password, password_confirm, name)
        data = self.http.post_json(
            "/api/users/signup",
            {
                # the email doubles as the login id
                "userId": email,
                "password": password,
                "passwordConfirm": password_confirm,
                "name": name,
                "email": email,
            },
        )
        logger.info("Signed up: email=%s", email)
        return SignupResult.model_validate(data)

    def login(self, user_id: str, password: str) -> LoginResult:
        """
        Raises:
            EmailVerificationRequired: account exists but email is not verified
            TooManyRequests: login rate limit hit
        """
        data = self.http.post_json("/api/users/login", {"userId": user_id, "password": password})
        result = LoginResult.model_validate(data)
        logger.info("Logged in: user_id=%s", result.user_id)
        return result

    def logout(self) -> MessageResponse:
        return MessageResponse.model_validate(self.http.post_json("/api/users/logout"))

    def me(self) -> CurrentUser:
        return CurrentUser.model_validate(self.http.get_json("/api/users/me"))

    def change_password(
        self,
        current_password: str,
        new_password: str,
        new_password_confirm: str,
    ) -> MessageResponse:
        forms.validate_password_change(current_password, new_password, new_password_confirm)
        data = self.http.post_json(
            "/api/users/change-password",
            {
                "currentPassword": current_password,
                "newPassword": new_password,
                "newPasswordConfirm": new_password_confirm,
            },
        )
        return MessageResponse.model_validate(data)

    def verify_email(self, token: Optional[str]) -> VerifyEmailResult:
        """
        Raises:
            TokenExpired: 410
            TokenAlreadyUsed: 409
            TooManyRequests: 429
        """
        token = forms.require_verification_token(token)
        data = self.http.get_json("/api/users/verify-email", params={"token": token})
        return VerifyEmailResult.model_validate(data)

    def resend_verification(self, email: str) -> MessageResponse:
        data = self.http.post_json("/api/users/resend-verification", {"email": email})
        return MessageResponse.model_validate(data)

    # -------------------------
    # Posts
    # -------------------------

    def list_posts(self, page: int = 1, size: int = PAGE_SIZE, search: str = "") -> PostPage:
        """GET /api/posts; search is omitted from the query when empty."""
        params: dict[str, object] = {"page": page, "size": size}
        if search:
            params["search"] = search
        data = self.http.get_json("/api/posts", params=params)
        return PostPage.model_validate(data)

    def get_post(self, post_id: int) -> PostDetail:
        return PostDetail.model_validate(self.http.get_json(f"/api/posts/{post_id}"))

    def create_post(self, title: str, content: str, is_notice: bool = False) -> SavedPost:
        forms.validate_post_form(title, content)
        data = self.http.post_json(
            "/api/posts",
            {"title": title, "content": content, "isNotice": is_notice},
        )
        saved = SavedPost.model_validate(data)
        logger.info("Created post: post_id=%s", saved.post_id)
        return saved

    def update_post(self, post_id: int, title: str, content: str, is_notice: bool = False) -> SavedPost:
        forms.validate_post_form(title, content)
        data = self.http.put_json(
            f"/api/posts/{post_id}",
            {"title": title, "content": content, "isNotice": is_notice},
        )
        return SavedPost.model_validate(data)

    def delete_post(self, post_id: int) -> MessageResponse:
        data = self.http.delete_json(f"/api/posts/{post_id}")
        logger.info("Deleted post: post_id=%s", post_id)
        return MessageResponse.model_validate(data)

    # -------------------------
    # Excel attachment (one per post)
    # -------------------------

    def upload_excel(self, post_id: int, path: PathLike) -> ExcelUploadResult:
        p = Path(path)
        forms.validate_excel(p.name, p.stat().st_size)
        with p.open("rb") as fh:
            data = self.http.post_json(
                f"/api/posts/{post_id}/excel",
                files={"file": (p.name, fh, _guess_type(p.name))},
            )
        return ExcelUploadResult.model_validate(data)

    def download_excel(self, post_id: int) -> DownloadedFile:
        return self._download(f"/api/posts/{post_id}/excel/download")

    def delete_excel(self, post_id: int) -> MessageResponse:
        return MessageResponse.model_validate(self.http.delete_json(f"/api/posts/{post_id}/excel"))

    # -------------------------
    # Comments
    # -------------------------

    def list_comments(self, post_id: int) -> list[Comment]:
        data = self.http.get_json(f"/api/comments/post/{post_id}")
        return [Comment.model_validate(item) for item in data]

    def create_comment(self, post_id: int, content: str) -> Comment:
        forms.validate_comment(content)
        data = self.http.post_json("/api/comments", {"postId": post_id, "content": content})
        return Comment.model_validate(data)

    def update_comment(self, comment_id: int, content: str) -> Comment:
        forms.validate_comment(content)
        data = self.http.put_json(f"/api/comments/{comment_id}", {"content": content})
        return Comment.model_validate(data)

    def delete_comment(self, comment_id: int) -> MessageResponse:
        return MessageResponse.model_validate(self.http.delete_json(f"/api/comments/{comment_id}"))

    # -------------------------
    # Files
    # -------------------------

    def list_files(self, post_id: int) -> list[FileAttachment]:
        data = self.http.get_json(f"/api/files/post/{post_id}")
        return [FileAttachment.model_validate(item) for item in data]

    def upload_file(self, post_id: int, path: PathLike) -> FileAttachment:
        p = Path(path)
        forms.validate_attachment(p.name, p.stat().st_size)
        with p.open("rb") as fh:
            data = self.http.post_json(
                "/api/files/upload",
                files={"file": (p.name, fh, _guess_type(p.name))},
                data={"postId": str(post_id)},
            )
        return FileAttachment.model_validate(data)

    def upload_files(self, post_id: int, paths: list[PathLike]) -> list[FileAttachment]:
        """
        Upload several attachments after a post is saved.
        A failed upload is logged and skipped; the post itself is already stored.
        """
        uploaded: list[FileAttachment] = []
        for path in paths:
            try:
                uploaded.append(self.upload_file(post_id, path))
            except Exception as e:
                logger.warning("Skipping attachment due to error: post_id=%s path=%s err=%s", post_id, path, e)
        return uploaded

    def download_file(self, file_id: int) -> DownloadedFile:
        return self._download(f"/api/files/download/{file_id}")

    def delete_file(self, file_id: int) -> MessageResponse:
        return MessageResponse.model_validate(self.http.delete_json(f"/api/files/{file_id}"))

    # -------------------------
    # Helpers
    # -------------------------

    def _download(self, path: str) -> DownloadedFile:
        resp = self.http.get_bytes(path)
        disposition = resp.headers.get("Content-Disposition", "")
        return DownloadedFile(
            filename=_filename_from_disposition(disposition) or path.rsplit("/", 1)[-1],
            content_type=resp.headers.get("Content-Type", "application/octet-stream"),
            content=resp.content,
        )


def _filename_from_disposition(value: str) -> Optional[str]:
    m = _FILENAME_RE.search(value or "")
    return m.group(1).strip() if m else None


def _guess_type(filename: str) -> str:
    return mimetypes.guess_type(filename)[0] or "application/octet-stream"
