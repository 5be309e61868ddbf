from __future__ import annotations

from typing import Any, Optional

import pytest
from pydantic import ValidationError

from board_client.board_api import BoardApi
from board_client.errors import EmailVerificationRequired, FormValidationError, TokenAlreadyUsed
from board_client.http_client import HttpClient, HttpConfig


class _DummyHttp(HttpClient):
    """Answers every call with a canned payload and records what was asked."""

    def __init__(self, payload: Any = None, error: Optional[Exception] = None, headers: Optional[dict] = None):
        super().__init__(
            HttpConfig(
                base_url="http://board.test",
                timeout_sec=1.0,
                delay_sec=0.0,
                max_retries=0,
                backoff_base_sec=0.0,
                backoff_max_sec=0.0,
                user_agent="test",
            )
        )
        self.payload = payload if payload is not None else {}
        self.error = error
        self.headers = headers or {}
        self.calls: list[tuple[str, str, Any]] = []

    def get_json(self, path, params=None):
        return self._answer("GET", path, params)

    def post_json(self, path, payload=None, files=None, data=None):
        return self._answer("POST", path, payload if files is None else {"files": files, "data": data})

    def put_json(self, path, payload):
        return self._answer("PUT", path, payload)

    def delete_json(self, path):
        return self._answer("DELETE", path, None)

    def get_bytes(self, path):
        self.calls.append(("GET", path, None))
        return _BinaryResponse(b"PK\x03\x04", self.headers)

    def _answer(self, method, path, body):
        self.calls.append((method, path, body))
        if self.error is not None:
            raise self.error
        return self.payload


class _BinaryResponse:
    def __init__(self, content: bytes, headers: dict):
        self.content = content
        self.headers = headers


def _post_json(**overrides) -> dict:
    raw = {
        "postId": 7,
        "title": "제목",
        "content": "<p>본문</p>",
        "authorId": "a@b.com",
        "authorName": "홍길동",
        "isNotice": False,
        "viewCount": 12,
        "createdAt": "2025-01-15T10:30:00.000+00:00",
        "updatedAt": None,
        "excelFilename": None,
        "commentCount": None,
        "fileCount": None,
    }
    raw.update(overrides)
    return raw


def test_list_posts_omits_empty_search():
    http = _DummyHttp({"posts": [], "totalPages": 0, "totalCount": 0, "currentPage": 1, "pageSize": 20})
    page = BoardApi(http).list_posts(page=1, size=20, search="")

    assert http.calls == [("GET", "/api/posts", {"page": 1, "size": 20})]
    assert page.posts == []
    assert page.total_count == 0


def test_list_posts_passes_search():
    http = _DummyHttp({"posts": [_post_json()], "totalPages": 1, "totalCount": 1, "currentPage": 1})
    page = BoardApi(http).list_posts(page=1, search="제목")

    assert http.calls[0][2] == {"page": 1, "size": 20, "search": "제목"}
    assert page.posts[0].post_id == 7
    assert page.posts[0].comment_count == 0


def test_get_post_parses_detail():
    http = _DummyHttp(_post_json(excelFilename="report.xlsx", excelFileSize=2048))
    post = BoardApi(http).get_post(7)

    assert http.calls == [("GET", "/api/posts/7", None)]
    assert post.content == "<p>본문</p>"
    assert post.has_excel is True
    assert post.excel_file_size == 2048


def test_signup_uses_email_as_user_id():
    http = _DummyHttp({"message": "회원가입이 완료되었습니다.", "email": "a@b.com"})
    result = BoardApi(http).signup("a@b.com", "pw1234", "pw1234", "홍길동")

    method, path, body = http.calls[0]
    assert (method, path) == ("POST", "/api/users/signup")
    assert body["userId"] == body["email"] == "a@b.com"
    assert body["passwordConfirm"] == "pw1234"
    assert result.email == "a@b.com"


def test_signup_password_mismatch_never_hits_server():
    http = _DummyHttp()
    with pytest.raises(FormValidationError, match="비밀번호가 일치하지 않습니다."):
        BoardApi(http).signup("a@b.com", "pw1234", "pw9999", "홍길동")
    assert http.calls == []


def test_login_surfaces_email_verification_required():
    err = EmailVerificationRequired(403, "이메일 인증이 필요합니다.", {"emailVerificationRequired": True})
    http = _DummyHttp(error=err)

    with pytest.raises(EmailVerificationRequired):
        BoardApi(http).login("a@b.com", "pw")


def test_login_result():
    http = _DummyHttp({"message": "로그인 성공", "userId": "a@b.com", "userName": "홍길동"})
    result = BoardApi(http).login("a@b.com", "pw")
    assert result.user_name == "홍길동"


def test_me_parses_current_user():
    http = _DummyHttp({"userId": "a@b.com", "userName": "홍길동", "passwordChangeRequired": True})
    user = BoardApi(http).me()
    assert user.user_id == "a@b.com"
    assert user.password_change_required is True


def test_change_password_mismatch():
    http = _DummyHttp()
    with pytest.raises(FormValidationError, match="새 비밀번호가 일치하지 않습니다."):
        BoardApi(http).change_password("old", "new1", "new2")
    assert http.calls == []


def test_verify_email_requires_token():
    http = _DummyHttp()
    with pytest.raises(FormValidationError, match="유효하지 않은 인증 링크입니다."):
        BoardApi(http).verify_email(None)
    assert http.calls == []


def test_verify_email_token_already_used():
    http = _DummyHttp(error=TokenAlreadyUsed(409))
    with pytest.raises(TokenAlreadyUsed):
        BoardApi(http).verify_email("abc")
    assert http.calls == [("GET", "/api/users/verify-email", {"token": "abc"})]


def test_create_post_requires_body_text():
    http = _DummyHttp()
    with pytest.raises(FormValidationError, match="제목과 내용을 입력해주세요."):
        BoardApi(http).create_post("제목", '<p><img src="data:image/png;base64,AAAA"></p>')
    assert http.calls == []


def test_create_post_sends_notice_flag():
    http = _DummyHttp({"postId": 8, "title": "공지", "content": "<p>안내</p>", "isNotice": True})
    saved = BoardApi(http).create_post("공지", "<p>안내</p>", is_notice=True)

    assert http.calls[0][2] == {"title": "공지", "content": "<p>안내</p>", "isNotice": True}
    assert saved.post_id == 8


def test_update_and_delete_post_paths():
    http = _DummyHttp({"postId": 7, "title": "수정", "content": "<p>x</p>", "isNotice": False})
    api = BoardApi(http)
    api.update_post(7, "수정", "<p>x</p>")
    http.payload = {"message": "게시글이 삭제되었습니다."}
    result = api.delete_post(7)

    assert [c[:2] for c in http.calls] == [("PUT", "/api/posts/7"), ("DELETE", "/api/posts/7")]
    assert result.message == "게시글이 삭제되었습니다."


def test_list_comments():
    http = _DummyHttp(
        [
            {
                "commentId": 1,
                "postId": 7,
                "authorId": "a@b.com",
                "authorName": "홍길동",
                "content": "좋아요",
                "createdAt": "2025-01-15T10:30:00.000+00:00",
            }
        ]
    )
    comments = BoardApi(http).list_comments(7)
    assert http.calls == [("GET", "/api/comments/post/7", None)]
    assert comments[0].content == "좋아요"


def test_blank_comment_rejected():
    http = _DummyHttp()
    with pytest.raises(FormValidationError, match="댓글 내용을 입력해주세요."):
        BoardApi(http).create_comment(7, "   ")
    assert http.calls == []


def test_list_files():
    http = _DummyHttp(
        [
            {"fileId": 3, "postId": 7, "originalFilename": "a.png", "fileSize": 10, "contentType": "image/png"},
            {"fileId": 4, "postId": 7, "originalFilename": "b.pdf", "fileSize": 20, "contentType": None},
        ]
    )
    files = BoardApi(http).list_files(7)
    assert [f.is_image for f in files] == [True, False]


def test_upload_file_sends_multipart(tmp_path):
    path = tmp_path / "메모.txt"
    path.write_text("hello", encoding="utf-8")
    http = _DummyHttp({"fileId": 5, "postId": 7, "originalFilename": "메모.txt", "fileSize": 5})

    uploaded = BoardApi(http).upload_file(7, path)

    method, api_path, body = http.calls[0]
    assert (method, api_path) == ("POST", "/api/files/upload")
    assert body["data"] == {"postId": "7"}
    assert body["files"]["file"][0] == "메모.txt"
    assert uploaded.file_id == 5


def test_upload_files_skips_failures(tmp_path):
    ok = tmp_path / "ok.txt"
    ok.write_text("x", encoding="utf-8")
    missing = tmp_path / "missing.txt"
    http = _DummyHttp({"fileId": 5, "postId": 7, "originalFilename": "ok.txt", "fileSize": 1})

    uploaded = BoardApi(http).upload_files(7, [missing, ok])

    assert [f.original_filename for f in uploaded] == ["ok.txt"]


def test_upload_excel_rejects_other_extensions(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("a,b", encoding="utf-8")
    http = _DummyHttp()

    with pytest.raises(FormValidationError, match="엑셀 파일만 업로드 가능합니다."):
        BoardApi(http).upload_excel(7, path)
    assert http.calls == []


def test_download_file_reads_disposition_filename():
    http = _DummyHttp(
        headers={
            "Content-Disposition": 'attachment; filename="report.xlsx"',
            "Content-Type": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        }
    )
    downloaded = BoardApi(http).download_excel(7)

    assert http.calls == [("GET", "/api/posts/7/excel/download", None)]
    assert downloaded.filename == "report.xlsx"
    assert downloaded.content.startswith(b"PK")


def test_download_without_disposition_falls_back_to_id():
    http = _DummyHttp()
    downloaded = BoardApi(http).download_file(42)
    assert downloaded.filename == "42"
    assert downloaded.content_type == "application/octet-stream"


def test_list_posts_rejects_inconsistent_totals():
    http = _DummyHttp({"posts": [], "totalPages": 5, "totalCount": 45, "currentPage": 1, "pageSize": 20})
    with pytest.raises(ValidationError):
        BoardApi(http).list_posts(page=1)
