from __future__ import annotations

import pytest

from board_client.content import count_inline_images, html_to_text, preview
from board_client.errors import FormValidationError
from board_client.forms import (
    MAX_UPLOAD_BYTES,
    require_verification_token,
    validate_attachment,
    validate_excel,
    validate_inline_image,
    validate_post_form,
)

IMG = '<img src="data:image/png;base64,iVBORw0KGgo=">'


def test_html_to_text_drops_markup_and_images():
    html = f"<div>첫 번째 줄</div><div>{IMG}</div><p>두 번째 줄 <b>강조</b></p>"
    assert html_to_text(html) == "첫 번째 줄\n두 번째 줄\n강조"


def test_html_to_text_images_only():
    assert html_to_text(f"<p>{IMG}</p><p><br></p>") == ""
    assert html_to_text("") == ""


def test_count_inline_images():
    assert count_inline_images(f"<p>a</p>{IMG}{IMG}") == 2
    assert count_inline_images("<p>a</p>") == 0


def test_preview_truncates():
    assert preview("<p>abcdef</p>", limit=3) == "abc…"
    assert preview("<p>abc</p>", limit=3) == "abc"


def test_post_form_requires_title_and_text():
    validate_post_form("제목", "<p>본문</p>")
    with pytest.raises(FormValidationError, match="제목과 내용을 입력해주세요."):
        validate_post_form("   ", "<p>본문</p>")
    with pytest.raises(FormValidationError):
        validate_post_form("제목", f"<p>{IMG}</p>")


def test_attachment_size_limit():
    validate_attachment("a.pdf", MAX_UPLOAD_BYTES)
    with pytest.raises(FormValidationError) as excinfo:
        validate_attachment("a.pdf", MAX_UPLOAD_BYTES + 1)
    assert str(excinfo.value) == '파일 "a.pdf"의 크기가 10MB를 초과합니다.'


def test_inline_image_must_be_image():
    validate_inline_image("a.png", 10, "image/png")
    with pytest.raises(FormValidationError, match="이미지 파일만 첨부할 수 있습니다."):
        validate_inline_image("a.pdf", 10, "application/pdf")
    with pytest.raises(FormValidationError, match="이미지 파일만 첨부할 수 있습니다."):
        validate_inline_image("a", 10, None)


def test_excel_extension_and_size():
    validate_excel("Report.XLSX", 10)
    validate_excel("old.xls", 10)
    with pytest.raises(FormValidationError, match="엑셀 파일만 업로드 가능합니다."):
        validate_excel("data.csv", 10)
    with pytest.raises(FormValidationError, match="파일 크기는 10MB를 초과할 수 없습니다."):
        validate_excel("big.xlsx", MAX_UPLOAD_BYTES + 1)


def test_verification_token():
    assert require_verification_token(" abc ") == "abc"
    with pytest.raises(FormValidationError):
        require_verification_token("")


def test_form_validation_error_is_value_error():
    with pytest.raises(ValueError):
        require_verification_token(None)
