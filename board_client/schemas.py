from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class PostSummary(ApiModel):
    """Post as it appears in the list. The server owns it; this is a read-only copy."""

    post_id: int
    title: str
    author_name: str = ""
    is_notice: bool = False
    view_count: int = Field(default=0, ge=0)
    comment_count: int = Field(default=0, ge=0)
    file_count: int = Field(default=0, ge=0)
    created_at: datetime

    @field_validator("view_count", "comment_count", "file_count", mode="before")
    @classmethod
    def _null_count_is_zero(cls, v):
        # Aggregated counts come back as null for posts without rows
        return 0 if v is None else v

    @field_validator("author_name", mode="before")
    @classmethod
    def _null_name_is_empty(cls, v):
        return "" if v is None else v

    @field_validator("is_notice", mode="before")
    @classmethod
    def _null_notice_is_false(cls, v):
        return False if v is None else v


class PostDetail(PostSummary):
    content: str = ""
    author_id: Optional[str] = None
    updated_at: Optional[datetime] = None

    excel_filename: Optional[str] = None
    excel_file_size: Optional[int] = None

    @property
    def has_excel(self) -> bool:
        return bool(self.excel_filename)


class PostPage(ApiModel):
    """Response of GET /api/posts."""

    posts: list[PostSummary]
    total_pages: int = Field(ge=0)
    total_count: int = Field(ge=0)
    current_page: int = Field(ge=1)
    page_size: Optional[int] = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _totals_agree(self) -> "PostPage":
        if self.page_size is None:
            return self
        expected = math.ceil(self.total_count / self.page_size)
        if self.total_pages != expected:
            raise ValueError(
                f"totalPages={self.total_pages} does not match "
                f"totalCount={self.total_count} / pageSize={self.page_size}"
            )
        if len(self.posts) > self.page_size:
            raise ValueError(f"{len(self.posts)} posts exceed pageSize={self.page_size}")
        return self


class SavedPost(ApiModel):
    """Body echoed back by create/update; server-side fields may still be null."""

    post_id: Optional[int] = None
    title: str
    content: str = ""
    is_notice: bool = False


class Comment(ApiModel):
    comment_id: Optional[int] = None
    post_id: int
    author_id: Optional[str] = None
    author_name: str = ""
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("author_name", mode="before")
    @classmethod
    def _null_name_is_empty(cls, v):
        return "" if v is None else v


class FileAttachment(ApiModel):
    file_id: int
    post_id: int
    original_filename: str
    file_size: int = Field(ge=0)
    content_type: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_image(self) -> bool:
        return bool(self.content_type and self.content_type.startswith("image/"))


class CurrentUser(ApiModel):
    user_id: str
    user_name: str = ""
    password_change_required: bool = False


class MessageResponse(ApiModel):
    message: str = ""


class LoginResult(MessageResponse):
    user_id: str
    user_name: str = ""


class SignupResult(MessageResponse):
    email: str = ""


class VerifyEmailResult(MessageResponse):
    user_id: str = ""


class ExcelUploadResult(MessageResponse):
    filename: str
    file_size: int = Field(ge=0)
