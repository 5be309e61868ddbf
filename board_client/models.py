from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from board_client.schemas import PostSummary

PAGE_SIZE = 20


@dataclass(frozen=True)
class PageState:
    """
    Post list state for one list-view session.

    posts/total_pages/total_count/current_page/search_query are replaced only
    by a fetch response, so the page always belongs to the query it was
    fetched with; latest_request_id identifies the only response allowed to
    do so.
    """

    posts: tuple[PostSummary, ...] = ()
    current_page: int = 1
    total_pages: int = 1
    total_count: int = 0
    search_query: str = ""
    page_size: int = PAGE_SIZE
    latest_request_id: int = 0

    @property
    def last_page(self) -> int:
        return max(self.total_pages, 1)


@dataclass(frozen=True)
class FetchRequest:
    """One issued GET /api/posts call."""

    request_id: int
    page: int
    size: int
    search: str


@dataclass(frozen=True)
class Badge:
    text: str
    css_class: str


@dataclass(frozen=True)
class PostRow:
    """Display-ready list row."""

    post_id: int
    number: str
    badge: Badge
    title: str
    comment_suffix: str
    has_files: bool
    popular_badge: Optional[Badge]
    is_new: bool
    author_name: str
    author_initial: str
    view_count: int
    created_date: str


@dataclass(frozen=True)
class DownloadedFile:
    filename: str
    content_type: str
    content: bytes
