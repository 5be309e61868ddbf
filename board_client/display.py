from __future__ import annotations

from datetime import date
from typing import Optional, Union

from board_client.dates import format_date, is_today
from board_client.models import PAGE_SIZE, Badge, PageState, PostRow
from board_client.schemas import PostSummary

NOTICE_LABEL = "공지"
NOTICE_BADGE = Badge(text="공지사항", css_class="badge-notice")
FREE_BADGE = Badge(text="자유게시판", css_class="badge-free")
POPULAR_BADGE = Badge(text="인기", css_class="badge-popular")

POPULAR_VIEW_COUNT = 100
WINDOW_RADIUS = 2
ELLIPSIS = "..."

PageLink = Union[int, str]


def row_number(
    is_notice: bool,
    index: int,
    current_page: int,
    total_count: int,
    page_size: int = PAGE_SIZE,
) -> str:
    """
    Label for the number column.

    Non-notice rows count down from total_count across pages, so the last row
    of page N is one above the first row of page N+1.
    """
    if is_notice:
        return NOTICE_LABEL
    return str(total_count - ((current_page - 1) * page_size + index))


def category_badge(is_notice: bool) -> Badge:
    return NOTICE_BADGE if is_notice else FREE_BADGE


def author_initial(name: Optional[str]) -> str:
    return name[0] if name else "?"


def popular_badge(view_count: int) -> Optional[Badge]:
    return POPULAR_BADGE if view_count > POPULAR_VIEW_COUNT else None


def comment_suffix(comment_count: int) -> str:
    return f"({comment_count})" if comment_count > 0 else ""


def post_count_label(total_count: int) -> str:
    return f"전체 {total_count}개의 게시글"


def pagination_window(current_page: int, total_pages: int) -> list[PageLink]:
    """
    Page links to render.

    Always page 1 and total_pages, every page within WINDOW_RADIUS of
    current_page, and a single ELLIPSIS for each skipped run.
    """
    out: list[PageLink] = []
    for page in range(1, total_pages + 1):
        visible = (
            page == 1
            or page == total_pages
            or current_page - WINDOW_RADIUS <= page <= current_page + WINDOW_RADIUS
        )
        if visible:
            out.append(page)
        elif not out or out[-1] != ELLIPSIS:
            out.append(ELLIPSIS)
    return out


def show_pagination(state: PageState) -> bool:
    return state.total_pages > 1


def has_previous(state: PageState) -> bool:
    return state.current_page > 1


def has_next(state: PageState) -> bool:
    return state.current_page < state.last_page


def build_row(
    post: PostSummary,
    index: int,
    state: PageState,
    today: Optional[date] = None,
) -> PostRow:
    return PostRow(
        post_id=post.post_id,
        number=row_number(post.is_notice, index, state.current_page, state.total_count, state.page_size),
        badge=category_badge(post.is_notice),
        title=post.title,
        comment_suffix=comment_suffix(post.comment_count),
        has_files=post.file_count > 0,
        popular_badge=popular_badge(post.view_count),
        is_new=is_today(post.created_at, today=today),
        author_name=post.author_name,
        author_initial=author_initial(post.author_name),
        view_count=post.view_count,
        created_date=format_date(post.created_at),
    )


def build_rows(state: PageState, today: Optional[date] = None) -> list[PostRow]:
    """Rows for the current page; an empty page renders as an empty list."""
    return [build_row(post, i, state, today=today) for i, post in enumerate(state.posts)]
