from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

import requests
from pydantic import ValidationError

from board_client.board_api import BoardApi
from board_client.display import PageLink, build_rows, pagination_window
from board_client.models import FetchRequest, PageState, PostRow
from board_client.schemas import CurrentUser, PostPage

logger = logging.getLogger(__name__)


# -------------------------
# Reducer (pure, unit-test target)
# -------------------------


def clamp_page(page: int, last_page: int) -> int:
    return min(max(page, 1), max(last_page, 1))


def request_page(state: PageState, page: int) -> tuple[PageState, FetchRequest]:
    """
    Issue a fetch for page with the current search query.

    The page is clamped into [1, last_page]. Visible fields stay as they are
    until the matching response arrives.
    """
    request_id = state.latest_request_id + 1
    request = FetchRequest(
        request_id=request_id,
        page=clamp_page(page, state.last_page),
        size=state.page_size,
        search=state.search_query,
    )
    return replace(state, latest_request_id=request_id), request


def change_search(state: PageState, query: str) -> tuple[PageState, FetchRequest]:
    """
    New query always starts from page 1: one request, never one for the old page.

    search_query keeps describing the rows on screen. It switches to the new
    query together with current_page when the response is applied, so a failed
    search leaves the old (page, query) pair intact.
    """
    request_id = state.latest_request_id + 1
    request = FetchRequest(request_id=request_id, page=1, size=state.page_size, search=query)
    return replace(state, latest_request_id=request_id), request


def receive_page(state: PageState, request: FetchRequest, page: PostPage) -> PageState:
    """
    Apply a Posts API response.

    Only the response to the most recently issued request is applied; older
    ones are dropped so a slow response cannot pair a page with the wrong query.
    """
    if request.request_id != state.latest_request_id:
        logger.debug(
            "Dropping stale post list response: request_id=%s latest=%s page=%s",
            request.request_id,
            state.latest_request_id,
            request.page,
        )
        return state

    total_pages = max(page.total_pages, 1)
    return replace(
        state,
        posts=tuple(page.posts),
        total_pages=total_pages,
        total_count=page.total_count,
        current_page=clamp_page(page.current_page, total_pages),
        search_query=request.search,
    )


def fetch_failed(state: PageState, request: FetchRequest, error: Exception) -> PageState:
    # Last good page stays on screen
    return state


# -------------------------
# Controller
# -------------------------


class PostListController:
    """
    Keeps the post list consistent with (current page, search query) and the
    server's answer.

    - One fetch per page change or query change
    - Fetch failures are logged and leave the last good state in place
    - Responses are validated (PostPage) before they touch the state
    """

    def __init__(self, api: BoardApi):
        self.api = api
        self.state = PageState()
        self.user: Optional[CurrentUser] = None

    def load_user(self) -> Optional[CurrentUser]:
        """
        Gate for the list view: None means the caller should send the user to login.
        """
        try:
            self.user = self.api.me()
        except requests.RequestException as e:
            logger.warning("Not logged in; list view unavailable: err=%s", e)
            self.user = None
        return self.user

    def open(self) -> PageState:
        """Initial load: page 1 with the current query."""
        return self.set_current_page(1)

    def set_search_query(self, query: str) -> PageState:
        if query == self.state.search_query:
            return self.state
        self.state, request = change_search(self.state, query)
        return self._fetch_posts(request)

    def set_current_page(self, page: int) -> PageState:
        self.state, request = request_page(self.state, page)
        return self._fetch_posts(request)

    def next_page(self) -> PageState:
        if self.state.current_page >= self.state.last_page:
            return self.state
        return self.set_current_page(self.state.current_page + 1)

    def previous_page(self) -> PageState:
        if self.state.current_page <= 1:
            return self.state
        return self.set_current_page(self.state.current_page - 1)

    def refresh(self) -> PageState:
        return self.set_current_page(self.state.current_page)

    def rows(self, today: Optional[date] = None) -> list[PostRow]:
        return build_rows(self.state, today=today)

    def page_links(self) -> list[PageLink]:
        return pagination_window(self.state.current_page, self.state.total_pages)

    def _fetch_posts(self, request: FetchRequest) -> PageState:
        try:
            page = self.api.list_posts(page=request.page, size=request.size, search=request.search)
        except (requests.RequestException, ValidationError) as e:
            logger.error(
                "Post list fetch failed: page=%s search=%r err=%s",
                request.page,
                request.search,
                e,
            )
            self.state = fetch_failed(self.state, request, e)
            return self.state

        self.state = receive_page(self.state, request, page)
        logger.info(
            "Post list loaded: page=%s/%s total=%s search=%r",
            self.state.current_page,
            self.state.total_pages,
            self.state.total_count,
            self.state.search_query,
        )
        return self.state
