from __future__ import annotations

import json
import logging
from dataclasses import asdict

from board_client.board_api import BoardApi
from board_client.display import post_count_label, show_pagination
from board_client.http_client import HttpClient, HttpConfig
from board_client.post_list import PostListController
from board_client.settings import load_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)

logger = logging.getLogger(__name__)


def main() -> None:
    s = load_settings()

    http = HttpClient(
        HttpConfig(
            base_url=s.base_url,
            timeout_sec=s.request_timeout_sec,
            delay_sec=s.request_delay_sec,
            max_retries=s.max_retries,
            backoff_base_sec=s.backoff_base_sec,
            backoff_max_sec=s.backoff_max_sec,
            user_agent=s.user_agent,
        )
    )
    api = BoardApi(http)

    if s.user_id:
        api.login(s.user_id, s.password)

    controller = PostListController(api)
    if controller.load_user() is None:
        logger.error("Login required. Set BOARD_USER_ID and BOARD_PASSWORD.")
        raise SystemExit(1)

    if s.search_query:
        controller.set_search_query(s.search_query)
    else:
        controller.open()

    if s.list_page != controller.state.current_page:
        controller.set_current_page(s.list_page)

    state = controller.state
    out = {
        "user": controller.user.user_name if controller.user else None,
        "header": post_count_label(state.total_count),
        "search": state.search_query,
        "page": state.current_page,
        "total_pages": state.total_pages,
        "rows": [asdict(r) for r in controller.rows()],
        "pagination": controller.page_links() if show_pagination(state) else [],
    }
    print(json.dumps(out, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
