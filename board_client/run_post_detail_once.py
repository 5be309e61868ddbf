from __future__ import annotations

import json
import logging

from board_client.board_api import BoardApi
from board_client.content import count_inline_images, preview
from board_client.dates import format_datetime
from board_client.display import category_badge
from board_client.http_client import HttpClient, HttpConfig
from board_client.settings import load_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> None:
    s = load_settings()
    if s.post_id <= 0:
        logger.error("Set BOARD_POST_ID to the post to show.")
        raise SystemExit(1)

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

    post = api.get_post(s.post_id)
    comments = api.list_comments(s.post_id)
    files = api.list_files(s.post_id)
    logger.info("Fetched post: post_id=%s comments=%s files=%s", post.post_id, len(comments), len(files))

    out = {
        "post_id": post.post_id,
        "category": category_badge(post.is_notice).text,
        "title": post.title,
        "author": post.author_name,
        "created_at": format_datetime(post.created_at),
        "views": post.view_count,
        "content_preview": preview(post.content, s.preview_chars),
        "inline_images": count_inline_images(post.content),
        "excel": post.excel_filename if post.has_excel else None,
        "files": [
            {"file_id": f.file_id, "name": f.original_filename, "size": f.file_size, "image": f.is_image}
            for f in files
        ],
        "comments": [
            {
                "author": c.author_name,
                "created_at": format_datetime(c.created_at),
                "content": c.content,
            }
            for c in comments
        ],
    }
    print(json.dumps(out, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
