from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class BoardSettings(BaseSettings):
    """
    Environment-driven settings for the board API client and CLI scripts.
    """

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    # ---- API ----
    base_url: str = Field(default="http://localhost:8080", alias="BOARD_BASE_URL")

    request_timeout_sec: float = Field(default=10.0, alias="BOARD_REQUEST_TIMEOUT_SEC")
    request_delay_sec: float = Field(default=0.0, alias="BOARD_REQUEST_DELAY_SEC")

    # 0 keeps the board's original behavior: no retries on the read path
    max_retries: int = Field(default=0, alias="BOARD_MAX_RETRIES")
    backoff_base_sec: float = Field(default=0.5, alias="BOARD_BACKOFF_BASE_SEC")
    backoff_max_sec: float = Field(default=8.0, alias="BOARD_BACKOFF_MAX_SEC")

    user_agent: str = Field(default="board-client/0.1", alias="BOARD_USER_AGENT")

    # ---- Session ----
    user_id: str = Field(default="", alias="BOARD_USER_ID")
    password: str = Field(default="", alias="BOARD_PASSWORD")

    # ---- Post list ----
    list_page: int = Field(default=1, alias="BOARD_LIST_PAGE")
    search_query: str = Field(default="", alias="BOARD_SEARCH")

    # ---- Post detail ----
    post_id: int = Field(default=0, alias="BOARD_POST_ID")
    preview_chars: int = Field(default=120, alias="BOARD_PREVIEW_CHARS")


def load_settings() -> BoardSettings:
    return BoardSettings()
