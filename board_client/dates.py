from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Union

from pydantic import TypeAdapter

_DATETIME = TypeAdapter(datetime)

Timestamp = Union[str, int, float, datetime, None]


def to_datetime(value: Timestamp) -> datetime:
    """
    Parse a board timestamp into an aware datetime.

    Accepted:
    - ISO-8601 string ("Z", "+09:00", or naive = local time)
    - datetime (naive = local time)
    - int/float epoch milliseconds

    Raises:
        ValueError: empty or unparseable input (pydantic.ValidationError is one)
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f"Not a timestamp: {value!r}")

    if isinstance(value, datetime):
        return value if value.tzinfo else value.astimezone()

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError) as e:
            raise ValueError(f"Epoch millis out of range: {value!r}") from e

    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            raise ValueError("Empty timestamp")
        # Same parser as the wire schemas, so list rows and helpers agree
        dt = _DATETIME.validate_python(raw)
        return dt if dt.tzinfo else dt.astimezone()

    raise ValueError(f"Unsupported timestamp type: {type(value).__name__}")


def format_date(value: Timestamp) -> str:
    """YYYY.MM.DD of the UTC calendar date; "" for empty input."""
    if value is None or value == "":
        return ""
    return to_datetime(value).astimezone(timezone.utc).strftime("%Y.%m.%d")


def format_datetime(value: Timestamp) -> str:
    """YYYY-MM-DD HH:MM:SS in UTC; "" for empty input."""
    if value is None or value == "":
        return ""
    return to_datetime(value).astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def is_today(value: Timestamp, today: Optional[date] = None) -> bool:
    """
    True when value falls on the current local calendar date.

    Never raises: missing or unparseable input is simply not today.
    """
    if not value:
        return False
    try:
        local = to_datetime(value).astimezone()
    except (ValueError, OverflowError, OSError):
        return False
    return local.date() == (today or date.today())
