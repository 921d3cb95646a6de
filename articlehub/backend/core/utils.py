"""
Core Utilities.

Shared utility functions used across the backend.
"""

from datetime import datetime, timezone

PREVIEW_MAX_LENGTH = 200


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive and assumed
    to be UTC.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def make_preview(preview: str | None, body: str | None) -> str:
    """Derive the stored article preview: explicit preview or body, cut to 200 chars."""
    return (preview or body or "")[:PREVIEW_MAX_LENGTH]


def truncate(text: str | None, length: int, suffix: str = "...") -> str:
    """Cut text to length characters, appending suffix when something was cut."""
    if not text:
        return ""
    if len(text) <= length:
        return text
    return text[:length] + suffix


def format_date(value: datetime | None) -> str:
    """Render a date the way admin messages show it (DD.MM.YYYY)."""
    if value is None:
        return "∞"
    return value.strftime("%d.%m.%Y")
