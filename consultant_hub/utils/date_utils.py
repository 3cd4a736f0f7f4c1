"""Date and time utility functions."""

from typing import Optional, Union
from datetime import date, datetime, timezone


def parse_iso_datetime(date_str: str, default_tz: timezone = timezone.utc) -> Optional[datetime]:
    """
    Parse ISO format datetime string with timezone handling.

    Handles:
    - ISO format with timezone: "2025-01-10T10:00:00Z" or "2025-01-10T10:00:00+00:00"
    - ISO format without timezone: "2025-01-10T10:00:00"
    - Date only: "2025-01-10"

    Args:
        date_str: ISO format datetime string
        default_tz: Timezone to use if none is specified (default: UTC)

    Returns:
        Parsed datetime object with timezone, or None if parsing fails
    """
    if not date_str:
        return None

    try:
        if 'T' in date_str:
            dt = datetime.fromisoformat(date_str.replace('Z', '+00:00'))
        else:
            dt = datetime.fromisoformat(date_str)

        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=default_tz)
        else:
            dt = dt.astimezone(default_tz)

        return dt
    except (ValueError, AttributeError, TypeError):
        return None


def format_date_display(value: Union[str, date, datetime, None], default: str = "Unknown date") -> str:
    """
    Format a date, datetime or ISO string as "YYYY-MM-DD" for prompt context lines.

    Args:
        value: Date, datetime or ISO format string to format
        default: Returned when value is missing or cannot be parsed

    Returns:
        Formatted date string
    """
    if not value:
        return default

    if isinstance(value, str):
        value = parse_iso_datetime(value)
        if value is None:
            return default

    try:
        return value.strftime("%Y-%m-%d")
    except (AttributeError, ValueError, TypeError):
        return default
