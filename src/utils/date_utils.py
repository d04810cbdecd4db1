"""Date and time utility functions."""
from datetime import datetime, timezone
from typing import Any, Optional

DISPLAY_FORMAT = "%d/%m/%Y %H:%M:%S"


def now_iso() -> str:
    """
    Current instant as an ISO 8601 string in UTC.

    Returns:
        String such as "2025-11-15T09:30:00.123456+00:00"
    """
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a stored creation timestamp.

    Args:
        value: ISO 8601 string (a trailing "Z" is accepted) or datetime

    Returns:
        Timezone-aware datetime, or None if the value is missing or malformed.
        Naive values are assumed to be UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_display_time(value: Any) -> str:
    """
    Render a timestamp in local display format (DD/MM/YYYY HH:MM:SS).

    Args:
        value: Stored timestamp

    Returns:
        Formatted local time, or "" when the value cannot be parsed
    """
    parsed = parse_timestamp(value)
    if parsed is None:
        return ""
    return parsed.astimezone().strftime(DISPLAY_FORMAT)


def format_generated_at(moment: Optional[datetime] = None) -> str:
    """Local display string for report generation time."""
    moment = moment or datetime.now().astimezone()
    return moment.strftime(DISPLAY_FORMAT)
