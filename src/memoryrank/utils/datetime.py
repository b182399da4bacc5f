"""Datetime utilities for consistent timestamp handling.

All timestamps inside memoryrank are timezone-aware UTC. Naive values coming
from callers are interpreted as UTC rather than local time.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Get current UTC datetime.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to a naive datetime, or convert an aware one to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def start_of_day(dt: datetime) -> datetime:
    """Midnight of the calendar day containing ``dt`` (timezone preserved)."""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def parse_datetime_utc(dt_str: Optional[str]) -> Optional[datetime]:
    """Parse datetime string and ensure it's timezone-aware (UTC).

    Args:
        dt_str: ISO format datetime string, or None

    Returns:
        Timezone-aware datetime in UTC, or None if input is None
    """
    if not dt_str:
        return None
    return ensure_utc(datetime.fromisoformat(dt_str))
