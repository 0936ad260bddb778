"""Date and time utilities for CalPlanner."""

from datetime import date, datetime
from typing import Any, Optional

import pytz


def ensure_utc(dt: datetime) -> datetime:
    """
    Ensure datetime is in UTC.

    Naive datetimes are taken to already be UTC.

    Args:
        dt: Datetime to convert

    Returns:
        UTC datetime
    """
    if dt.tzinfo is None:
        return pytz.utc.localize(dt)
    return dt.astimezone(pytz.utc)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(pytz.utc)


def to_utc(value: Any) -> Optional[datetime]:
    """
    Normalize a feed or stored instant to an aware UTC datetime.

    Accepts datetimes, dates (midnight UTC) and ISO-8601 strings.

    Args:
        value: Value to normalize

    Returns:
        UTC datetime, or None if the value cannot be normalized
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return pytz.utc.localize(datetime(value.year, value.month, value.day))
    if isinstance(value, str) and value.strip():
        try:
            return ensure_utc(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
        except ValueError:
            return None
    return None


def format_iso_utc(dt: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with millisecond precision."""
    utc = ensure_utc(dt)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"
