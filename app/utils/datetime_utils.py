"""Datetime utility functions for consistent timezone handling."""

from datetime import date, datetime, timedelta, timezone
from typing import List


def get_current_utc_datetime() -> datetime:
    """
    Get current datetime in UTC timezone.

    Returns:
        datetime: Current UTC datetime with timezone info

    Example:
        >>> now = get_current_utc_datetime()
        >>> now.tzinfo
        datetime.timezone.utc
    """
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite hands timestamps back without tzinfo)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def build_day_range(start: datetime, end: datetime) -> List[date]:
    """Return a list of calendar days spanning start -> end (inclusive)."""

    days: List[date] = []
    cursor = start.date()
    end_date = end.date()
    while cursor <= end_date:
        days.append(cursor)
        cursor += timedelta(days=1)
    return days
