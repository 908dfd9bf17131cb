"""
Date helpers for time-window filtering and week bucketing.

All comparisons are done in UTC; naive datetimes are assumed to be UTC.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

TRAILING_WEEK = timedelta(days=7)

# Sentinel for sorting entries that have no timestamp (they sort as oldest)
EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def start_of_month(now: datetime) -> datetime:
    now = as_utc(now)
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def start_of_week(value: datetime) -> datetime:
    """Sunday 00:00 UTC of the week containing `value`."""
    value = as_utc(value)
    # weekday(): Monday=0 ... Sunday=6
    days_since_sunday = (value.weekday() + 1) % 7
    day = value - timedelta(days=days_since_sunday)
    return day.replace(hour=0, minute=0, second=0, microsecond=0)


def sort_key(value: Optional[datetime]) -> datetime:
    return as_utc(value) or EPOCH
