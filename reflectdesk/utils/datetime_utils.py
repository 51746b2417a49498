"""
Centralized datetime and timezone utilities.

Timestamps are stored as naive datetimes in the configured timezone; every
datetime coming from a client goes through to_naive_local before it is
persisted.
"""

from datetime import datetime
from typing import Optional
import pytz

from config import settings


def get_local_tz() -> pytz.BaseTzInfo:
    """Get the configured local timezone."""
    return pytz.timezone(settings.timezone)


def get_local_now() -> datetime:
    """Get current time in local timezone (naive)."""
    local_tz = get_local_tz()
    return datetime.now(local_tz).replace(tzinfo=None)


def to_naive_local(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Convert any datetime to naive local time for database storage.

    Aware datetimes (e.g. ISO strings with a trailing Z sent by the browser)
    are converted to the local timezone and stripped of tzinfo. Naive ones
    are assumed to already be local.
    """
    if dt is None:
        return None

    if dt.tzinfo is not None:
        local_dt = dt.astimezone(get_local_tz())
        return local_dt.replace(tzinfo=None)

    return dt
