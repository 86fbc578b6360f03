"""
Timezone utilities for the creator booking platform.

All instants are persisted in UTC. Creators carry an IANA timezone name used
only for presentation.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

import pytz

if TYPE_CHECKING:
    from creatorcall.models.creator import Creator

DEFAULT_TIMEZONE = "UTC"


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to aware UTC.

    Naive values are treated as UTC, which is how SQLite hands back
    ``DateTime(timezone=True)`` columns.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def is_valid_timezone(name: str) -> bool:
    try:
        pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        return False
    return True


def get_creator_timezone(creator: "Creator") -> pytz.BaseTzInfo:
    """
    Get the creator's timezone.

    Args:
        creator: Creator record

    Returns:
        Creator's timezone as pytz timezone object (UTC when unset)
    """
    return pytz.timezone(creator.timezone or DEFAULT_TIMEZONE)


def localize_for_creator(local_dt: datetime, creator: "Creator") -> datetime:
    """
    Interpret a naive wall-clock datetime in the creator's timezone.

    Args:
        local_dt: Naive local datetime (e.g. "tomorrow at 09:00")
        creator: Creator record

    Returns:
        Aware UTC datetime
    """
    return get_creator_timezone(creator).localize(local_dt).astimezone(timezone.utc)
