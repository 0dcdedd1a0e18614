from datetime import datetime, timezone as dt_timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tasknest.core.config import settings


def get_zoneinfo() -> Optional[ZoneInfo]:
    tz_name = getattr(settings, "DEFAULT_TIMEZONE", None)
    if not tz_name:
        return None
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        return None


def utcnow() -> datetime:
    """Current time as UTC-naive, the representation used for storage."""
    return datetime.now(dt_timezone.utc).replace(tzinfo=None)


def to_utc_naive(dt: datetime | None) -> datetime | None:
    """
    Normalize any datetime to UTC-naive (tzinfo=None) for consistent storage/comparison.
    - Aware datetimes are converted to UTC and tzinfo is stripped
    - Naive datetimes are returned as-is (assumed UTC)
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(dt_timezone.utc).replace(tzinfo=None)


def to_local(dt: datetime | None) -> datetime | None:
    """Attach UTC to a stored naive value and convert it to settings.DEFAULT_TIMEZONE."""
    if dt is None:
        return None
    aware = dt.replace(tzinfo=dt_timezone.utc) if dt.tzinfo is None else dt
    tz = get_zoneinfo()
    return aware.astimezone(tz) if tz else aware


def format_long_date(dt: datetime) -> str:
    """e.g. ``October 8, 2026``"""
    return f"{dt:%B} {dt.day}, {dt.year}"


def format_long_datetime(dt: datetime) -> str:
    """e.g. ``Thursday, October 8, 2026 at 09:05 AM``"""
    return f"{dt:%A}, {format_long_date(dt)} at {dt:%I:%M %p}"
