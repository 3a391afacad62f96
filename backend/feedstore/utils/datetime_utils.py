from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import pytz
from loguru import logger


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def utc_now_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_timezone(tz_name: Optional[str], fallback: str = "UTC"):
    """Resolve a timezone name, falling back when it is missing or unknown."""
    if not tz_name:
        return pytz.timezone(fallback)
    try:
        return pytz.timezone(tz_name)
    except pytz.exceptions.UnknownTimeZoneError:
        logger.warning(f"Unknown timezone '{tz_name}'; falling back to {fallback}")
        return pytz.timezone(fallback)


def convert_timezone(
    tz_name: Optional[str],
    value: Optional[datetime],
    fallback: str = "UTC",
) -> Optional[datetime]:
    """
    Convert a stored timestamp into the given timezone.

    Naive values are stored UTC and get UTC attached before conversion.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(get_timezone(tz_name, fallback))
