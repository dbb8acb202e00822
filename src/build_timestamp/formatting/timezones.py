"""Timezone resolution for timestamp rendering.

Accepts IANA ids ("Europe/Madrid"), custom offset ids ("GMT+08:00", "UTC-5")
and tzinfo objects. Blank ids mean UTC; unknown ids fall back to UTC with a
warning instead of failing the build.
"""

from datetime import timedelta, timezone, tzinfo
import logging
import re
from typing import List, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError, available_timezones

__all__ = [
    "DEFAULT_TIMEZONE",
    "TimezoneLike",
    "resolve_timezone",
    "is_timezone_known",
    "timezone_id",
    "available_timezone_ids",
]

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "UTC"

TimezoneLike = Union[str, tzinfo, None]

_CUSTOM_OFFSET = re.compile(r"(?:GMT|UTC)([+-])(\d{1,2})(?::?(\d{2}))?", re.ASCII)


def _lookup(value: str) -> Optional[tzinfo]:
    """Resolve a timezone id, returning None when it is unknown."""
    match = _CUSTOM_OFFSET.fullmatch(value)
    if match:
        sign, hours, minutes = match.groups()
        hours, minutes = int(hours), int(minutes or 0)
        if hours > 23 or minutes > 59:
            return None
        offset = timedelta(hours=hours, minutes=minutes)
        return timezone(-offset if sign == "-" else offset, f"GMT{sign}{hours:02d}:{minutes:02d}")

    try:
        return ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return None


def resolve_timezone(value: TimezoneLike) -> tzinfo:
    """Resolve a timezone id or object to a tzinfo.

    Args:
        value: tzinfo, timezone id, or None/blank for UTC

    Returns:
        Resolved tzinfo; UTC when the id is blank or unknown
    """
    if isinstance(value, tzinfo):
        return value
    if value is None or not str(value).strip():
        return timezone.utc

    resolved = _lookup(str(value).strip())
    if resolved is None:
        logger.warning(f"Unknown timezone '{value}', falling back to {DEFAULT_TIMEZONE}")
        return timezone.utc
    return resolved


def is_timezone_known(value: TimezoneLike) -> bool:
    """True if value resolves without falling back to UTC (blank counts as known)."""
    if value is None or isinstance(value, tzinfo):
        return True
    if not isinstance(value, str):
        return False
    return not value.strip() or _lookup(value.strip()) is not None


def timezone_id(tz: tzinfo) -> str:
    """Display id of a resolved timezone."""
    if isinstance(tz, ZoneInfo):
        return tz.key
    if tz is timezone.utc:
        return DEFAULT_TIMEZONE
    if isinstance(tz, timezone):
        return tz.tzname(None)
    return str(tz)


def available_timezone_ids() -> List[str]:
    """All IANA ids known to the timezone database, sorted."""
    return sorted(available_timezones())
