"""Timestamp rendering with date patterns and timezones.

Example:
    >>> from datetime import datetime, timezone
    >>> from build_timestamp.formatting import format_timestamp
    >>> format_timestamp(datetime(2024, 3, 1, tzinfo=timezone.utc), "yyyy-MM-dd HH:mm z", "Asia/Tokyo")
    '2024-03-01 09:00 JST'
"""

from datetime import datetime
from typing import Union

from ..exceptions import ShiftOutOfRangeError
from ..utils import ensure_aware
from .pattern import CompiledPattern, PatternField, compile_pattern, validate_pattern
from .timezones import DEFAULT_TIMEZONE, TimezoneLike, available_timezone_ids, is_timezone_known, resolve_timezone, timezone_id

__all__ = [
    # Patterns
    "CompiledPattern",
    "PatternField",
    "compile_pattern",
    "validate_pattern",
    "format_timestamp",
    # Timezones
    "DEFAULT_TIMEZONE",
    "TimezoneLike",
    "resolve_timezone",
    "is_timezone_known",
    "timezone_id",
    "available_timezone_ids",
]


def format_timestamp(instant: datetime, pattern: Union[str, CompiledPattern], timezone: TimezoneLike) -> str:
    """Render an instant with a pattern in a timezone.

    Args:
        instant: Point in time (naive values are read as UTC)
        pattern: Date pattern or compiled pattern
        timezone: Timezone id or tzinfo used for the civil fields and zone letters

    Returns:
        Rendered timestamp

    Raises:
        MalformedPatternError: Pattern cannot be compiled
        ShiftOutOfRangeError: Instant cannot be expressed in the timezone
    """
    compiled = compile_pattern(pattern)
    tz = resolve_timezone(timezone)
    try:
        local = ensure_aware(instant).astimezone(tz)
    except OverflowError as e:
        raise ShiftOutOfRangeError(f"Instant {instant!r} cannot be expressed in {tz}: {e}", {"instant": str(instant)})
    return compiled.render(local)
