"""Date pattern compiler and renderer.

Patterns use SimpleDateFormat letters, the syntax build timestamp users
already write ("yyyy-MM-dd HH:mm:ss z"). A pattern compiles to an immutable
token tuple that renders any aware datetime. Month and day names are fixed
English so output does not depend on the process locale.

Supported letters:
------------------
    G era           y year         Y ISO week year   M/L month
    w ISO week      W week/month   D day of year     d day of month
    F weekday no.   E day name     u ISO weekday     a AM/PM
    H hour 0-23     k hour 1-24    K hour 0-11       h hour 1-12
    m minute        s second       S millisecond
    z zone name     Z +hhmm        X ISO 8601 offset (X, XX, XXX)

Text between single quotes is literal; '' is a quote. Any other unquoted ASCII
letter is rejected.

Example:
    >>> compile_pattern("yyyy-MM-dd'T'HH:mm").render(datetime(2024, 3, 1, tzinfo=timezone.utc))
    '2024-03-01T00:00'
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Tuple, Union

from ..exceptions import MalformedPatternError

__all__ = ["PatternField", "CompiledPattern", "compile_pattern", "validate_pattern"]

_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


@dataclass(frozen=True)
class PatternField:
    """A run of one pattern letter, e.g. "yyyy" -> PatternField("y", 4)."""

    letter: str
    count: int


Token = Union[str, PatternField]


# =============================================================================
# Field Renderers
# =============================================================================


def _number(value: int, count: int) -> str:
    return str(value).zfill(count)


def _year(value: int, count: int) -> str:
    if count == 2:
        return f"{value % 100:02d}"
    return _number(value, count)


def _text(index: int, names: Tuple[str, ...], count: int) -> str:
    name = names[index]
    return name if count >= 4 else name[:3]


def _month(local: datetime, count: int) -> str:
    if count >= 3:
        return _text(local.month - 1, _MONTHS, count)
    return _number(local.month, count)


def _week_of_month(local: datetime, count: int) -> str:
    first_weekday = date(local.year, local.month, 1).weekday()
    return _number((local.day + first_weekday - 1) // 7 + 1, count)


def _offset_parts(local: datetime) -> Tuple[str, int, int]:
    offset = local.utcoffset() or timedelta(0)
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    return sign, minutes // 60, minutes % 60


def _rfc822_zone(local: datetime, count: int) -> str:
    sign, hours, minutes = _offset_parts(local)
    return f"{sign}{hours:02d}{minutes:02d}"


def _iso_zone(local: datetime, count: int) -> str:
    if not local.utcoffset():
        return "Z"
    sign, hours, minutes = _offset_parts(local)
    if count == 1:
        return f"{sign}{hours:02d}"
    if count == 2:
        return f"{sign}{hours:02d}{minutes:02d}"
    return f"{sign}{hours:02d}:{minutes:02d}"


def _zone_name(local: datetime, count: int) -> str:
    name = local.tzname()
    if name:
        return name
    sign, hours, minutes = _offset_parts(local)
    return f"GMT{sign}{hours:02d}:{minutes:02d}"


_RENDERERS: Dict[str, Callable[[datetime, int], str]] = {
    "G": lambda local, count: "AD",
    "y": lambda local, count: _year(local.year, count),
    "Y": lambda local, count: _year(local.isocalendar().year, count),
    "M": _month,
    "L": _month,
    "w": lambda local, count: _number(local.isocalendar().week, count),
    "W": _week_of_month,
    "D": lambda local, count: _number(local.timetuple().tm_yday, count),
    "d": lambda local, count: _number(local.day, count),
    "F": lambda local, count: _number((local.day - 1) // 7 + 1, count),
    "E": lambda local, count: _text(local.weekday(), _WEEKDAYS, count),
    "u": lambda local, count: _number(local.isoweekday(), count),
    "a": lambda local, count: "AM" if local.hour < 12 else "PM",
    "H": lambda local, count: _number(local.hour, count),
    "k": lambda local, count: _number(local.hour or 24, count),
    "K": lambda local, count: _number(local.hour % 12, count),
    "h": lambda local, count: _number(local.hour % 12 or 12, count),
    "m": lambda local, count: _number(local.minute, count),
    "s": lambda local, count: _number(local.second, count),
    "S": lambda local, count: _number(local.microsecond // 1000, count),
    "z": _zone_name,
    "Z": _rfc822_zone,
    "X": _iso_zone,
}


# =============================================================================
# Compilation
# =============================================================================


@dataclass(frozen=True)
class CompiledPattern:
    """Pattern source plus its literal and field tokens."""

    pattern: str
    tokens: Tuple[Token, ...]

    def render(self, local: datetime) -> str:
        """Render an aware datetime already converted to the target timezone."""
        parts = []
        for token in self.tokens:
            if isinstance(token, PatternField):
                parts.append(_RENDERERS[token.letter](local, token.count))
            else:
                parts.append(token)
        return "".join(parts)


def _read_quoted(pattern: str, start: int) -> Tuple[str, int]:
    """Read quoted text starting after the opening quote at start.

    Returns:
        (literal text, index just past the closing quote)
    """
    text: List[str] = []
    pos = start + 1
    while pos < len(pattern):
        if pattern[pos] == "'":
            if pattern.startswith("''", pos):
                text.append("'")
                pos += 2
                continue
            return "".join(text), pos + 1
        text.append(pattern[pos])
        pos += 1
    raise MalformedPatternError(pattern, f"unterminated quote at position {start}")


def compile_pattern(pattern: Any) -> CompiledPattern:
    """Compile a date pattern into render tokens.

    Args:
        pattern: SimpleDateFormat-style pattern

    Returns:
        CompiledPattern

    Raises:
        MalformedPatternError: Blank pattern, illegal letter or unterminated quote
    """
    if isinstance(pattern, CompiledPattern):
        return pattern
    if not isinstance(pattern, str) or not pattern.strip():
        raise MalformedPatternError(pattern, "pattern is blank")

    tokens: List[Token] = []
    literal: List[str] = []
    pos = 0

    while pos < len(pattern):
        char = pattern[pos]

        if char == "'":
            if pattern.startswith("''", pos):
                literal.append("'")
                pos += 2
            else:
                text, pos = _read_quoted(pattern, pos)
                literal.append(text)
            continue

        if char.isascii() and char.isalpha():
            if char not in _RENDERERS:
                raise MalformedPatternError(pattern, f"illegal pattern letter {char!r} at position {pos}")
            count = 1
            while pos + count < len(pattern) and pattern[pos + count] == char:
                count += 1
            if char == "X" and count > 3:
                raise MalformedPatternError(pattern, f"too many pattern letters 'X' at position {pos}")

            if literal:
                tokens.append("".join(literal))
                literal = []
            tokens.append(PatternField(char, count))
            pos += count
            continue

        literal.append(char)
        pos += 1

    if literal:
        tokens.append("".join(literal))

    return CompiledPattern(pattern=pattern, tokens=tuple(tokens))


def validate_pattern(pattern: Any) -> bool:
    """True iff the pattern compiles. Blank patterns are rejected."""
    try:
        compile_pattern(pattern)
    except MalformedPatternError:
        return False
    return True
