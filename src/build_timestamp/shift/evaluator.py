"""Apply shift expressions to instants.

Calendar units (Y, M, D) move civil fields in the target timezone, so "+1M"
from Jan 31 lands on the last day of February and "+1D" keeps the wall clock
time across a DST change. Absolute units (h, m, s, S) add fixed durations in
UTC, so "+5h" is always exactly five hours later.

Example:
    >>> base = datetime(2024, 1, 31, 12, 0, tzinfo=timezone.utc)
    >>> evaluate_shift(base, "+1M", timezone.utc)
    datetime.datetime(2024, 2, 29, 12, 0, tzinfo=datetime.timezone.utc)
"""

from datetime import datetime, timedelta, timezone, tzinfo
import logging
from typing import Union

from dateutil.relativedelta import relativedelta

from ..exceptions import ShiftOutOfRangeError
from ..formatting.timezones import TimezoneLike, resolve_timezone
from ..utils import ensure_aware
from .models import ShiftExpression, ShiftTerm, ShiftUnit
from .parser import parse_shift_expression

__all__ = ["evaluate_shift", "apply_term"]

logger = logging.getLogger(__name__)

_CALENDAR_FIELDS = {
    ShiftUnit.YEAR: "years",
    ShiftUnit.MONTH: "months",
    ShiftUnit.DAY: "days",
}

_ABSOLUTE_FIELDS = {
    ShiftUnit.HOUR: "hours",
    ShiftUnit.MINUTE: "minutes",
    ShiftUnit.SECOND: "seconds",
    ShiftUnit.MILLISECOND: "milliseconds",
}


def apply_term(current: datetime, term: ShiftTerm, tz: tzinfo) -> datetime:
    """Apply one term to an aware datetime.

    Args:
        current: Aware datetime to shift
        term: Term to apply
        tz: Timezone whose civil calendar drives Y/M/D arithmetic

    Returns:
        Shifted datetime expressed in tz

    Raises:
        ShiftOutOfRangeError: Result is outside the datetime range
    """
    amount = term.signed_quantity
    try:
        if term.unit.is_calendar:
            shifted = current.astimezone(tz) + relativedelta(**{_CALENDAR_FIELDS[term.unit]: amount})
            # Round trip through UTC resolves civil times that fall in a DST gap
            return shifted.astimezone(timezone.utc).astimezone(tz)

        delta = timedelta(**{_ABSOLUTE_FIELDS[term.unit]: amount})
        return (current.astimezone(timezone.utc) + delta).astimezone(tz)
    except (OverflowError, ValueError) as e:
        raise ShiftOutOfRangeError(f"Shift {term} from {current.isoformat()} is out of range: {e}", {"term": str(term)})


def evaluate_shift(base: datetime, expression: Union[str, ShiftExpression], timezone: TimezoneLike) -> datetime:
    """Shift an instant by an expression.

    Terms apply left to right, each on the previous result. Zero-quantity
    terms and the empty expression leave the instant unchanged.

    Args:
        base: Base instant (naive values are read as UTC)
        expression: Shift expression string or parsed ShiftExpression
        timezone: Timezone id or tzinfo for calendar arithmetic

    Returns:
        Shifted instant as an aware datetime in the given timezone

    Raises:
        MalformedShiftExpressionError: Expression outside the grammar
        ShiftOutOfRangeError: Result is outside the datetime range
    """
    parsed = parse_shift_expression(expression)
    tz = resolve_timezone(timezone)

    try:
        current = ensure_aware(base).astimezone(tz)
    except OverflowError as e:
        raise ShiftOutOfRangeError(f"Base instant {base!r} cannot be expressed in {tz}: {e}")

    if parsed.is_identity:
        return current

    for term in parsed.terms:
        if term.quantity == 0:
            continue
        current = apply_term(current, term, tz)

    logger.debug(f"Shifted {base.isoformat()} by '{parsed}' -> {current.isoformat()}")
    return current
