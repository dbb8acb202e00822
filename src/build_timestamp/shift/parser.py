"""Shift expression tokenizer and validator.

Grammar (no separators between terms, empty string allowed):

    expression := term*
    term       := ["+" | "-"] digit+ unit
    unit       := "Y" | "M" | "D" | "h" | "m" | "s" | "S"

Example:
    >>> parse_shift_expression("-1D+12h").terms
    (ShiftTerm(sign='-', quantity=1, unit=<ShiftUnit.DAY: 'D'>), ...)
    >>> is_shift_expression_valid("5")
    False
"""

from typing import Any, List, Tuple

from ..exceptions import MalformedShiftExpressionError
from .models import MAX_QUANTITY, ShiftExpression, ShiftTerm, ShiftUnit

__all__ = ["parse_shift_expression", "is_shift_expression_valid", "tokenize"]

_DIGITS = frozenset("0123456789")
_UNITS = {unit.value: unit for unit in ShiftUnit}
_MAX_DIGITS = len(str(MAX_QUANTITY))


def tokenize(expression: str) -> Tuple[ShiftTerm, ...]:
    """Split an expression into terms with a single left-to-right scan.

    Args:
        expression: Shift expression string

    Returns:
        Terms in order of appearance

    Raises:
        MalformedShiftExpressionError: Input deviates from the grammar
    """
    terms: List[ShiftTerm] = []
    pos = 0
    length = len(expression)

    while pos < length:
        sign = "+"
        if expression[pos] in "+-":
            sign = expression[pos]
            pos += 1

        digits_start = pos
        while pos < length and expression[pos] in _DIGITS:
            pos += 1

        if pos == digits_start:
            found = repr(expression[pos]) if pos < length else "end of expression"
            raise MalformedShiftExpressionError(expression, pos, f"expected digits, found {found}")
        if pos == length:
            raise MalformedShiftExpressionError(expression, pos, "quantity is missing a unit letter")

        unit = _UNITS.get(expression[pos])
        if unit is None:
            raise MalformedShiftExpressionError(expression, pos, f"unknown unit {expression[pos]!r}")

        # Leading zeros do not count toward the quantity limit
        digits = expression[digits_start:pos].lstrip("0") or "0"
        if len(digits) > _MAX_DIGITS or int(digits) > MAX_QUANTITY:
            raise MalformedShiftExpressionError(expression, digits_start, f"quantity exceeds {MAX_QUANTITY}")

        terms.append(ShiftTerm(sign=sign, quantity=int(digits), unit=unit))
        pos += 1

    return tuple(terms)


def parse_shift_expression(expression: Any) -> ShiftExpression:
    """Parse a shift expression into its ordered terms.

    Args:
        expression: Shift expression string, or an already parsed ShiftExpression

    Returns:
        ShiftExpression holding the source text and the terms

    Raises:
        MalformedShiftExpressionError: Not a string or outside the grammar
    """
    if isinstance(expression, ShiftExpression):
        return expression
    if not isinstance(expression, str):
        raise MalformedShiftExpressionError(expression, 0, f"expected a string, got {type(expression).__name__}")

    return ShiftExpression(source=expression, terms=tokenize(expression))


def is_shift_expression_valid(expression: Any) -> bool:
    """Check an expression against the grammar without evaluating it.

    Never raises: any input, including None and non-strings, yields a bool.
    """
    if not isinstance(expression, str):
        return False
    try:
        tokenize(expression)
    except MalformedShiftExpressionError:
        return False
    return True
