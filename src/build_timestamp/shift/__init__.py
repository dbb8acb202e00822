"""Time-shift expressions: grammar validation, parsing and evaluation.

Example:
    >>> from build_timestamp.shift import is_shift_expression_valid, evaluate_shift
    >>> is_shift_expression_valid("+1D-2h")
    True
    >>> evaluate_shift(base, "-1D", "UTC")
"""

from .evaluator import apply_term, evaluate_shift
from .models import MAX_QUANTITY, ShiftExpression, ShiftTerm, ShiftUnit
from .parser import is_shift_expression_valid, parse_shift_expression, tokenize

__all__ = [
    # Models
    "MAX_QUANTITY",
    "ShiftUnit",
    "ShiftTerm",
    "ShiftExpression",
    # Parsing
    "tokenize",
    "parse_shift_expression",
    "is_shift_expression_valid",
    # Evaluation
    "apply_term",
    "evaluate_shift",
]
