"""Exception hierarchy for build timestamp evaluation.

All errors raised by this package derive from BuildTimestampError so callers
(configuration forms, the evaluation pass, the CLI) can catch one base type.

Hierarchy:
----------
- BuildTimestampError
  ├── MalformedShiftExpressionError
  ├── ShiftOutOfRangeError
  ├── MalformedPatternError
  ├── InvalidPropertyKeyError
  └── ConfigValidationError
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

__all__ = [
    "BuildTimestampError",
    "MalformedShiftExpressionError",
    "ShiftOutOfRangeError",
    "MalformedPatternError",
    "InvalidPropertyKeyError",
    "ConfigIssue",
    "ConfigValidationError",
]


class BuildTimestampError(Exception):
    """Base error for the build timestamp package.

    Attributes:
        message: Human-readable description
        context: Extra diagnostic values (expression, pattern, key, ...)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class MalformedShiftExpressionError(BuildTimestampError):
    """Shift expression does not follow the [sign]digits unit grammar."""

    def __init__(self, expression: Any, position: int, reason: str):
        super().__init__(
            f"Malformed shift expression {expression!r} at position {position}: {reason}",
            {"expression": expression, "position": position},
        )
        self.expression = expression
        self.position = position


class ShiftOutOfRangeError(BuildTimestampError):
    """Shifting or converting an instant leaves the representable datetime range."""

    pass


class MalformedPatternError(BuildTimestampError):
    """Date format pattern cannot be compiled."""

    def __init__(self, pattern: Any, reason: str):
        super().__init__(f"Malformed pattern {pattern!r}: {reason}", {"pattern": pattern})
        self.pattern = pattern


class InvalidPropertyKeyError(BuildTimestampError):
    """Property key is not a non-empty word identifier."""

    def __init__(self, key: Any):
        super().__init__(f"Invalid property key {key!r}: must match \\w+", {"key": key})
        self.key = key


class ConfigIssue(BaseModel):
    """One problem found while building a configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    field: str
    message: str


class ConfigValidationError(BuildTimestampError):
    """Configuration data failed validation.

    Carries every issue found, not only the first one, so a form can show them
    all at once.
    """

    def __init__(self, issues: List[ConfigIssue]):
        summary = "; ".join(f"{issue.field}: {issue.message}" for issue in issues)
        super().__init__(f"Invalid build timestamp configuration: {summary}", {"issues": [i.model_dump() for i in issues]})
        self.issues = list(issues)
