"""Form-field checks for the job configuration page.

Each check returns a FormValidation the host renders next to the field. Checks
never raise; malformed input becomes an "error" result.
"""

from datetime import datetime, timezone
from typing import Any, List, Literal, Optional

from pydantic import BaseModel

from .config import is_property_key_valid
from .domain import DEFAULT_PATTERN
from .exceptions import MalformedPatternError
from .formatting import available_timezone_ids, compile_pattern, resolve_timezone, timezone_id, validate_pattern
from .shift import is_shift_expression_valid
from .utils import ensure_aware

__all__ = [
    "FormValidation",
    "check_pattern",
    "check_key",
    "check_value",
    "check_shift_expression",
    "timezone_items",
]


class FormValidation(BaseModel):
    """Outcome of a field check."""

    model_config = {"frozen": True, "extra": "forbid"}

    kind: Literal["ok", "error"]
    message: str = ""

    @classmethod
    def ok(cls, message: str = "") -> "FormValidation":
        return cls(kind="ok", message=message)

    @classmethod
    def error(cls, message: str) -> "FormValidation":
        return cls(kind="error", message=message)

    @property
    def is_ok(self) -> bool:
        return self.kind == "ok"


def check_pattern(pattern: Optional[str], timezone_param: Optional[str] = None, now: Optional[datetime] = None) -> FormValidation:
    """Check the global pattern and preview it.

    A blank pattern previews the default pattern. The timezone falls back to
    UTC when blank or unknown, and the preview says which one was used.

    Args:
        pattern: Pattern field value
        timezone_param: Timezone field value
        now: Instant to preview (defaults to the current time)
    """
    pattern_str = pattern.strip() if isinstance(pattern, str) and pattern.strip() else DEFAULT_PATTERN
    tz = resolve_timezone(timezone_param)

    try:
        compiled = compile_pattern(pattern_str)
    except MalformedPatternError:
        return FormValidation.error("Invalid pattern")

    instant = ensure_aware(now) if now is not None else datetime.now(timezone.utc)
    sample = compiled.render(instant.astimezone(tz))
    return FormValidation.ok(f"Using timezone: {timezone_id(tz)}; Sample timestamp: {sample}")


def check_key(value: Any) -> FormValidation:
    if is_property_key_valid(value):
        return FormValidation.ok()
    return FormValidation.error("Invalid variable name")


def check_value(value: Any) -> FormValidation:
    """Check an extra property's pattern (the form calls it "value")."""
    if validate_pattern(value):
        return FormValidation.ok()
    return FormValidation.error("Invalid pattern")


def check_shift_expression(value: Any) -> FormValidation:
    if is_shift_expression_valid(value):
        return FormValidation.ok()
    return FormValidation.error("Invalid time shift expression")


def timezone_items() -> List[str]:
    """Choices for the timezone combo box."""
    return available_timezone_ids()
