"""Configuration snapshot models consumed by the evaluation pass.

TimestampConfig is built once per build invocation by the configuration layer
(build_timestamp.config) and handed to build_timestamp.properties. Both models
are frozen; fields hold raw strings so a snapshot loaded from an older or
damaged store can still be represented, and problems surface per property
during evaluation.
"""

from typing import Optional, Tuple

from pydantic import BaseModel, Field

from ..formatting.timezones import DEFAULT_TIMEZONE

__all__ = ["DEFAULT_PROPERTY", "DEFAULT_PATTERN", "DEFAULT_TIMEZONE", "ExtraPropertySpec", "TimestampConfig"]

DEFAULT_PROPERTY = "BUILD_TIMESTAMP"
DEFAULT_PATTERN = "yyyy-MM-dd HH:mm:ss z"


class ExtraPropertySpec(BaseModel):
    """A user-defined property rendered from the shifted base instant.

    Attributes:
        key: Property name (expected to match \\w+)
        pattern: Date pattern for the rendered value
        shift_expression: Offset applied to the base instant ("" for none)
        timezone: Timezone id; None uses the global timezone
    """

    model_config = {"frozen": True, "extra": "forbid"}

    key: str
    pattern: str
    shift_expression: str = ""
    timezone: Optional[str] = None


class TimestampConfig(BaseModel):
    """Build timestamp settings for one build invocation."""

    model_config = {"frozen": True, "extra": "forbid"}

    enabled: bool = True
    pattern: str = DEFAULT_PATTERN
    timezone: str = DEFAULT_TIMEZONE
    extra_properties: Tuple[ExtraPropertySpec, ...] = Field(default=())
