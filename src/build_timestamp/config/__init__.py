"""Configuration module for build timestamp properties.

Builds the immutable TimestampConfig snapshot from generic key-value data:
TOML files and environment variables (pydantic-settings), or the nested form
payload of a job configuration page. Validation reports every issue at once
(strict mode) or drops invalid extra properties with a warning (lenient mode,
the behavior of stored configurations).

Environment overrides use the BUILD_TIMESTAMP_ prefix with "__" for nesting:
    BUILD_TIMESTAMP_PATTERN="yyyyMMdd"
    BUILD_TIMESTAMP_LOGGING__LEVEL=DEBUG
    BUILD_TIMESTAMP_EXTRA_PROPERTIES='[{"key": "TOMORROW", "pattern": "yyyy-MM-dd", "shift_expression": "+1D"}]'
"""

from __future__ import annotations

import logging
from pathlib import Path
import re
import tomllib
from typing import Any, List, Literal, Mapping, Optional

from pydantic import AliasChoices, BaseModel, Field, TypeAdapter, ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from ..domain import DEFAULT_PATTERN, DEFAULT_PROPERTY, DEFAULT_TIMEZONE, ExtraPropertySpec, TimestampConfig
from ..exceptions import ConfigIssue, ConfigValidationError, InvalidPropertyKeyError
from ..formatting import is_timezone_known, validate_pattern
from ..shift import is_shift_expression_valid

__all__ = [
    "ENV_PREFIX",
    "LoggingConfig",
    "ExtraPropertySettings",
    "BuildTimestampSettings",
    "load_settings",
    "build_config",
    "config_from_form",
    "is_property_key_valid",
    "validate_property_key",
]

logger = logging.getLogger(__name__)

ENV_PREFIX = "BUILD_TIMESTAMP_"

_KEY_PATTERN = re.compile(r"\w+", re.ASCII)

_BOOL = TypeAdapter(bool)


# ============================================================================
# Property Keys
# ============================================================================


def is_property_key_valid(key: Any) -> bool:
    """True if key is a non-empty ASCII word identifier (letters, digits, _)."""
    return isinstance(key, str) and _KEY_PATTERN.fullmatch(key) is not None


def validate_property_key(key: Any) -> str:
    """Return key unchanged if valid.

    Raises:
        InvalidPropertyKeyError: Key is empty or contains non-word characters
    """
    if not is_property_key_valid(key):
        raise InvalidPropertyKeyError(key)
    return key


# ============================================================================
# Settings Models
# ============================================================================


class LoggingConfig(BaseModel):
    """CLI logging: level of the build_timestamp logger and output format."""

    model_config = {"extra": "forbid"}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    structured: bool = Field(default=False, description="Emit JSON lines instead of plain text")

    @field_validator("level", mode="before")
    @classmethod
    def level_upper(cls, v: Any) -> Any:
        """Level names are case-insensitive in settings files."""
        return v.upper() if isinstance(v, str) else v


class ExtraPropertySettings(BaseModel):
    """Extra property as written in a settings file or form.

    Accepts the form field names ("value" for the pattern, "shiftExpression")
    as well as snake_case names. Unrelated form fields are ignored.
    """

    model_config = {"extra": "ignore"}

    key: str = Field(default="")
    pattern: str = Field(default="", validation_alias=AliasChoices("pattern", "value"))
    shift_expression: str = Field(default="", validation_alias=AliasChoices("shift_expression", "shiftExpression"))
    timezone: Optional[str] = Field(default=None)

    @field_validator("key", "pattern", "shift_expression", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        """Missing form values arrive as None."""
        return "" if v is None else v

    @field_validator("timezone", mode="before")
    @classmethod
    def blank_timezone_as_none(cls, v: Any) -> Any:
        """A blank timezone means the global timezone."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class BuildTimestampSettings(BaseSettings):
    """Complete build timestamp settings.

    Sources in priority order: environment variables, then init values (the
    parsed TOML file), then defaults.
    """

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, env_nested_delimiter="__", case_sensitive=False, extra="forbid")

    enabled: bool = Field(default=True)
    pattern: str = Field(default=DEFAULT_PATTERN)
    timezone: str = Field(default=DEFAULT_TIMEZONE)
    extra_properties: List[ExtraPropertySettings] = Field(default_factory=list)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Let environment variables override values read from the TOML file."""
        return (env_settings, init_settings, dotenv_settings, file_secret_settings)

    def to_config(self, strict: bool = True) -> TimestampConfig:
        """Validate and convert to the evaluation snapshot."""
        return build_config(self.model_dump(exclude={"logging"}), strict=strict)


# ============================================================================
# Loading Functions
# ============================================================================


def load_settings(toml_path: Path | str | None = None) -> BuildTimestampSettings:
    """Load settings from an optional TOML file and the environment.

    Args:
        toml_path: Path to TOML configuration file (optional)

    Returns:
        Validated BuildTimestampSettings

    Raises:
        FileNotFoundError: If toml_path specified but doesn't exist
        pydantic.ValidationError: If a value has the wrong type or a key is unknown
    """
    config_dict: dict[str, Any] = {}

    if toml_path is not None:
        toml_path = Path(toml_path)
        if not toml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {toml_path}")

        with open(toml_path, "rb") as f:
            config_dict = tomllib.load(f)

    return BuildTimestampSettings(**config_dict)


def _report(issues: List[ConfigIssue], strict: bool, field: str, message: str) -> None:
    if strict:
        issues.append(ConfigIssue(field=field, message=message))
    else:
        logger.warning(f"Ignoring invalid {field}: {message}")


def _extra_property_items(raw: Any, strict: bool, issues: List[ConfigIssue]) -> List[Any]:
    """Forms send a single object for one row and an array for several."""
    if raw is None:
        return []
    if isinstance(raw, Mapping):
        return [raw]
    if isinstance(raw, (list, tuple)):
        return list(raw)
    _report(issues, strict, "extra_properties", f"expected a list, got {type(raw).__name__}")
    return []


def _build_extra_property(item: Any, field: str, seen: set, strict: bool, issues: List[ConfigIssue]) -> Optional[ExtraPropertySpec]:
    """Validate one extra property; None when it is dropped."""
    if isinstance(item, ExtraPropertySpec):
        item = item.model_dump()
    try:
        entry = ExtraPropertySettings.model_validate(item)
    except ValidationError as e:
        _report(issues, strict, field, f"malformed entry ({e.error_count()} errors)")
        return None

    problems = []
    try:
        validate_property_key(entry.key)
    except InvalidPropertyKeyError:
        problems.append(("key", "Invalid variable name"))
    else:
        if entry.key == DEFAULT_PROPERTY:
            problems.append(("key", f"{DEFAULT_PROPERTY} is reserved"))
        elif entry.key in seen:
            problems.append(("key", f"Duplicate property key {entry.key}"))
    if not validate_pattern(entry.pattern):
        problems.append(("pattern", "Invalid pattern"))
    if not is_shift_expression_valid(entry.shift_expression):
        problems.append(("shift_expression", "Invalid time shift expression"))
    if entry.timezone is not None and not is_timezone_known(entry.timezone):
        problems.append(("timezone", f"Unknown timezone {entry.timezone}"))

    if problems:
        for name, message in problems:
            _report(issues, strict, f"{field}.{name}", message)
        return None

    seen.add(entry.key)
    return ExtraPropertySpec(key=entry.key, pattern=entry.pattern, shift_expression=entry.shift_expression, timezone=entry.timezone)


def build_config(data: Mapping[str, Any], strict: bool = True) -> TimestampConfig:
    """Build a TimestampConfig from a flat key-value mapping.

    Keys: enabled, pattern, timezone, extra_properties. "enabled" accepts
    booleans and their string forms ("false", "no", "0"). A blank pattern or
    timezone selects the default. Extra property keys must be unique word
    identifiers other than BUILD_TIMESTAMP.

    Args:
        data: Generic configuration mapping
        strict: Raise on any issue; otherwise drop invalid extra properties,
            keep the first of duplicate keys, and fall back to defaults

    Returns:
        Validated TimestampConfig

    Raises:
        ConfigValidationError: strict is True and at least one issue was found
    """
    issues: List[ConfigIssue] = []

    enabled = data.get("enabled")
    if enabled is None:
        enabled = True
    else:
        try:
            enabled = _BOOL.validate_python(enabled)
        except ValidationError:
            _report(issues, strict, "enabled", f"Expected a boolean, got {enabled!r}")
            enabled = True

    pattern = data.get("pattern")
    if pattern is None or not str(pattern).strip():
        pattern = DEFAULT_PATTERN
    elif not validate_pattern(pattern):
        _report(issues, strict, "pattern", "Invalid pattern")
        pattern = DEFAULT_PATTERN

    timezone = data.get("timezone")
    if timezone is None or not str(timezone).strip():
        timezone = DEFAULT_TIMEZONE
    elif not is_timezone_known(timezone):
        _report(issues, strict, "timezone", f"Unknown timezone {timezone}")
        timezone = DEFAULT_TIMEZONE

    seen: set = set()
    specs = []
    for index, item in enumerate(_extra_property_items(data.get("extra_properties"), strict, issues)):
        spec = _build_extra_property(item, f"extra_properties[{index}]", seen, strict, issues)
        if spec is not None:
            specs.append(spec)

    if issues:
        raise ConfigValidationError(issues)

    return TimestampConfig(
        enabled=enabled,
        pattern=pattern,
        timezone=str(timezone).strip(),
        extra_properties=tuple(specs),
    )


def config_from_form(form: Mapping[str, Any], strict: bool = False) -> TimestampConfig:
    """Build a TimestampConfig from a job configuration form payload.

    The payload nests everything under "enableBuildTimestamp"; a missing, null
    or empty section means the feature is disabled:

        {"enableBuildTimestamp": {"timezone": "UTC", "pattern": "yyyyMMdd",
                                  "extraProperties": [{"key": "K", "value": "yyyy", "shiftExpression": "+1Y"}]}}

    Args:
        form: Submitted form data
        strict: See build_config; defaults to dropping invalid rows

    Returns:
        TimestampConfig
    """
    section = form.get("enableBuildTimestamp")
    if not isinstance(section, Mapping) or not section:
        return TimestampConfig(enabled=False)

    data = {
        "enabled": True,
        "timezone": section.get("timezone"),
        "pattern": section.get("pattern"),
        "extra_properties": section.get("extraProperties"),
    }
    return build_config(data, strict=strict)
