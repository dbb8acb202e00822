"""Build timestamp properties with time-shift expressions.

Renders the build's base instant as BUILD_TIMESTAMP and as any number of extra
properties, each shifted by a compact expression ("+1D", "-3h30m") and
formatted with its own date pattern and timezone.

Modules:
--------
- shift: Shift expression grammar, parsing and evaluation
- formatting: Date pattern compiler, renderer and timezone resolution
- domain: Configuration snapshot and result models
- config: Settings loading and configuration validation
- properties: Build-time evaluation pass
- validation: Form-field checks
- cli: Typer command-line interface

Example:
--------
>>> from datetime import datetime, timezone
>>> from build_timestamp import build_config, build_environment
>>> config = build_config({
...     "pattern": "yyyy-MM-dd",
...     "extra_properties": [{"key": "YESTERDAY", "pattern": "yyyy-MM-dd", "shift_expression": "-1D"}],
... })
>>> build_environment(config, datetime(2024, 3, 1, tzinfo=timezone.utc))
{'BUILD_TIMESTAMP': '2024-03-01', 'YESTERDAY': '2024-02-29'}
"""

from .config import BuildTimestampSettings, build_config, config_from_form, load_settings
from .domain import DEFAULT_PATTERN, DEFAULT_PROPERTY, DEFAULT_TIMEZONE, BuildProperties, ExtraPropertySpec, PropertyFailure, TimestampConfig
from .exceptions import (
    BuildTimestampError,
    ConfigIssue,
    ConfigValidationError,
    InvalidPropertyKeyError,
    MalformedPatternError,
    MalformedShiftExpressionError,
    ShiftOutOfRangeError,
)
from .formatting import format_timestamp, resolve_timezone, validate_pattern
from .properties import build_environment, evaluate_properties
from .shift import ShiftExpression, ShiftTerm, ShiftUnit, evaluate_shift, is_shift_expression_valid, parse_shift_expression

__version__ = "1.0.0"

__all__ = [
    # Exceptions
    "BuildTimestampError",
    "MalformedShiftExpressionError",
    "ShiftOutOfRangeError",
    "MalformedPatternError",
    "InvalidPropertyKeyError",
    "ConfigIssue",
    "ConfigValidationError",
    # Models
    "DEFAULT_PROPERTY",
    "DEFAULT_PATTERN",
    "DEFAULT_TIMEZONE",
    "ExtraPropertySpec",
    "TimestampConfig",
    "BuildProperties",
    "PropertyFailure",
    "ShiftUnit",
    "ShiftTerm",
    "ShiftExpression",
    # Shift expressions
    "is_shift_expression_valid",
    "parse_shift_expression",
    "evaluate_shift",
    # Formatting
    "format_timestamp",
    "validate_pattern",
    "resolve_timezone",
    # Configuration
    "BuildTimestampSettings",
    "load_settings",
    "build_config",
    "config_from_form",
    # Evaluation
    "evaluate_properties",
    "build_environment",
]
