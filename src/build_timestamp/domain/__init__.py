"""Domain models for build timestamp evaluation.

- config: Configuration snapshot (TimestampConfig, ExtraPropertySpec) and defaults
- properties: Evaluation results (BuildProperties, PropertyFailure)

All models are frozen pydantic models with extra="forbid".
"""

from .config import DEFAULT_PATTERN, DEFAULT_PROPERTY, DEFAULT_TIMEZONE, ExtraPropertySpec, TimestampConfig
from .properties import BuildProperties, PropertyFailure

__all__ = [
    # Defaults
    "DEFAULT_PROPERTY",
    "DEFAULT_PATTERN",
    "DEFAULT_TIMEZONE",
    # Configuration
    "ExtraPropertySpec",
    "TimestampConfig",
    # Results
    "BuildProperties",
    "PropertyFailure",
]
