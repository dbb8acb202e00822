"""Build-time evaluation pass.

Turns a TimestampConfig and the build's base instant into the environment
properties injected into the build: BUILD_TIMESTAMP plus one property per
extra property spec. Each property is rendered in isolation; a malformed
pattern or shift expression skips that property only, records a
PropertyFailure and logs a warning.

Example:
    >>> config = TimestampConfig(pattern="yyyy-MM-dd", extra_properties=(
    ...     ExtraPropertySpec(key="YESTERDAY", pattern="yyyy-MM-dd", shift_expression="-1D"),
    ... ))
    >>> build_environment(config, datetime(2024, 3, 1, tzinfo=timezone.utc))
    {'BUILD_TIMESTAMP': '2024-03-01', 'YESTERDAY': '2024-02-29'}
"""

from datetime import datetime
import logging
from typing import Dict, List

from .domain import DEFAULT_PROPERTY, BuildProperties, PropertyFailure, TimestampConfig
from .exceptions import BuildTimestampError
from .formatting import format_timestamp
from .shift import evaluate_shift
from .utils import ensure_aware

__all__ = ["evaluate_properties", "build_environment"]

logger = logging.getLogger(__name__)


def _failure(key: str, error: BuildTimestampError) -> PropertyFailure:
    logger.warning(f"Skipping property {key}: {error}")
    return PropertyFailure(key=key, error=type(error).__name__, message=str(error))


def evaluate_properties(config: TimestampConfig, base_instant: datetime) -> BuildProperties:
    """Render the build timestamp and every extra property.

    Args:
        config: Configuration snapshot for this build
        base_instant: Build start time (naive values are read as UTC)

    Returns:
        BuildProperties with the rendered mapping and any skipped properties
    """
    if not config.enabled:
        logger.debug("Build timestamp disabled, no properties set")
        return BuildProperties()

    base = ensure_aware(base_instant)
    properties: Dict[str, str] = {}
    failures: List[PropertyFailure] = []

    try:
        properties[DEFAULT_PROPERTY] = format_timestamp(base, config.pattern, config.timezone)
    except BuildTimestampError as e:
        failures.append(_failure(DEFAULT_PROPERTY, e))

    for spec in config.extra_properties:
        timezone = spec.timezone or config.timezone
        try:
            shifted = evaluate_shift(base, spec.shift_expression, timezone)
            value = format_timestamp(shifted, spec.pattern, timezone)
        except BuildTimestampError as e:
            failures.append(_failure(spec.key, e))
            continue

        if spec.key in properties:
            logger.warning(f"Duplicate property {spec.key}, overriding '{properties[spec.key]}' with '{value}'")
        properties[spec.key] = value

    logger.info(f"Rendered {len(properties)} build timestamp properties ({len(failures)} skipped)")
    return BuildProperties(properties=properties, failures=failures)


def build_environment(config: TimestampConfig, base_instant: datetime) -> Dict[str, str]:
    """Property mapping only, for injecting into a build environment."""
    return evaluate_properties(config, base_instant).properties
