"""Pytest configuration and shared fixtures for build_timestamp tests.

Provides:
- Reference instants and timezones
- Configuration builders
- Isolation from BUILD_TIMESTAMP_* environment variables and CLI log handlers
"""

from datetime import datetime, timezone
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# ============================================================================
# Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop settings overrides inherited from the calling shell."""
    for key in list(os.environ):
        if key.upper().startswith("BUILD_TIMESTAMP_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """The CLI attaches a handler bound to the runner's stream; remove it after each test."""
    yield
    package_logger = logging.getLogger("build_timestamp")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


# ============================================================================
# Instants
# ============================================================================


@pytest.fixture
def march_first_utc() -> datetime:
    """2024-03-01T00:00:00Z, the day after a leap day."""
    return datetime(2024, 3, 1, tzinfo=timezone.utc)


@pytest.fixture
def afternoon_utc() -> datetime:
    """2024-03-01T13:05:09.045Z, exercises every clock field."""
    return datetime(2024, 3, 1, 13, 5, 9, 45000, tzinfo=timezone.utc)


# ============================================================================
# Configuration Builders
# ============================================================================


def _make_extra_property(key: str, pattern: str = "yyyy-MM-dd", shift: str = "", tz: Optional[str] = None) -> Dict[str, Any]:
    """Create a flat extra property mapping."""
    item: Dict[str, Any] = {"key": key, "pattern": pattern, "shift_expression": shift}
    if tz is not None:
        item["timezone"] = tz
    return item


def _make_config_data(
    pattern: str = "yyyy-MM-dd", tz: str = "UTC", extra_properties: Optional[List[Dict[str, Any]]] = None, enabled: bool = True
) -> Dict[str, Any]:
    """Create flat configuration data for build_config."""
    return {"enabled": enabled, "pattern": pattern, "timezone": tz, "extra_properties": extra_properties or []}


@pytest.fixture
def make_extra_property():
    """Factory for flat extra property mappings."""
    return _make_extra_property


@pytest.fixture
def make_config_data():
    """Factory for flat configuration data."""
    return _make_config_data


@pytest.fixture
def settings_toml(tmp_path: Path) -> Path:
    """TOML settings file with the yesterday/tomorrow properties."""
    path = tmp_path / "build-timestamp.toml"
    path.write_text(
        """
enabled = true
pattern = "yyyy-MM-dd"
timezone = "UTC"

[logging]
level = "WARNING"

[[extra_properties]]
key = "YESTERDAY"
pattern = "yyyy-MM-dd"
shift_expression = "-1D"

[[extra_properties]]
key = "TOMORROW"
pattern = "yyyyMMdd"
shift_expression = "+1D"
""",
        encoding="utf-8",
    )
    return path
