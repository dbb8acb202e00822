"""Unit tests for form-field checks."""

from datetime import datetime, timezone

import pytest

from build_timestamp.validation import FormValidation, check_key, check_pattern, check_shift_expression, check_value, timezone_items

pytestmark = pytest.mark.unit

PREVIEW_INSTANT = datetime(2024, 3, 1, tzinfo=timezone.utc)


class TestCheckPattern:
    """Test the global pattern preview."""

    def test_Should_PreviewDefaultPattern_When_PatternBlank(self):
        result = check_pattern("", None, now=PREVIEW_INSTANT)

        assert result == FormValidation.ok("Using timezone: UTC; Sample timestamp: 2024-03-01 00:00:00 UTC")

    def test_Should_PreviewInTimezone_When_TimezoneGiven(self):
        result = check_pattern(" yyyy-MM-dd HH:mm z ", "Asia/Tokyo", now=PREVIEW_INSTANT)

        assert result.is_ok
        assert result.message == "Using timezone: Asia/Tokyo; Sample timestamp: 2024-03-01 09:00 JST"

    def test_Should_PreviewInUTC_When_TimezoneUnknown(self):
        result = check_pattern("HH:mm", "Mars/Olympus_Mons", now=PREVIEW_INSTANT)

        assert result.message == "Using timezone: UTC; Sample timestamp: 00:00"

    def test_Should_ReturnError_When_PatternInvalid(self):
        assert check_pattern("yyyy q", "UTC") == FormValidation.error("Invalid pattern")

    def test_Should_PreviewCurrentTime_When_NowOmitted(self):
        result = check_pattern("yyyy", "UTC")

        assert result.is_ok
        assert result.message.startswith("Using timezone: UTC; Sample timestamp: ")


class TestFieldChecks:
    """Test key, value and shift expression checks."""

    @pytest.mark.parametrize("value,ok", [("YESTERDAY", True), ("MY-KEY", False), ("", False), (None, False)])
    def test_Should_CheckVariableName_When_KeySubmitted(self, value, ok):
        result = check_key(value)

        assert result.is_ok is ok
        if not ok:
            assert result.message == "Invalid variable name"

    @pytest.mark.parametrize("value,ok", [("yyyy-MM-dd", True), ("", False), ("yyyy q", False)])
    def test_Should_CheckPattern_When_ValueSubmitted(self, value, ok):
        result = check_value(value)

        assert result.is_ok is ok
        if not ok:
            assert result.message == "Invalid pattern"

    @pytest.mark.parametrize("value,ok", [("", True), ("+1D-2h", True), ("1x", False), ("5", False), (None, False)])
    def test_Should_CheckShiftExpression_When_ExpressionSubmitted(self, value, ok):
        result = check_shift_expression(value)

        assert result.is_ok is ok
        if not ok:
            assert result.message == "Invalid time shift expression"


class TestTimezoneItems:
    """Test the timezone combo box choices."""

    def test_Should_ListSortedIanaIds_When_Requested(self):
        items = timezone_items()

        assert "Europe/Madrid" in items
        assert "America/New_York" in items
        assert items == sorted(items)
