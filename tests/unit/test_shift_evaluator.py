"""Unit tests for shift expression evaluation.

Tests calendar arithmetic for Y/M/D, absolute arithmetic for h/m/s/S,
cumulative application, DST behavior and error reporting.
"""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from build_timestamp.exceptions import MalformedShiftExpressionError, ShiftOutOfRangeError
from build_timestamp.shift import evaluate_shift, parse_shift_expression

pytestmark = pytest.mark.unit

NEW_YORK = ZoneInfo("America/New_York")


def utc(*args) -> datetime:
    """Create a UTC datetime."""
    return datetime(*args, tzinfo=timezone.utc)


class TestCalendarUnits:
    """Test year, month and day shifts."""

    @pytest.mark.parametrize(
        "base,expression,expected",
        [
            (utc(2024, 1, 31), "+1M", utc(2024, 2, 29)),
            (utc(2023, 1, 31), "+1M", utc(2023, 2, 28)),
            (utc(2024, 3, 31), "-1M", utc(2024, 2, 29)),
            (utc(2024, 2, 29), "+1Y", utc(2025, 2, 28)),
            (utc(2024, 2, 29), "-4Y", utc(2020, 2, 29)),
            (utc(2024, 12, 15), "+1M", utc(2025, 1, 15)),
            (utc(2024, 3, 1), "-1D", utc(2024, 2, 29)),
            (utc(2024, 12, 31, 23, 59), "+1D", utc(2025, 1, 1, 23, 59)),
            (utc(2024, 5, 31), "+13M", utc(2025, 6, 30)),
        ],
    )
    def test_Should_ShiftCivilFields_When_CalendarUnitGiven(self, base, expression, expected):
        """Month ends clamp to the last valid day instead of overflowing."""
        assert evaluate_shift(base, expression, "UTC") == expected

    def test_Should_KeepWallClock_When_DayShiftCrossesSpringForward(self):
        """+1D across the March DST change keeps 12:00 local time (23h absolute)."""
        # Arrange - 2024-03-09 12:00 EST
        base = datetime(2024, 3, 9, 12, 0, tzinfo=NEW_YORK)

        # Act
        shifted = evaluate_shift(base, "+1D", NEW_YORK)

        # Assert
        assert (shifted.hour, shifted.minute, shifted.day) == (12, 0, 10)
        assert shifted.astimezone(timezone.utc) - base.astimezone(timezone.utc) == timedelta(hours=23)

    def test_Should_KeepWallClock_When_DayShiftCrossesFallBack(self):
        """+1D across the November DST change is 25h absolute."""
        base = datetime(2024, 11, 2, 12, 0, tzinfo=NEW_YORK)

        shifted = evaluate_shift(base, "+1D", "America/New_York")

        assert (shifted.day, shifted.hour) == (3, 12)
        assert shifted.astimezone(timezone.utc) - base.astimezone(timezone.utc) == timedelta(hours=25)

    def test_Should_MoveForward_When_DayShiftLandsInDSTGap(self):
        """02:30 does not exist on 2024-03-10 in New York; it resolves to 03:30 EDT."""
        base = datetime(2024, 3, 9, 2, 30, tzinfo=NEW_YORK)

        shifted = evaluate_shift(base, "+1D", NEW_YORK)

        assert (shifted.day, shifted.hour, shifted.minute) == (10, 3, 30)
        assert shifted.utcoffset() == timedelta(hours=-4)

    def test_Should_UseTargetCalendar_When_TimezoneDiffersFromBase(self):
        """Day boundaries follow the evaluation timezone, not the base's tzinfo."""
        # 2024-03-01 03:00 UTC is still Feb 29 in New York
        base = utc(2024, 3, 1, 3, 0)

        shifted = evaluate_shift(base, "+1M", NEW_YORK)

        assert (shifted.month, shifted.day) == (3, 29)


class TestAbsoluteUnits:
    """Test hour, minute, second and millisecond shifts."""

    @pytest.mark.parametrize(
        "expression,delta",
        [
            ("+5h", timedelta(hours=5)),
            ("-5h", timedelta(hours=-5)),
            ("90m", timedelta(minutes=90)),
            ("-3h30m", timedelta(hours=-3, minutes=30)),
            ("+45s", timedelta(seconds=45)),
            ("+1500S", timedelta(milliseconds=1500)),
            ("-1S", timedelta(milliseconds=-1)),
        ],
    )
    def test_Should_AddFixedDuration_When_SubDayUnitGiven(self, expression, delta):
        """Sub-day units are exact durations; each sign applies to its own term."""
        base = utc(2024, 3, 1, 12, 0)

        assert evaluate_shift(base, expression, "UTC") == base + delta

    def test_Should_AddAbsoluteHours_When_CrossingSpringForward(self):
        """+24h across the March DST change lands at 13:00 local time."""
        base = datetime(2024, 3, 9, 12, 0, tzinfo=NEW_YORK)

        shifted = evaluate_shift(base, "+24h", NEW_YORK)

        assert shifted.astimezone(timezone.utc) - base.astimezone(timezone.utc) == timedelta(hours=24)
        assert (shifted.day, shifted.hour) == (10, 13)


class TestCumulativeApplication:
    """Test that terms build on the previous result."""

    def test_Should_ApplyTermsInSequence_When_TermsDoNotCommute(self):
        """Jan 31 +1M -1M is Jan 29, not Jan 31."""
        assert evaluate_shift(utc(2024, 1, 31), "+1M-1M", "UTC") == utc(2024, 1, 29)

    def test_Should_EqualNestedEvaluation_When_TermsSplit(self):
        """"+1D+1D" equals applying "+1D" twice."""
        base = datetime(2024, 3, 9, 1, 15, tzinfo=NEW_YORK)

        once = evaluate_shift(evaluate_shift(base, "+1D", NEW_YORK), "+1D", NEW_YORK)

        assert evaluate_shift(base, "+1D+1D", NEW_YORK) == once

    def test_Should_CombineMixedUnits_When_ExpressionHasSeveralTerms(self):
        """Calendar and absolute terms combine left to right."""
        assert evaluate_shift(utc(2024, 3, 1), "-1D+6h30m", "UTC") == utc(2024, 2, 29, 6, 30)


class TestIdentityAndResult:
    """Test no-op shifts and result representation."""

    @pytest.mark.parametrize("expression", ["", "+0D", "0Y0M0D0h0m0s0S", "-0h"])
    def test_Should_ReturnSameInstant_When_ShiftIsZero(self, expression):
        base = utc(2024, 3, 1, 8, 0)

        assert evaluate_shift(base, expression, "Europe/Madrid") == base

    def test_Should_PreserveAmbiguousInstant_When_ShiftIsZero(self):
        """The second 01:30 of a fall-back night survives a zero shift."""
        base = datetime(2024, 11, 3, 1, 30, fold=1, tzinfo=NEW_YORK)

        shifted = evaluate_shift(base, "+0D", NEW_YORK)

        assert shifted.astimezone(timezone.utc) == base.astimezone(timezone.utc)

    def test_Should_ExpressResultInTimezone_When_Evaluated(self):
        shifted = evaluate_shift(utc(2024, 3, 1), "+1h", "Asia/Tokyo")

        assert shifted.tzinfo == ZoneInfo("Asia/Tokyo")
        assert shifted.hour == 10

    @pytest.mark.parametrize("expression", ["", "+0Y-0S"])
    def test_Should_ExpressResultInTimezone_When_ShiftIsIdentity(self, expression):
        shifted = evaluate_shift(utc(2024, 3, 1, 23, 30), expression, "Asia/Tokyo")

        assert shifted.tzinfo == ZoneInfo("Asia/Tokyo")
        assert (shifted.day, shifted.hour, shifted.minute) == (2, 8, 30)

    def test_Should_ReadNaiveBaseAsUTC_When_NoTzinfo(self):
        shifted = evaluate_shift(datetime(2024, 3, 1), "-1D", "UTC")

        assert shifted == utc(2024, 2, 29)

    def test_Should_AcceptParsedExpression_When_Evaluating(self):
        parsed = parse_shift_expression("+2D")

        assert evaluate_shift(utc(2024, 3, 1), parsed, "UTC") == utc(2024, 3, 3)

    def test_Should_BeDeterministic_When_EvaluatedTwice(self):
        base = utc(2024, 3, 1, 12, 34, 56)

        assert evaluate_shift(base, "+1Y-2M3D-4h", "Europe/Madrid") == evaluate_shift(base, "+1Y-2M3D-4h", "Europe/Madrid")


class TestEvaluationErrors:
    """Test explicit failures on bad input."""

    @pytest.mark.parametrize("expression", ["1x", "+d", "5", "1D 2h"])
    def test_Should_RaiseMalformed_When_ExpressionOutsideGrammar(self, expression):
        with pytest.raises(MalformedShiftExpressionError):
            evaluate_shift(utc(2024, 3, 1), expression, "UTC")

    @pytest.mark.parametrize("expression", ["+2147483647Y", "-2147483647D", "+2147483647h"])
    def test_Should_RaiseOutOfRange_When_ResultLeavesDatetimeRange(self, expression):
        with pytest.raises(ShiftOutOfRangeError):
            evaluate_shift(utc(2024, 3, 1), expression, "UTC")
