"""Unit tests for calstream.date_value: parsing, ordering and arithmetic."""

import logging
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from calstream.date_value import AllDay, DateValue, Instant, compare
from calstream.exceptions import InvalidDateError, InvalidTimezoneError

pytestmark = pytest.mark.unit

BERLIN = ZoneInfo("Europe/Berlin")


def utc(*args: int) -> Instant:
    return Instant(datetime(*args, tzinfo=timezone.utc))


class TestParse:
    """Tests for DateValue.parse."""

    def test_parse_utc_timestamp(self):
        """Trailing Z gives a UTC instant."""
        value = DateValue.parse("20240315T093000Z")

        assert isinstance(value, Instant)
        assert value.moment == datetime(2024, 3, 15, 9, 30, tzinfo=timezone.utc)
        assert value.moment.utcoffset() == timedelta(0)

    def test_parse_local_timestamp_uses_zone_hint(self):
        """Timestamps without Z are read in the TZID zone."""
        value = DateValue.parse("20240315T093000", "Europe/Berlin")

        assert value.moment.tzinfo == BERLIN
        assert value == utc(2024, 3, 15, 8, 30)

    def test_parse_ignores_zone_hint_for_utc_values(self):
        """A Z suffix wins over the TZID parameter."""
        value = DateValue.parse("20240315T093000Z", "Europe/Berlin")

        assert value.moment.utcoffset() == timedelta(0)

    def test_parse_windows_zone_name(self):
        """Outlook zone names map to IANA zones."""
        value = DateValue.parse("20240115T090000", "Pacific Standard Time")

        assert value.moment.tzinfo == ZoneInfo("America/Los_Angeles")
        assert value == utc(2024, 1, 15, 17, 0)

    def test_parse_all_day(self):
        """Eight digits give an AllDay value."""
        value = DateValue.parse("20240315")

        assert isinstance(value, AllDay)
        assert value.day_value == date(2024, 3, 15)
        assert value.is_all_day is True

    def test_parse_all_day_keeps_zone(self):
        value = DateValue.parse("20240315", "Europe/Berlin")

        assert value.zone == BERLIN

    @pytest.mark.parametrize("text", ["", "2024031", "20240230", "2024-03-15", "abcdefgh"])
    def test_parse_invalid_date_raises(self, text):
        """Values that are neither timestamps nor civil dates are rejected."""
        with pytest.raises(InvalidDateError):
            DateValue.parse(text)

    def test_parse_malformed_timestamp_falls_back_to_epoch(self, caplog):
        """A broken timestamp degrades to the epoch with a warning."""
        with caplog.at_level(logging.WARNING, logger="calstream.date_value"):
            value = DateValue.parse("20240315T9")

        assert value == DateValue.epoch()
        assert "Malformed timestamp" in caplog.text

    def test_parse_malformed_timestamp_strict_raises(self):
        with pytest.raises(InvalidDateError):
            DateValue.parse("20240315T9", strict_timestamp=True)

    def test_parse_unknown_zone_falls_back_to_utc(self, caplog):
        """Unknown TZID values are read as UTC."""
        with caplog.at_level(logging.WARNING, logger="calstream.timezone_utils"):
            value = DateValue.parse("20240315T093000", "Mars/Olympus_Mons")

        assert value == utc(2024, 3, 15, 9, 30)
        assert "Mars/Olympus_Mons" in caplog.text

    def test_parse_unknown_zone_strict_raises(self):
        with pytest.raises(InvalidTimezoneError):
            DateValue.parse("20240315T093000", "Mars/Olympus_Mons", strict_timezone=True)

    def test_epoch(self):
        assert DateValue.epoch() == utc(1970, 1, 1)


class TestOrdering:
    """Tests for ordering across both variants."""

    def test_instants_compare_by_moment(self):
        assert utc(2024, 3, 15, 9) < utc(2024, 3, 15, 10)
        assert compare(utc(2024, 3, 15, 9), utc(2024, 3, 15, 9)) == 0

    def test_instants_in_different_zones_compare_by_moment(self):
        berlin = Instant(datetime(2024, 3, 15, 10, 0, tzinfo=BERLIN))

        assert compare(berlin, utc(2024, 3, 15, 9)) == 0
        assert berlin < utc(2024, 3, 15, 9, 1)

    def test_all_days_compare_by_date(self):
        assert AllDay(date(2024, 3, 14)) < AllDay(date(2024, 3, 15))
        assert compare(AllDay(date(2024, 3, 15)), AllDay(date(2024, 3, 15))) == 0

    @pytest.mark.parametrize("hour,minute", [(0, 0), (9, 30), (23, 59)])
    def test_all_day_sorts_before_instants_of_same_day(self, hour, minute):
        """An all-day value precedes every instant on its own day."""
        day = AllDay(date(2024, 3, 15))
        instant = utc(2024, 3, 15, hour, minute)

        assert day < instant
        assert instant > day
        assert compare(day, instant) == -1
        assert compare(instant, day) == 1

    def test_all_day_after_instants_of_earlier_days(self):
        assert utc(2024, 3, 14, 23, 59) < AllDay(date(2024, 3, 15))
        assert AllDay(date(2024, 3, 16)) > utc(2024, 3, 15, 12)

    def test_all_day_projects_instant_into_its_zone(self):
        """00:30 Berlin on the 15th is still the 14th in UTC."""
        day = AllDay(date(2024, 3, 15), BERLIN)
        instant = utc(2024, 3, 14, 23, 30)

        assert day < instant

    def test_mixed_values_sort(self):
        values = [
            utc(2024, 3, 15, 9),
            AllDay(date(2024, 3, 16)),
            AllDay(date(2024, 3, 15)),
            utc(2024, 3, 14, 18),
        ]

        assert sorted(values) == [
            utc(2024, 3, 14, 18),
            AllDay(date(2024, 3, 15)),
            utc(2024, 3, 15, 9),
            AllDay(date(2024, 3, 16)),
        ]

    def test_all_day_equality_ignores_zone(self):
        assert AllDay(date(2024, 3, 15), BERLIN) == AllDay(date(2024, 3, 15))

    def test_variants_are_never_equal(self):
        assert AllDay(date(2024, 3, 15)) != utc(2024, 3, 15)


class TestArithmetic:
    """Tests for variant-preserving arithmetic."""

    def test_instant_plus_timedelta(self):
        assert utc(2024, 3, 15, 9) + timedelta(hours=2) == utc(2024, 3, 15, 11)

    def test_all_day_adds_whole_days(self):
        day = AllDay(date(2024, 3, 15))

        assert day + timedelta(days=1, hours=23) == AllDay(date(2024, 3, 16))
        assert day + timedelta(hours=12) == day

    def test_all_day_negative_duration_truncates_toward_zero(self):
        day = AllDay(date(2024, 3, 15))

        assert day + timedelta(hours=-25) == AllDay(date(2024, 3, 14))
        assert day + timedelta(hours=-5) == day

    def test_all_day_addition_keeps_zone(self):
        shifted = AllDay(date(2024, 3, 15), BERLIN) + timedelta(days=3)

        assert shifted.zone == BERLIN

    def test_differences(self):
        assert utc(2024, 3, 15, 11) - utc(2024, 3, 15, 9) == timedelta(hours=2)
        assert AllDay(date(2024, 3, 17)) - AllDay(date(2024, 3, 15)) == timedelta(days=2)

    def test_mixed_difference_uses_midnight(self):
        day = AllDay(date(2024, 3, 15))

        assert utc(2024, 3, 15, 6) - day == timedelta(hours=6)
        assert day - utc(2024, 3, 15, 6) == timedelta(hours=-6)

    def test_naive_instant_rejected(self):
        with pytest.raises(ValueError):
            Instant(datetime(2024, 3, 15, 9))


class TestCalendarHelpers:
    """Tests for civil-date accessors."""

    def test_accessors(self):
        value = utc(2024, 3, 15, 9)

        assert (value.year, value.month, value.day) == (2024, 3, 15)
        assert value.weekday() == 4
        assert value.days_in_month() == 31

    def test_with_day_keeps_time_of_day(self):
        assert utc(2024, 3, 15, 9).with_day(20) == utc(2024, 3, 20, 9)

    def test_with_day_invalid_returns_none(self):
        assert AllDay(date(2024, 2, 10)).with_day(30) is None
        assert utc(2023, 2, 10).with_day(29) is None

    def test_with_month_and_year(self):
        day = AllDay(date(2024, 1, 31))

        assert day.with_month(3) == AllDay(date(2024, 3, 31))
        assert day.with_month(4) is None
        assert AllDay(date(2024, 2, 29)).with_year(2025) is None

    def test_week_of_month(self):
        assert AllDay(date(2024, 3, 10)).week_of_month() == (2, -4)
        assert AllDay(date(2024, 3, 31)).week_of_month() == (5, -1)

    def test_same_day(self):
        assert AllDay(date(2024, 3, 15)).same_day(utc(2024, 3, 15, 22))
        assert not utc(2024, 3, 15, 22).same_day(utc(2024, 3, 16, 1))

    def test_format(self):
        assert AllDay(date(2024, 3, 15)).format("%Y-%m-%d") == "2024-03-15"
        assert utc(2024, 3, 15, 9, 30).format("%H:%M", BERLIN) == "10:30"

    def test_str(self):
        assert str(AllDay(date(2024, 3, 15))) == "2024-03-15"
        assert str(utc(2024, 3, 15, 9, 30)) == "2024-03-15T09:30:00+00:00"
