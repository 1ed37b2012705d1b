"""Unit Tests for the bucket grid"""
from datetime import datetime, timedelta

import pytest
import pytz

from pulsestats.core import IntervalUnit, InvalidParameterError, TimeInterval
from tests.fixtures.stores import utc


class TestIntervalParsing:
    """TimeInterval.parse"""

    @pytest.mark.parametrize("text, unit, count", [
        ("day", IntervalUnit.DAY, 1),
        ("hour", IntervalUnit.HOUR, 1),
        ("Week", IntervalUnit.WEEK, 1),
        ("month", IntervalUnit.MONTH, 1),
        ("year", IntervalUnit.YEAR, 1),
        ("2 hours", IntervalUnit.HOUR, 2),
        ("15minutes", IntervalUnit.MINUTE, 15),
        ("  3 days ", IntervalUnit.DAY, 3),
    ])
    def test_valid(self, text, unit, count):
        interval = TimeInterval.parse(text)
        assert interval.unit == unit
        assert interval.count == count

    @pytest.mark.parametrize("text", ["", "fortnight", "0 days", "-1 day", "day 2"])
    def test_invalid(self, text):
        with pytest.raises(InvalidParameterError):
            TimeInterval.parse(text)

    def test_default_is_one_day(self):
        interval = TimeInterval()
        assert interval.unit == IntervalUnit.DAY
        assert interval.count == 1
        assert str(interval) == "1 day"


class TestShift:
    """Bucket starts on the grid."""

    def test_hour_steps(self):
        interval = TimeInterval(unit=IntervalUnit.HOUR, count=2)
        assert interval.shift(utc(2024, 1, 1), 3) == utc(2024, 1, 1, 6)
        assert interval.shift(utc(2024, 1, 1), -1) == utc(2023, 12, 31, 22)

    def test_month_clamps_day(self):
        interval = TimeInterval(unit=IntervalUnit.MONTH)
        assert interval.shift(utc(2024, 1, 31), 1) == utc(2024, 2, 29)
        assert interval.shift(utc(2024, 1, 31), 2) == utc(2024, 3, 31)

    def test_year_from_leap_day(self):
        interval = TimeInterval(unit=IntervalUnit.YEAR)
        assert interval.shift(utc(2024, 2, 29), 1) == utc(2025, 2, 28)

    def test_day_follows_wall_clock_across_dst(self):
        tz = pytz.timezone("America/New_York")
        anchor = tz.localize(datetime(2024, 3, 9))
        interval = TimeInterval()

        start, end = interval.bucket_bounds(anchor, 1)

        assert start == tz.localize(datetime(2024, 3, 10))
        assert end == tz.localize(datetime(2024, 3, 11))
        assert end - start == timedelta(hours=23)

    def test_hour_is_absolute_across_dst(self):
        tz = pytz.timezone("America/New_York")
        anchor = tz.localize(datetime(2024, 3, 10, 1))
        interval = TimeInterval(unit=IntervalUnit.HOUR)

        assert interval.shift(anchor, 1) - anchor == timedelta(hours=1)
        assert interval.shift(anchor, 1).hour == 3


class TestBucketIndex:
    """Locating the bucket that contains an instant."""

    def test_start_of_bucket_belongs_to_it(self):
        interval = TimeInterval()
        assert interval.bucket_index(utc(2024, 1, 1), utc(2024, 1, 2)) == 1

    def test_inside_bucket(self):
        interval = TimeInterval()
        assert interval.bucket_index(utc(2024, 1, 1), utc(2024, 1, 2, 23, 59)) == 1

    def test_before_anchor(self):
        interval = TimeInterval()
        assert interval.bucket_index(utc(2024, 1, 1), utc(2023, 12, 31, 12)) == -1

    def test_misaligned_anchor(self):
        interval = TimeInterval()
        anchor = utc(2024, 1, 1, 6)
        assert interval.bucket_index(anchor, utc(2024, 1, 1, 5)) == -1
        assert interval.bucket_index(anchor, utc(2024, 1, 1, 7)) == 0

    def test_calendar_months(self):
        interval = TimeInterval(unit=IntervalUnit.MONTH)
        anchor = utc(2024, 1, 1)
        assert interval.bucket_index(anchor, utc(2024, 2, 29, 23)) == 1
        assert interval.bucket_index(anchor, utc(2024, 3, 1)) == 2
        assert interval.bucket_index(anchor, utc(2024, 12, 31)) == 11

    def test_instant_lies_within_its_bounds(self):
        interval = TimeInterval(unit=IntervalUnit.MINUTE, count=15)
        anchor = utc(2024, 1, 1)
        instant = utc(2024, 1, 1, 10, 44, 59)

        start, end = interval.bucket_bounds(anchor, interval.bucket_index(anchor, instant))

        assert start == utc(2024, 1, 1, 10, 30)
        assert end == utc(2024, 1, 1, 10, 45)
