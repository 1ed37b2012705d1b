"""Unit Tests for the bucket walker"""
from datetime import datetime

import pytest

from pulsestats.aggregate import enumerate_statistics
from pulsestats.core import (
    AggregationMode,
    AggregationQuery,
    IncompatibleUnitError,
    IntervalUnit,
    PreconditionError,
    Quantity,
    SampleType,
    Statistics,
    StatisticsCollection,
    TimeInterval,
)
from tests.fixtures.stores import utc


def day_bucket(day: int, **quantities) -> Statistics:
    return Statistics(start_date=utc(2024, 1, day), end_date=utc(2024, 1, day + 1), **quantities)


def steps(value: float) -> Quantity:
    return Quantity(value=value, unit="count")


def collection(*buckets) -> StatisticsCollection:
    return StatisticsCollection(anchor_date=utc(2024, 1, 1), interval=TimeInterval(), statistics=list(buckets))


def step_query(start, end, unit="count") -> AggregationQuery:
    return AggregationQuery(
        sample_type=SampleType.STEP_COUNT,
        start_time=start,
        end_time=end,
        anchor_date=utc(2024, 1, 1),
        mode=AggregationMode.CUMULATIVE_SUM,
        unit=unit,
    )


class TestBucketWalk:
    """Walking buckets within the query range."""

    def test_daily_sum_skips_empty_bucket(self):
        stats = collection(
            day_bucket(1, sum_quantity=steps(5)),
            day_bucket(2, sum_quantity=steps(5)),
            day_bucket(3),
        )

        samples = enumerate_statistics(stats, step_query(utc(2024, 1, 1), utc(2024, 1, 3)))

        assert [s.value for s in samples] == [5, 5]
        assert [s.start_time for s in samples] == [utc(2024, 1, 1), utc(2024, 1, 2)]
        assert [s.end_time for s in samples] == [utc(2024, 1, 2), utc(2024, 1, 3)]

    def test_bucket_bounds_not_query_bounds(self):
        stats = collection(day_bucket(1, sum_quantity=steps(7)))

        samples = enumerate_statistics(stats, step_query(utc(2024, 1, 1, 10), utc(2024, 1, 1, 11)))

        assert len(samples) == 1
        assert samples[0].start_time == utc(2024, 1, 1)
        assert samples[0].end_time == utc(2024, 1, 2)

    def test_buckets_outside_range_dropped(self):
        stats = collection(
            day_bucket(1, sum_quantity=steps(1)),
            day_bucket(2, sum_quantity=steps(2)),
            day_bucket(3, sum_quantity=steps(3)),
            day_bucket(4, sum_quantity=steps(4)),
        )

        samples = enumerate_statistics(stats, step_query(utc(2024, 1, 2, 12), utc(2024, 1, 3, 12)))

        assert [s.value for s in samples] == [2, 3]

    def test_bucket_ending_at_range_start_dropped(self):
        stats = collection(
            day_bucket(1, sum_quantity=steps(1)),
            day_bucket(2, sum_quantity=steps(2)),
        )

        samples = enumerate_statistics(stats, step_query(utc(2024, 1, 2), utc(2024, 1, 2, 6)))

        assert [s.value for s in samples] == [2]

    def test_degenerate_range_keeps_containing_bucket(self):
        stats = collection(
            day_bucket(1, sum_quantity=steps(1)),
            day_bucket(2, sum_quantity=steps(2)),
            day_bucket(3, sum_quantity=steps(3)),
        )

        samples = enumerate_statistics(stats, step_query(utc(2024, 1, 2, 8), utc(2024, 1, 2, 8)))

        assert [s.value for s in samples] == [2]

    def test_degenerate_range_on_bucket_boundary(self):
        stats = collection(
            day_bucket(1, sum_quantity=steps(1)),
            day_bucket(2, sum_quantity=steps(2)),
        )

        samples = enumerate_statistics(stats, step_query(utc(2024, 1, 2), utc(2024, 1, 2)))

        assert [s.value for s in samples] == [2]

    def test_empty_collection(self):
        assert enumerate_statistics(collection(), step_query(utc(2024, 1, 1), utc(2024, 1, 3))) == []

    def test_outputs_never_share_a_start(self):
        stats = collection(*(day_bucket(day, sum_quantity=steps(day)) for day in range(1, 8)))

        samples = enumerate_statistics(stats, step_query(utc(2024, 1, 1), utc(2024, 1, 8)))

        starts = [s.start_time for s in samples]
        assert len(set(starts)) == len(starts)
        assert starts == sorted(starts)
        for previous, current in zip(samples, samples[1:]):
            assert previous.end_time <= current.start_time


class TestConversion:
    """Bucket values expressed in the query's unit."""

    def test_converted_into_query_unit(self):
        query = AggregationQuery(
            sample_type=SampleType.DISTANCE_WALKING_RUNNING,
            start_time=utc(2024, 1, 1),
            end_time=utc(2024, 1, 1),
            anchor_date=utc(2024, 1, 1),
            mode=AggregationMode.CUMULATIVE_SUM,
            unit="km",
        )
        stats = collection(day_bucket(1, sum_quantity=Quantity(value=2500, unit="m")))

        samples = enumerate_statistics(stats, query)

        assert samples[0].value == pytest.approx(2.5)
        assert samples[0].unit == "km"

    def test_unconvertible_bucket_value(self):
        stats = collection(day_bucket(1, sum_quantity=Quantity(value=1, unit="kg")))

        with pytest.raises(IncompatibleUnitError):
            enumerate_statistics(stats, step_query(utc(2024, 1, 1), utc(2024, 1, 2)))


class TestStoreContract:
    """Store results that violate the bucket contract."""

    def test_descending_buckets(self):
        stats = collection(
            day_bucket(2, sum_quantity=steps(2)),
            day_bucket(1, sum_quantity=steps(1)),
        )

        with pytest.raises(PreconditionError):
            enumerate_statistics(stats, step_query(utc(2024, 1, 1), utc(2024, 1, 3)))

    def test_naive_bucket_times(self):
        stats = StatisticsCollection(
            anchor_date=datetime(2024, 1, 1),
            interval=TimeInterval(),
            statistics=[Statistics(start_date=datetime(2024, 1, 1), end_date=datetime(2024, 1, 2),
                                   sum_quantity=steps(1))],
        )

        samples = enumerate_statistics(stats, step_query(utc(2024, 1, 1), utc(2024, 1, 2)))

        assert [(s.value, s.start_time) for s in samples] == [(1, utc(2024, 1, 1))]

    def test_duplicate_bucket_start(self):
        stats = collection(
            day_bucket(1, sum_quantity=steps(1)),
            day_bucket(1, sum_quantity=steps(1)),
        )

        with pytest.raises(PreconditionError):
            enumerate_statistics(stats, step_query(utc(2024, 1, 1), utc(2024, 1, 3)))


class TestModes:
    """Modes other than cumulativeSum on finer grids."""

    def test_hourly_grid_with_most_recent(self):
        query = AggregationQuery(
            sample_type=SampleType.HEART_RATE,
            start_time=utc(2024, 1, 1, 9),
            end_time=utc(2024, 1, 1, 11),
            anchor_date=utc(2024, 1, 1),
            interval=TimeInterval(unit=IntervalUnit.HOUR),
            mode=AggregationMode.DISCRETE_MOST_RECENT,
            unit="bpm",
        )
        stats = StatisticsCollection(
            anchor_date=utc(2024, 1, 1),
            interval=query.interval,
            statistics=[
                Statistics(start_date=utc(2024, 1, 1, 9), end_date=utc(2024, 1, 1, 10),
                           most_recent_quantity=Quantity(value=62, unit="count/min")),
                Statistics(start_date=utc(2024, 1, 1, 10), end_date=utc(2024, 1, 1, 11)),
                Statistics(start_date=utc(2024, 1, 1, 11), end_date=utc(2024, 1, 1, 12),
                           most_recent_quantity=Quantity(value=70, unit="count/min")),
            ],
        )

        samples = enumerate_statistics(stats, query)

        assert [(s.value, s.start_time.hour) for s in samples] == [(62, 9), (70, 11)]
