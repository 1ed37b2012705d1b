"""
Core constants and enumerations module

Defines enumerations shared by queries, the aggregation registry and store implementations
"""

from enum import Enum


class AggregationMode(str, Enum):
    """Aggregation mode requested by a caller (no behaviour attached)"""

    CUMULATIVE_SUM = "cumulativeSum"
    DISCRETE_AVERAGE = "discreteAverage"
    DISCRETE_MIN = "discreteMin"
    DISCRETE_MAX = "discreteMax"
    DISCRETE_MOST_RECENT = "discreteMostRecent"


class StatisticsOption(str, Enum):
    """Statistic a store is asked to precompute per bucket"""

    SUM = "sum"
    AVERAGE = "average"
    MIN = "min"
    MAX = "max"
    MOST_RECENT = "mostRecent"


class AggregationStyle(str, Enum):
    """How values of a sample type combine over time"""

    CUMULATIVE = "cumulative"  # Values add up (steps, energy, distance)
    DISCRETE = "discrete"  # Point measurements (heart rate, body mass)


class SampleKind(str, Enum):
    """Value category of a sample type"""

    QUANTITY = "quantity"
    CATEGORY = "category"  # Enumerated values (sleep stages, mindful sessions)


class IntervalUnit(str, Enum):
    """Calendar component a bucket interval is measured in"""

    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


# Metadata key marking samples entered manually by the user
WAS_USER_ENTERED_KEY = "HKWasUserEntered"
