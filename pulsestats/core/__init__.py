"""
Core module

Provides the value types every other module builds on:
- Units, quantities and conversion
- Sample type catalogue
- Bucket grid arithmetic
- Typed queries, store records and the QuantitySample result
- Exception taxonomy
"""

from .constants import (
    WAS_USER_ENTERED_KEY,
    AggregationMode,
    AggregationStyle,
    IntervalUnit,
    SampleKind,
    StatisticsOption,
)
from .exceptions import (
    IncompatibleUnitError,
    InvalidParameterError,
    MissingTimeRangeError,
    PreconditionError,
    PulseStatsException,
    StoreExecutionError,
    UnsupportedAggregationModeError,
)
from .interval import TimeInterval
from .models import (
    AggregationQuery,
    InsertRequest,
    NativeSample,
    QuantitySample,
    RawQuery,
    SamplePredicate,
    Statistics,
    StatisticsCollection,
)
from .sample_types import SampleType, SampleTypeInfo, get_sample_type, require_quantity_type
from .units import Quantity, are_compatible, convert, convert_unit, is_known_unit

__all__ = [
    # Constants and enumerations
    "WAS_USER_ENTERED_KEY",
    "AggregationMode",
    "AggregationStyle",
    "IntervalUnit",
    "SampleKind",
    "StatisticsOption",
    # Exceptions
    "PulseStatsException",
    "InvalidParameterError",
    "MissingTimeRangeError",
    "UnsupportedAggregationModeError",
    "IncompatibleUnitError",
    "StoreExecutionError",
    "PreconditionError",
    # Units
    "Quantity",
    "convert",
    "convert_unit",
    "are_compatible",
    "is_known_unit",
    # Sample types
    "SampleType",
    "SampleTypeInfo",
    "get_sample_type",
    "require_quantity_type",
    # Models
    "TimeInterval",
    "AggregationQuery",
    "RawQuery",
    "InsertRequest",
    "NativeSample",
    "QuantitySample",
    "SamplePredicate",
    "Statistics",
    "StatisticsCollection",
]
