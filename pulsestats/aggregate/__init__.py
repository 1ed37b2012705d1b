"""
Aggregation module

Mode registry and the bucket walker that turns store statistics into samples.
"""

from .engine import enumerate_statistics
from .registry import (
    AGGREGATION_REGISTRY,
    STATISTICS_FIELDS,
    STATISTICS_REDUCERS,
    AggregationSpec,
    get_aggregation_spec,
)

__all__ = [
    "enumerate_statistics",
    "AGGREGATION_REGISTRY",
    "STATISTICS_FIELDS",
    "STATISTICS_REDUCERS",
    "AggregationSpec",
    "get_aggregation_spec",
]
