"""
pulsestats

Quantity samples from a health-data store: raw retrieval, bucketed
aggregation and the sample writer, with a bridge for untyped callers.
"""

from .bridge import QuantityBridge
from .core import (
    AggregationMode,
    AggregationQuery,
    InsertRequest,
    QuantitySample,
    RawQuery,
    SampleType,
    TimeInterval,
)
from .service import QuantityService
from .setup import setup_quantity_service
from .store import HealthStoreProtocol, InMemoryHealthStore

__version__ = "1.0.0"
__all__ = [
    "QuantityService",
    "QuantityBridge",
    "setup_quantity_service",
    "HealthStoreProtocol",
    "InMemoryHealthStore",
    "AggregationMode",
    "AggregationQuery",
    "InsertRequest",
    "QuantitySample",
    "RawQuery",
    "SampleType",
    "TimeInterval",
]
