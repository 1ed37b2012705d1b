"""
Base protocol for health stores

Defines the interface the quantity service consumes. Every call returns
immediately; the store delivers its outcome later by invoking `completion`
exactly once, either completion(result, None) or completion(None, error).
Uses Protocol (PEP 544) for duck typing instead of ABC.
"""

from datetime import datetime
from typing import Any, Callable, Optional, Protocol, Set

from ..core.constants import StatisticsOption
from ..core.interval import TimeInterval
from ..core.models import NativeSample, SamplePredicate
from ..core.sample_types import SampleType

Completion = Callable[[Optional[Any], Optional[BaseException]], None]


class HealthStoreProtocol(Protocol):
    """
    Protocol for health-data store implementations

    Any class implementing this protocol can be injected into QuantityService.
    """

    def run_bucketed_statistics_query(
            self,
            sample_type: SampleType,
            predicate: SamplePredicate,
            options: Set[StatisticsOption],
            anchor_date: datetime,
            interval: TimeInterval,
            completion: Completion,
    ) -> None:
        """
        Compute per-bucket statistics for samples matching the predicate

        Delivers a StatisticsCollection whose buckets are ascending by start
        date and carry the statistics named in `options`.
        """
        ...

    def run_sample_query(
            self,
            sample_type: SampleType,
            predicate: SamplePredicate,
            limit: Optional[int],
            sort_ascending_by_start: bool,
            completion: Completion,
    ) -> None:
        """
        Fetch raw samples matching the predicate

        Delivers List[NativeSample], at most `limit` long (None = unbounded).
        """
        ...

    def persist(self, sample: NativeSample, completion: Completion) -> None:
        """Store a sample; delivers True on success."""
        ...

