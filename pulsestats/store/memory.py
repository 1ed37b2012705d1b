"""
In-memory health store

A complete store collaborator kept in process memory, used for local runs and
tests. Queries are evaluated synchronously; results are delivered on the next
turn of the running event loop, so callers always observe an asynchronous
completion.
"""

import asyncio
import logging
import threading
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

from ..aggregate.registry import STATISTICS_FIELDS, STATISTICS_REDUCERS
from ..core.constants import StatisticsOption
from ..core.interval import TimeInterval
from ..core.models import NativeSample, SamplePredicate, Statistics, StatisticsCollection
from ..core.sample_types import SampleType
from .base import Completion


class InMemoryHealthStore:
    """
    Health store holding NativeSamples in a list

    Statistics are computed in the sample type's native unit. A sample belongs
    to the bucket containing its start time. When the predicate carries both
    bounds, every bucket between them is reported, empty ones included.
    """

    def __init__(self, samples: Optional[Iterable[NativeSample]] = None):
        self._samples: List[NativeSample] = list(samples or [])
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._samples)

    def _deliver(self, completion: Completion, result, error=None) -> None:
        asyncio.get_running_loop().call_soon(completion, result, error)

    def _matching(self, sample_type: SampleType, predicate: SamplePredicate) -> List[NativeSample]:
        with self._lock:
            snapshot = list(self._samples)
        return [s for s in snapshot if s.sample_type is sample_type and predicate.matches(s)]

    #-------------------------------------------------------------------------

    def run_sample_query(
            self,
            sample_type: SampleType,
            predicate: SamplePredicate,
            limit: Optional[int],
            sort_ascending_by_start: bool,
            completion: Completion,
    ) -> None:
        samples = self._matching(sample_type, predicate)
        if sort_ascending_by_start:
            samples.sort(key=lambda sample: sample.start_time)
        if limit is not None:
            samples = samples[:max(limit, 0)]

        logging.debug(f"[InMemoryHealthStore] Sample query {sample_type.identifier}: {len(samples)} samples")
        self._deliver(completion, samples)

    def run_bucketed_statistics_query(
            self,
            sample_type: SampleType,
            predicate: SamplePredicate,
            options: Set[StatisticsOption],
            anchor_date: datetime,
            interval: TimeInterval,
            completion: Completion,
    ) -> None:
        samples = self._matching(sample_type, predicate)
        native_unit = sample_type.value.native_unit

        buckets: Dict[int, List[NativeSample]] = {}
        for sample in samples:
            k = interval.bucket_index(anchor_date, sample.start_time)
            buckets.setdefault(k, []).append(sample)

        indices = set(buckets)
        if predicate.start_time is not None and predicate.end_time is not None:
            first = interval.bucket_index(anchor_date, predicate.start_time)
            last = interval.bucket_index(anchor_date, predicate.end_time)
            indices.update(range(first, last + 1))

        statistics = []
        for k in sorted(indices):
            bucket_samples = buckets.get(k, [])
            start_date, end_date = interval.bucket_bounds(anchor_date, k)

            values = {
                STATISTICS_FIELDS[option]: STATISTICS_REDUCERS[option](bucket_samples, native_unit)
                for option in options
            }
            statistics.append(Statistics(
                start_date=start_date,
                end_date=end_date,
                sample_count=len(bucket_samples),
                **values,
            ))

        logging.debug(
            f"[InMemoryHealthStore] Statistics query {sample_type.identifier}: "
            f"{len(samples)} samples in {len(statistics)} buckets of {interval}"
        )
        self._deliver(completion, StatisticsCollection(
            anchor_date=anchor_date,
            interval=interval,
            statistics=statistics,
        ))

    def persist(self, sample: NativeSample, completion: Completion) -> None:
        with self._lock:
            self._samples.append(sample)

        logging.debug(f"[InMemoryHealthStore] Persisted {sample.sample_type.identifier} sample {sample.uuid}")
        self._deliver(completion, True)
