"""Store doubles and sample builders

Every double implements HealthStoreProtocol and delivers its outcome on the
next loop turn, like a real asynchronous store.
"""
import asyncio
from datetime import datetime
from typing import List, Optional

import pytest
import pytz

from pulsestats.bridge import QuantityBridge
from pulsestats.core import NativeSample, Quantity, SampleType, StatisticsCollection
from pulsestats.service import QuantityService
from pulsestats.store import InMemoryHealthStore


def utc(*args) -> datetime:
    return pytz.utc.localize(datetime(*args))


def native(sample_type: SampleType, value: float, unit: str, start: datetime,
           end: Optional[datetime] = None, **metadata) -> NativeSample:
    return NativeSample(
        sample_type=sample_type,
        quantity=Quantity(value=value, unit=unit),
        start_time=start,
        end_time=end or start,
        metadata=metadata,
    )


class RecordingStore(InMemoryHealthStore):
    """In-memory store that records the arguments of every call"""

    def __init__(self, samples=None):
        super().__init__(samples)
        self.calls: List[tuple] = []

    def run_sample_query(self, sample_type, predicate, limit, sort_ascending_by_start, completion):
        self.calls.append(("run_sample_query", sample_type, predicate, limit, sort_ascending_by_start))
        super().run_sample_query(sample_type, predicate, limit, sort_ascending_by_start, completion)

    def run_bucketed_statistics_query(self, sample_type, predicate, options, anchor_date, interval, completion):
        self.calls.append(("run_bucketed_statistics_query", sample_type, predicate, options, anchor_date, interval))
        super().run_bucketed_statistics_query(sample_type, predicate, options, anchor_date, interval, completion)

    def persist(self, sample, completion):
        self.calls.append(("persist", sample))
        super().persist(sample, completion)


class FailingStore:
    """Reports every operation as failed with the same error"""

    def __init__(self, error: BaseException):
        self.error = error

    def _fail(self, completion):
        asyncio.get_running_loop().call_soon(completion, None, self.error)

    def run_sample_query(self, sample_type, predicate, limit, sort_ascending_by_start, completion):
        self._fail(completion)

    def run_bucketed_statistics_query(self, sample_type, predicate, options, anchor_date, interval, completion):
        self._fail(completion)

    def persist(self, sample, completion):
        self._fail(completion)


class ScriptedStore:
    """Delivers canned results regardless of the query"""

    def __init__(self, samples=None, collection: Optional[StatisticsCollection] = None):
        self.samples = samples
        self.collection = collection

    def run_sample_query(self, sample_type, predicate, limit, sort_ascending_by_start, completion):
        asyncio.get_running_loop().call_soon(completion, self.samples, None)

    def run_bucketed_statistics_query(self, sample_type, predicate, options, anchor_date, interval, completion):
        asyncio.get_running_loop().call_soon(completion, self.collection, None)

    def persist(self, sample, completion):
        asyncio.get_running_loop().call_soon(completion, True, None)


class SilentStore:
    """Accepts every call and drops the completion without calling it"""

    def run_sample_query(self, sample_type, predicate, limit, sort_ascending_by_start, completion):
        pass

    def run_bucketed_statistics_query(self, sample_type, predicate, options, anchor_date, interval, completion):
        pass

    def persist(self, sample, completion):
        pass


@pytest.fixture
def store() -> InMemoryHealthStore:
    return InMemoryHealthStore()


@pytest.fixture
def service(store) -> QuantityService:
    return QuantityService(store)


@pytest.fixture
def bridge(service) -> QuantityBridge:
    return QuantityBridge(service)


@pytest.fixture
def step_store() -> InMemoryHealthStore:
    """Steps: 2 + 3 on 2024-01-01, 5 on 2024-01-02"""
    return InMemoryHealthStore([
        native(SampleType.STEP_COUNT, 2, "count", utc(2024, 1, 1, 8), utc(2024, 1, 1, 9)),
        native(SampleType.STEP_COUNT, 3, "count", utc(2024, 1, 1, 18), utc(2024, 1, 1, 19)),
        native(SampleType.STEP_COUNT, 5, "count", utc(2024, 1, 2, 12), utc(2024, 1, 2, 13)),
    ])


@pytest.fixture
def heart_rate_store() -> InMemoryHealthStore:
    """Heart rate: 10 at 09:00 and 20 at 15:00 on 2024-01-01"""
    return InMemoryHealthStore([
        native(SampleType.HEART_RATE, 20, "count/min", utc(2024, 1, 1, 15)),
        native(SampleType.HEART_RATE, 10, "count/min", utc(2024, 1, 1, 9)),
    ])
