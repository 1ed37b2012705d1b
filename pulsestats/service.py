"""
Quantity Service

The three public operations over a health store: bucketed aggregation, raw
sample retrieval and the sample writer. Each call is one logical request; the
service keeps no state between requests beyond the injected store.
"""

import logging
from typing import List, Optional, Union
from .aggregate import enumerate_statistics, get_aggregation_spec
from .core.exceptions import InvalidParameterError, PreconditionError
from .core.models import AggregationQuery, InsertRequest, QuantitySample, RawQuery, StatisticsCollection
from .core.sample_types import SampleType, get_sample_type
from .store import HealthStoreProtocol, InMemoryHealthStore, await_completion
from .utils import query_ctx


class QuantityService:
    """
    Service for quantity samples - aggregation, retrieval, persistence

    Store results arrive through single-shot completions; store failures
    surface as StoreExecutionError and are never retried.
    """

    def __init__(self, store: Optional[HealthStoreProtocol] = None):
        """
        Initialize service with dependency injection

        Args:
            store: Health store implementation (default: InMemoryHealthStore)
        """
        self.store = store if store is not None else InMemoryHealthStore()

        logging.info(f"Initialized QuantityService with {type(self.store).__name__}")

    @staticmethod
    def _check_sample_type(sample_type: Union[SampleType, str], query_type: SampleType) -> None:
        resolved = sample_type if isinstance(sample_type, SampleType) else get_sample_type(sample_type)
        if resolved is not query_type:
            raise InvalidParameterError(
                f"Sample type {sample_type!r} does not match query sample type {query_type.identifier}"
            )

    async def get_aggregated_samples(
            self,
            sample_type: Union[SampleType, str],
            query: AggregationQuery
    ) -> List[QuantitySample]:
        """
        Aggregate samples into buckets of query.interval anchored at query.anchor_date

        Returns:
            One sample per non-empty bucket intersecting [query.start_time, query.end_time],
            in bucket order

        Raises:
            InvalidParameterError: If sample_type differs from the query's
            StoreExecutionError: If the store reports a failure
            IncompatibleUnitError: If a bucket value cannot be expressed in query.unit
            PreconditionError: If the store breaks its result contract
        """
        self._check_sample_type(sample_type, query.sample_type)
        spec = get_aggregation_spec(query.mode)

        with query_ctx("aggregate", query.sample_type.identifier):
            logging.info(
                f"[QuantityService] Aggregating {query.sample_type.identifier} "
                f"mode={query.mode.value} interval={query.interval} "
                f"range={query.start_time.isoformat()}..{query.end_time.isoformat()}"
            )

            collection = await await_completion(
                lambda completion: self.store.run_bucketed_statistics_query(
                    query.sample_type,
                    query.predicate(),
                    {spec.option},
                    query.anchor_date,
                    query.interval,
                    completion,
                ),
                "run_bucketed_statistics_query",
            )
            if not isinstance(collection, StatisticsCollection):
                raise PreconditionError(
                    f"Store returned {type(collection).__name__} instead of a StatisticsCollection"
                )

            samples = enumerate_statistics(collection, query)
            logging.info(f"[QuantityService] Aggregation produced {len(samples)} samples")
            return samples

    async def get_raw_samples(
            self,
            sample_type: Union[SampleType, str],
            query: RawQuery
    ) -> List[QuantitySample]:
        """
        Fetch raw samples ascending by start time, converted to query.unit

        A limit of zero or below returns an empty list without contacting the store.

        Raises:
            InvalidParameterError: If sample_type differs from the query's
            StoreExecutionError: If the store reports a failure
            IncompatibleUnitError: If a stored value cannot be expressed in query.unit
            PreconditionError: If the store returns too many or unordered samples
        """
        self._check_sample_type(sample_type, query.sample_type)

        if query.returns_nothing:
            logging.info(f"[QuantityService] Raw query with limit={query.limit}, returning no samples")
            return []

        with query_ctx("raw", query.sample_type.identifier):
            logging.info(
                f"[QuantityService] Fetching {query.sample_type.identifier} samples, "
                f"limit={query.limit if query.limit is not None else 'none'}"
            )

            native_samples = await await_completion(
                lambda completion: self.store.run_sample_query(
                    query.sample_type,
                    query.predicate(),
                    query.limit,
                    True,
                    completion,
                ),
                "run_sample_query",
            )
            if not isinstance(native_samples, list):
                raise PreconditionError(f"Store returned {type(native_samples).__name__} instead of a sample list")

            if query.limit is not None and len(native_samples) > query.limit:
                raise PreconditionError(
                    f"Store returned {len(native_samples)} samples for limit {query.limit}"
                )
            for previous, current in zip(native_samples, native_samples[1:]):
                if current.start_time < previous.start_time:
                    raise PreconditionError("Store returned samples out of start-time order")

            samples = [
                QuantitySample(
                    value=native.quantity.value_in(query.unit),
                    unit=query.unit,
                    start_time=native.start_time,
                    end_time=native.end_time,
                )
                for native in native_samples
            ]
            logging.info(f"[QuantityService] Fetched {len(samples)} samples")
            return samples

    async def save_sample(self, request: InsertRequest) -> None:
        """
        Persist one sample

        No read-after-write visibility is promised to later queries.

        Raises:
            StoreExecutionError: If the store reports a failure
        """
        native_sample = request.to_native_sample()

        with query_ctx("save", request.sample_type.identifier):
            await await_completion(
                lambda completion: self.store.persist(native_sample, completion),
                "persist",
            )

            logging.info(
                f"[QuantityService] Saved {request.sample_type.identifier} sample {native_sample.uuid}",
                extra={"encrypted_info": f"{request.value} {request.unit}"}
            )
