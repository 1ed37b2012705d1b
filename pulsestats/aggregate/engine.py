"""
Bucket walker

Turns a statistics collection bucketed by the store into QuantitySamples for
the walk range of an AggregationQuery.
"""

import logging
from typing import List

from ..core.exceptions import PreconditionError
from ..core.models import AggregationQuery, QuantitySample, StatisticsCollection
from .registry import get_aggregation_spec


def enumerate_statistics(collection: StatisticsCollection, query: AggregationQuery) -> List[QuantitySample]:
    """
    Walk the buckets of `collection` that intersect [query.start_time, query.end_time]

    Each bucket the mode's extractor yields values for becomes a sample in
    query.unit, timed with the bucket's own boundaries. Buckets yielding
    nothing are skipped. Output keeps the store's bucket order.

    Raises:
        PreconditionError: If buckets are not strictly ascending, or an
            extractor yields a number of values other than 0 or the mode's arity
        IncompatibleUnitError: If a bucket value cannot be expressed in query.unit
    """
    spec = get_aggregation_spec(query.mode)
    walk_start, walk_end = query.start_time, query.end_time

    samples: List[QuantitySample] = []
    previous_start = None
    skipped = 0

    for statistics in collection.statistics:
        if previous_start is not None and statistics.start_date <= previous_start:
            raise PreconditionError(
                f"Store buckets are not ascending: {statistics.start_date.isoformat()} "
                f"follows {previous_start.isoformat()}"
            )
        previous_start = statistics.start_date

        # A degenerate walk range (start == end) keeps the bucket containing it.
        if statistics.start_date > walk_end or statistics.end_date <= walk_start:
            continue

        values = spec.extract(statistics)
        if not values:
            skipped += 1
            continue
        if len(values) != spec.arity:
            raise PreconditionError(
                f"{query.mode.value} extractor returned {len(values)} values, expected {spec.arity}"
            )

        for quantity in values:
            samples.append(QuantitySample(
                value=quantity.value_in(query.unit),
                unit=query.unit,
                start_time=statistics.start_date,
                end_time=statistics.end_date,
            ))

    logging.debug(
        f"[BucketWalker] {query.mode.value} over {query.interval}: "
        f"{len(samples)} samples, {skipped} empty buckets skipped"
    )
    return samples
