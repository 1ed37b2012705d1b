"""
Aggregation Mode Registry

Static table mapping each AggregationMode to the statistics option a store must
precompute, the extractor that reads the value out of a bucket, and the number
of values one bucket yields. The mode enum carries no behaviour; this table is
checked for totality when the module is imported.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ..core.constants import AggregationMode, AggregationStyle, StatisticsOption
from ..core.exceptions import PreconditionError, UnsupportedAggregationModeError
from ..core.models import NativeSample, Statistics
from ..core.units import Quantity, convert

# Bucket -> extracted values. An empty list means the bucket has nothing to report.
Extractor = Callable[[Statistics], List[Quantity]]

# Raw samples + target unit -> statistic, None for an empty sample set.
Reducer = Callable[[List[NativeSample], str], Optional[Quantity]]


@dataclass(frozen=True)
class AggregationSpec:
    """How one aggregation mode is computed"""
    option: StatisticsOption
    arity: int  # Values per non-empty bucket
    extract: Extractor
    style: AggregationStyle  # Sample types the mode applies to


def _field_extractor(field_name: str) -> Extractor:
    def extract(statistics: Statistics) -> List[Quantity]:
        quantity = getattr(statistics, field_name)
        return [] if quantity is None else [quantity]

    extract.__name__ = f"extract_{field_name}"
    return extract


AGGREGATION_REGISTRY: Dict[AggregationMode, AggregationSpec] = {
    AggregationMode.CUMULATIVE_SUM: AggregationSpec(
        option=StatisticsOption.SUM,
        arity=1,
        extract=_field_extractor("sum_quantity"),
        style=AggregationStyle.CUMULATIVE,
    ),
    AggregationMode.DISCRETE_AVERAGE: AggregationSpec(
        option=StatisticsOption.AVERAGE,
        arity=1,
        extract=_field_extractor("average_quantity"),
        style=AggregationStyle.DISCRETE,
    ),
    AggregationMode.DISCRETE_MIN: AggregationSpec(
        option=StatisticsOption.MIN,
        arity=1,
        extract=_field_extractor("minimum_quantity"),
        style=AggregationStyle.DISCRETE,
    ),
    AggregationMode.DISCRETE_MAX: AggregationSpec(
        option=StatisticsOption.MAX,
        arity=1,
        extract=_field_extractor("maximum_quantity"),
        style=AggregationStyle.DISCRETE,
    ),
    AggregationMode.DISCRETE_MOST_RECENT: AggregationSpec(
        option=StatisticsOption.MOST_RECENT,
        arity=1,
        extract=_field_extractor("most_recent_quantity"),
        style=AggregationStyle.DISCRETE,
    ),
}

_unregistered = [mode.value for mode in AggregationMode if mode not in AGGREGATION_REGISTRY]
if _unregistered:
    raise PreconditionError(f"Aggregation modes without a registry entry: {_unregistered}")


def get_aggregation_spec(mode: AggregationMode) -> AggregationSpec:
    """
    Look up the registry entry for a mode

    Raises:
        UnsupportedAggregationModeError: If the mode is not registered
    """
    spec = AGGREGATION_REGISTRY.get(mode)
    if spec is None:
        raise UnsupportedAggregationModeError(f"Unsupported aggregation mode: {mode!r}")
    return spec


# ============================================================================
# REDUCTIONS OVER RAW SAMPLES
# ============================================================================

def _values(samples: List[NativeSample], unit: str) -> List[float]:
    return [convert(sample.quantity.value, sample.quantity.unit, unit) for sample in samples]


def _reduce_sum(samples: List[NativeSample], unit: str) -> Optional[Quantity]:
    if not samples:
        return None
    return Quantity(value=sum(_values(samples, unit)), unit=unit)


def _reduce_average(samples: List[NativeSample], unit: str) -> Optional[Quantity]:
    if not samples:
        return None
    values = _values(samples, unit)
    return Quantity(value=sum(values) / len(values), unit=unit)


def _reduce_min(samples: List[NativeSample], unit: str) -> Optional[Quantity]:
    if not samples:
        return None
    return Quantity(value=min(_values(samples, unit)), unit=unit)


def _reduce_max(samples: List[NativeSample], unit: str) -> Optional[Quantity]:
    if not samples:
        return None
    return Quantity(value=max(_values(samples, unit)), unit=unit)


def _reduce_most_recent(samples: List[NativeSample], unit: str) -> Optional[Quantity]:
    if not samples:
        return None
    latest = max(samples, key=lambda sample: sample.start_time)
    return Quantity(value=latest.quantity.value_in(unit), unit=unit)


STATISTICS_REDUCERS: Dict[StatisticsOption, Reducer] = {
    StatisticsOption.SUM: _reduce_sum,
    StatisticsOption.AVERAGE: _reduce_average,
    StatisticsOption.MIN: _reduce_min,
    StatisticsOption.MAX: _reduce_max,
    StatisticsOption.MOST_RECENT: _reduce_most_recent,
}

# Statistics field each option fills in.
STATISTICS_FIELDS: Dict[StatisticsOption, str] = {
    StatisticsOption.SUM: "sum_quantity",
    StatisticsOption.AVERAGE: "average_quantity",
    StatisticsOption.MIN: "minimum_quantity",
    StatisticsOption.MAX: "maximum_quantity",
    StatisticsOption.MOST_RECENT: "most_recent_quantity",
}
