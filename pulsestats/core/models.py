"""
Core data models module

Typed queries built by callers, the records a store hands back, and the
QuantitySample result type. All models are immutable value objects created
per request.
"""

import math
from uuid import uuid4
from datetime import datetime
from typing import Any, Dict, List, Optional

import pytz
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from .constants import WAS_USER_ENTERED_KEY, AggregationMode
from .exceptions import (
    IncompatibleUnitError,
    InvalidParameterError,
    MissingTimeRangeError,
    PreconditionError,
    UnsupportedAggregationModeError,
)
from .interval import TimeInterval
from .sample_types import SampleType, get_sample_type, require_quantity_type
from .units import Quantity, are_compatible


def _ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes are taken as UTC"""
    if value is not None and value.tzinfo is None:
        return pytz.utc.localize(value)
    return value


def _coerce_sample_type(value: Any) -> SampleType:
    if isinstance(value, SampleType):
        return value
    if isinstance(value, str):
        sample_type = get_sample_type(value)
        if sample_type is not None:
            return sample_type
    raise InvalidParameterError(f"Unknown sample type: {value!r}")


def _check_unit_derivable(sample_type: SampleType, unit: str) -> None:
    native_unit = sample_type.value.native_unit
    if not are_compatible(native_unit, unit):
        raise IncompatibleUnitError(
            native_unit, unit,
            f"Unit '{unit}' cannot be derived from {sample_type.identifier} ({native_unit})"
        )


class _SampleTypedModel(BaseModel):
    """Shared handling of the sample_type field"""

    model_config = ConfigDict(frozen=True)

    sample_type: SampleType = Field(..., description="Sample type")

    @field_validator("sample_type", mode="before")
    @classmethod
    def validate_sample_type(cls, v: Any) -> SampleType:
        return _coerce_sample_type(v)

    @field_serializer("sample_type")
    def serialize_sample_type(self, sample_type: SampleType) -> str:
        return sample_type.identifier


# ============================================================================
# RESULT TYPE
# ============================================================================

class QuantitySample(BaseModel):
    """A timestamped scalar value in the caller's unit"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    value: float = Field(..., description="Numeric value")
    unit: str = Field(..., description="Unit identifier")
    start_time: datetime = Field(..., alias="startDate", description="Start of the measured interval")
    end_time: datetime = Field(..., alias="endDate", description="End of the measured interval")

    @model_validator(mode="after")
    def check_time_order(self) -> "QuantitySample":
        if self.start_time > self.end_time:
            raise PreconditionError(
                f"Sample starts after it ends: {self.start_time.isoformat()} > {self.end_time.isoformat()}"
            )
        return self


# ============================================================================
# STORE RECORDS
# ============================================================================

class NativeSample(_SampleTypedModel):
    """A raw record as held by a health store"""

    uuid: str = Field(default_factory=lambda: str(uuid4()), description="Record identifier")
    quantity: Quantity = Field(..., description="Value in the unit it was recorded with")
    start_time: datetime = Field(..., description="Start time")
    end_time: datetime = Field(..., description="End time")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Free-form metadata")

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: datetime) -> datetime:
        return _ensure_aware(v)

    @model_validator(mode="after")
    def check_time_order(self) -> "NativeSample":
        if self.start_time > self.end_time:
            raise PreconditionError(f"Stored sample {self.uuid} starts after it ends")
        return self

    @property
    def was_user_entered(self) -> bool:
        return bool(self.metadata.get(WAS_USER_ENTERED_KEY, False))


class Statistics(BaseModel):
    """One bucket of a statistics collection with the values the store precomputed"""

    model_config = ConfigDict(frozen=True)

    start_date: datetime
    end_date: datetime
    sum_quantity: Optional[Quantity] = None
    average_quantity: Optional[Quantity] = None
    minimum_quantity: Optional[Quantity] = None
    maximum_quantity: Optional[Quantity] = None
    most_recent_quantity: Optional[Quantity] = None
    sample_count: int = 0

    @field_validator("start_date", "end_date")
    @classmethod
    def validate_time(cls, v: datetime) -> datetime:
        return _ensure_aware(v)


class StatisticsCollection(BaseModel):
    """Buckets produced by a store, ascending by start date"""

    model_config = ConfigDict(frozen=True)

    anchor_date: datetime
    interval: TimeInterval
    statistics: List[Statistics] = Field(default_factory=list)

    @field_validator("anchor_date")
    @classmethod
    def validate_time(cls, v: datetime) -> datetime:
        return _ensure_aware(v)


# ============================================================================
# QUERIES
# ============================================================================

class SamplePredicate(BaseModel):
    """
    Filter applied by the store

    A sample matches when its interval touches the closed range [start_time, end_time]
    and, when is_user_entered is set, its user-entered flag equals it.
    """

    model_config = ConfigDict(frozen=True)

    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    is_user_entered: Optional[bool] = None

    def matches(self, sample: NativeSample) -> bool:
        if self.start_time is not None and sample.end_time < self.start_time:
            return False
        if self.end_time is not None and sample.start_time > self.end_time:
            return False
        if self.is_user_entered is not None and sample.was_user_entered != self.is_user_entered:
            return False
        return True


class AggregationQuery(_SampleTypedModel):
    """Request for bucketed statistics over a closed time range"""

    start_time: Optional[datetime] = Field(default=None, description="Walk range start (required)")
    end_time: Optional[datetime] = Field(default=None, description="Walk range end (required)")
    anchor_date: datetime = Field(..., description="Reference instant of the bucket grid")
    interval: TimeInterval = Field(default_factory=TimeInterval, description="Bucket size")
    mode: AggregationMode = Field(..., description="Aggregation mode")
    unit: str = Field(..., description="Unit of the returned values")
    is_user_entered: Optional[bool] = Field(default=None, description="Filter on user-entered samples")

    @field_validator("mode", mode="before")
    @classmethod
    def validate_mode(cls, v: Any) -> AggregationMode:
        if isinstance(v, AggregationMode):
            return v
        try:
            return AggregationMode(v)
        except ValueError:
            raise UnsupportedAggregationModeError(f"Unsupported aggregation mode: {v!r}") from None

    @field_validator("start_time", "end_time", "anchor_date")
    @classmethod
    def validate_time(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _ensure_aware(v)

    @model_validator(mode="after")
    def check_query(self) -> "AggregationQuery":
        if self.start_time is None or self.end_time is None:
            raise MissingTimeRangeError("Aggregation query requires both start_time and end_time")
        if self.start_time > self.end_time:
            raise InvalidParameterError("start_time must not be after end_time")

        require_quantity_type(self.sample_type)

        from ..aggregate.registry import get_aggregation_spec
        spec = get_aggregation_spec(self.mode)
        if spec.style != self.sample_type.value.style:
            raise UnsupportedAggregationModeError(
                f"{self.mode.value} is not applicable to {self.sample_type.value.style.value} "
                f"sample type {self.sample_type.identifier}"
            )

        _check_unit_derivable(self.sample_type, self.unit)
        return self

    def predicate(self) -> SamplePredicate:
        return SamplePredicate(
            start_time=self.start_time,
            end_time=self.end_time,
            is_user_entered=self.is_user_entered,
        )


class RawQuery(_SampleTypedModel):
    """Request for raw samples, ascending by start time"""

    start_time: Optional[datetime] = Field(default=None, description="Range start")
    end_time: Optional[datetime] = Field(default=None, description="Range end")
    is_user_entered: Optional[bool] = Field(default=None, description="Filter on user-entered samples")
    unit: str = Field(..., description="Unit of the returned values")
    limit: Optional[int] = Field(default=None, description="Maximum number of samples, None = unbounded")

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _ensure_aware(v)

    @model_validator(mode="after")
    def check_query(self) -> "RawQuery":
        if self.start_time is not None and self.end_time is not None and self.start_time > self.end_time:
            raise InvalidParameterError("start_time must not be after end_time")

        require_quantity_type(self.sample_type)
        _check_unit_derivable(self.sample_type, self.unit)
        return self

    @property
    def returns_nothing(self) -> bool:
        """A zero or negative limit selects no samples"""
        return self.limit is not None and self.limit <= 0

    def predicate(self) -> SamplePredicate:
        return SamplePredicate(
            start_time=self.start_time,
            end_time=self.end_time,
            is_user_entered=self.is_user_entered,
        )


class InsertRequest(_SampleTypedModel):
    """A sample to persist"""

    value: float = Field(..., description="Numeric value")
    unit: str = Field(..., description="Unit of value")
    start_time: datetime = Field(..., description="Start time")
    end_time: datetime = Field(..., description="End time")
    metadata: Optional[Dict[str, Any]] = Field(default=None, description="Free-form metadata")

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: datetime) -> datetime:
        return _ensure_aware(v)

    @model_validator(mode="after")
    def check_request(self) -> "InsertRequest":
        if not math.isfinite(self.value):
            raise InvalidParameterError(f"Sample value must be finite, got {self.value}")
        if self.start_time > self.end_time:
            raise InvalidParameterError("start_time must not be after end_time")

        require_quantity_type(self.sample_type)
        _check_unit_derivable(self.sample_type, self.unit)
        return self

    def to_native_sample(self) -> NativeSample:
        return NativeSample(
            sample_type=self.sample_type,
            quantity=Quantity(value=self.value, unit=self.unit),
            start_time=self.start_time,
            end_time=self.end_time,
            metadata=dict(self.metadata or {}),
        )
