"""
Quantity Bridge
Untyped parameter maps from a remote caller in, JSON text out
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from .core.exceptions import InvalidParameterError
from .core.interval import TimeInterval
from .core.models import AggregationQuery, InsertRequest, QuantitySample, RawQuery
from .service import QuantityService
from .utils import Config, JsonEncoder, global_config
from .utils.config import QueryConfig


class QuantitySamplesParams(BaseModel):
    """getQuantitySamples parameters"""

    type: str = Field(..., description="Sample type identifier")
    unit: str = Field(..., description="Unit of the returned values")
    startDate: Optional[datetime] = Field(None, description="Range start (ISO-8601)")
    endDate: Optional[datetime] = Field(None, description="Range end (ISO-8601)")
    isUserEntered: Optional[bool] = Field(None, description="Filter on user-entered samples")
    limit: Optional[int] = Field(None, description="Maximum number of samples, absent = unbounded")


class AggregationParams(BaseModel):
    """getQuantitySamplesAggregation parameters"""

    type: str = Field(..., description="Sample type identifier")
    unit: str = Field(..., description="Unit of the returned values")
    startDate: datetime = Field(..., description="Walk range start (ISO-8601)")
    endDate: datetime = Field(..., description="Walk range end (ISO-8601)")
    option: str = Field(..., description="Aggregation mode")
    interval: Optional[str] = Field(None, description="Bucket size, e.g. 'day' or '2 hours'")
    anchorDate: Optional[datetime] = Field(None, description="Bucket grid anchor (ISO-8601)")
    isUserEntered: Optional[bool] = Field(None, description="Filter on user-entered samples")


class SampleParams(BaseModel):
    """saveQuantitySample sample parameters"""

    value: float = Field(..., description="Numeric value")
    unit: str = Field(..., description="Unit of value")
    startDate: datetime = Field(..., description="Start time (ISO-8601)")
    endDate: datetime = Field(..., description="End time (ISO-8601)")
    metadata: Optional[Dict[str, Any]] = Field(None, description="Free-form metadata")


def _parse(model: type, params: Any, operation: str):
    if not isinstance(params, dict):
        raise InvalidParameterError(
            f"[{operation}] Parameters must be a map, got {type(params).__name__}",
            user_message="Invalid parameters."
        )
    try:
        return model.model_validate(params)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise InvalidParameterError(
            f"[{operation}] Invalid parameters: {fields}",
            user_message="Invalid parameters."
        ) from e


def _to_json(samples: List[QuantitySample]) -> str:
    return json.dumps(samples, cls=JsonEncoder, ensure_ascii=False)


class QuantityBridge:
    """
    Adapter between loosely typed caller maps and QuantityService

    Parameter problems raise InvalidParameterError naming the operation;
    errors from the service propagate unchanged.
    """

    def __init__(self, service: QuantityService, config: Optional[Config] = None):
        self.service = service

        config = config if config is not None else global_config()
        self.query_config = config.query if config is not None else QueryConfig()

    def _default_anchor(self) -> datetime:
        """Start of today in the configured time zone"""
        tz = self.query_config.timezone
        now = datetime.now(tz)
        return tz.localize(datetime(now.year, now.month, now.day))

    def _interval(self, text: Optional[str]) -> TimeInterval:
        if text:
            try:
                return TimeInterval.parse(text)
            except InvalidParameterError:
                logging.warning(
                    f"[QuantityBridge] Unknown interval '{text}', using '{self.query_config.default_interval}'"
                )
        return TimeInterval.parse(self.query_config.default_interval)

    async def get_quantity_samples(self, params: Dict[str, Any]) -> str:
        p = _parse(QuantitySamplesParams, params, "getQuantitySamples")

        query = RawQuery(
            sample_type=p.type,
            start_time=p.startDate,
            end_time=p.endDate,
            is_user_entered=p.isUserEntered,
            unit=p.unit,
            limit=p.limit,
        )
        samples = await self.service.get_raw_samples(query.sample_type, query)
        return _to_json(samples)

    async def get_quantity_samples_aggregation(self, params: Dict[str, Any]) -> str:
        p = _parse(AggregationParams, params, "getQuantitySamplesAggregation")

        query = AggregationQuery(
            sample_type=p.type,
            start_time=p.startDate,
            end_time=p.endDate,
            anchor_date=p.anchorDate or self._default_anchor(),
            interval=self._interval(p.interval),
            mode=p.option,
            unit=p.unit,
            is_user_entered=p.isUserEntered,
        )
        samples = await self.service.get_aggregated_samples(query.sample_type, query)
        return _to_json(samples)

    async def save_quantity_sample(self, type: str, sample: Dict[str, Any]) -> bool:
        p = _parse(SampleParams, sample, "saveQuantitySample")

        request = InsertRequest(
            sample_type=type,
            value=p.value,
            unit=p.unit,
            start_time=p.startDate,
            end_time=p.endDate,
            metadata=p.metadata,
        )
        await self.service.save_sample(request)
        return True
