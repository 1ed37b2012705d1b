"""
Sample Type Catalogue

Sample-type identifiers a store understands, with their value kind, native unit
and aggregation style.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Set

from .constants import AggregationStyle, SampleKind
from .exceptions import PreconditionError


@dataclass(frozen=True)
class SampleTypeInfo:
    """Sample type information"""
    identifier: str  # lowerCamelCase, as sent by callers
    kind: SampleKind
    native_unit: str = ""
    style: AggregationStyle = AggregationStyle.DISCRETE
    description: str = ""


class SampleType(Enum):
    """Sample types with embedded SampleTypeInfo"""

    # Activity
    STEP_COUNT = SampleTypeInfo(
        identifier="stepCount",
        kind=SampleKind.QUANTITY,
        native_unit="count",
        style=AggregationStyle.CUMULATIVE,
        description="Number of steps taken",
    )
    DISTANCE_WALKING_RUNNING = SampleTypeInfo(
        identifier="distanceWalkingRunning",
        kind=SampleKind.QUANTITY,
        native_unit="m",
        style=AggregationStyle.CUMULATIVE,
        description="Distance covered on foot",
    )
    DISTANCE_CYCLING = SampleTypeInfo(
        identifier="distanceCycling",
        kind=SampleKind.QUANTITY,
        native_unit="m",
        style=AggregationStyle.CUMULATIVE,
        description="Distance covered by bicycle",
    )
    FLIGHTS_CLIMBED = SampleTypeInfo(
        identifier="flightsClimbed",
        kind=SampleKind.QUANTITY,
        native_unit="count",
        style=AggregationStyle.CUMULATIVE,
        description="Flights of stairs climbed",
    )
    ACTIVE_ENERGY_BURNED = SampleTypeInfo(
        identifier="activeEnergyBurned",
        kind=SampleKind.QUANTITY,
        native_unit="kcal",
        style=AggregationStyle.CUMULATIVE,
        description="Energy burned through activity",
    )
    BASAL_ENERGY_BURNED = SampleTypeInfo(
        identifier="basalEnergyBurned",
        kind=SampleKind.QUANTITY,
        native_unit="kcal",
        style=AggregationStyle.CUMULATIVE,
        description="Resting energy burned",
    )
    APPLE_EXERCISE_TIME = SampleTypeInfo(
        identifier="appleExerciseTime",
        kind=SampleKind.QUANTITY,
        native_unit="min",
        style=AggregationStyle.CUMULATIVE,
        description="Exercise minutes",
    )

    # Vital signs
    HEART_RATE = SampleTypeInfo(
        identifier="heartRate",
        kind=SampleKind.QUANTITY,
        native_unit="count/min",
        description="Heart beats per minute",
    )
    RESTING_HEART_RATE = SampleTypeInfo(
        identifier="restingHeartRate",
        kind=SampleKind.QUANTITY,
        native_unit="count/min",
    )
    HEART_RATE_VARIABILITY_SDNN = SampleTypeInfo(
        identifier="heartRateVariabilitySDNN",
        kind=SampleKind.QUANTITY,
        native_unit="ms",
    )
    RESPIRATORY_RATE = SampleTypeInfo(
        identifier="respiratoryRate",
        kind=SampleKind.QUANTITY,
        native_unit="count/min",
    )
    OXYGEN_SATURATION = SampleTypeInfo(
        identifier="oxygenSaturation",
        kind=SampleKind.QUANTITY,
        native_unit="%",
    )
    BODY_TEMPERATURE = SampleTypeInfo(
        identifier="bodyTemperature",
        kind=SampleKind.QUANTITY,
        native_unit="degC",
    )
    BLOOD_PRESSURE_SYSTOLIC = SampleTypeInfo(
        identifier="bloodPressureSystolic",
        kind=SampleKind.QUANTITY,
        native_unit="mmHg",
    )
    BLOOD_PRESSURE_DIASTOLIC = SampleTypeInfo(
        identifier="bloodPressureDiastolic",
        kind=SampleKind.QUANTITY,
        native_unit="mmHg",
    )
    BLOOD_GLUCOSE = SampleTypeInfo(
        identifier="bloodGlucose",
        kind=SampleKind.QUANTITY,
        native_unit="mg/dL",
    )

    # Body measurements
    BODY_MASS = SampleTypeInfo(
        identifier="bodyMass",
        kind=SampleKind.QUANTITY,
        native_unit="kg",
        description="Body weight",
    )
    HEIGHT = SampleTypeInfo(
        identifier="height",
        kind=SampleKind.QUANTITY,
        native_unit="m",
    )
    BODY_FAT_PERCENTAGE = SampleTypeInfo(
        identifier="bodyFatPercentage",
        kind=SampleKind.QUANTITY,
        native_unit="%",
    )
    VO2_MAX = SampleTypeInfo(
        identifier="vo2Max",
        kind=SampleKind.QUANTITY,
        native_unit="mL/kg/min",
    )

    # Nutrition
    DIETARY_ENERGY_CONSUMED = SampleTypeInfo(
        identifier="dietaryEnergyConsumed",
        kind=SampleKind.QUANTITY,
        native_unit="kcal",
        style=AggregationStyle.CUMULATIVE,
    )
    DIETARY_WATER = SampleTypeInfo(
        identifier="dietaryWater",
        kind=SampleKind.QUANTITY,
        native_unit="L",
        style=AggregationStyle.CUMULATIVE,
    )

    # Category types (not quantity-valued)
    SLEEP_ANALYSIS = SampleTypeInfo(
        identifier="sleepAnalysis",
        kind=SampleKind.CATEGORY,
        description="Sleep stages",
    )
    MINDFUL_SESSION = SampleTypeInfo(
        identifier="mindfulSession",
        kind=SampleKind.CATEGORY,
    )

    @property
    def identifier(self) -> str:
        return self.value.identifier

    @property
    def is_quantity(self) -> bool:
        return self.value.kind == SampleKind.QUANTITY


# ============================================================================
# UTILITY VARIABLES AND FUNCTIONS
# ============================================================================

VALID_SAMPLE_TYPES: Set[str] = {sample_type.identifier for sample_type in SampleType}

_SAMPLE_TYPE_LOOKUP: Dict[str, SampleType] = {
    sample_type.identifier: sample_type for sample_type in SampleType
}


def get_sample_type(identifier: str) -> Optional[SampleType]:
    """Resolve a sample type from its string identifier, None when unknown"""
    if not identifier:
        return None

    sample_type = _SAMPLE_TYPE_LOOKUP.get(identifier)
    if sample_type is None:
        logging.warning(f"Sample type {identifier} not found in SampleType")
    return sample_type


def require_quantity_type(sample_type: SampleType) -> SampleType:
    """Fail with PreconditionError unless the sample type is quantity-valued"""
    if not sample_type.is_quantity:
        raise PreconditionError(
            f"Sample type {sample_type.identifier} is {sample_type.value.kind.value}-valued, not quantity-valued"
        )
    return sample_type
