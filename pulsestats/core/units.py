"""
Unit & Value Model

Unit identifiers, the Quantity value object and conversion between compatible units.
Bidirectional and transitive conversion factors are generated once at import time
from a small table of base-unit factors.
"""

import logging
from typing import Dict, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import IncompatibleUnitError

# ============================================================================
# RAW UNIT CONVERSIONS (Simple Configuration)
# ============================================================================

# Only base unit conversions are configured - the rest is auto-generated
# Format: base_unit: {target_unit: conversion_factor}
# Where: 1 base_unit = conversion_factor × target_unit
# Example: 1 kg = 1000 g, so "kg": {"g": 1000}
_RAW_UNIT_CONVERSIONS: Dict[str, Dict[str, float]] = {
    # Mass: 1 kg = 1000 g = 2.20462 lb = 35.274 oz = 0.157473 st
    "kg": {
        "g": 1000,
        "mg": 1_000_000,
        "lb": 2.2046226218,
        "oz": 35.27396195,
        "st": 0.1574730444,
    },

    # Length: 1 m = 100 cm = 1000 mm = 0.001 km = 3.28084 ft = 39.3701 in
    "m": {
        "cm": 100,
        "mm": 1000,
        "km": 0.001,
        "ft": 3.280839895,
        "in": 39.37007874,
        "mi": 1 / 1609.344,
        "yd": 1.0936132983,
    },

    # Time: 1 s = 1000 ms = 1/60 min = 1/3600 h = 1/86400 d
    "s": {
        "ms": 1000,
        "min": 1 / 60,
        "h": 1 / 3600,
        "hr": 1 / 3600,  # Alias
        "d": 1 / 86400,
    },

    # Energy: 1 kcal = 1 Cal = 1000 cal = 4.184 kJ = 4184 J
    "kcal": {
        "Cal": 1,  # Dietary calorie
        "cal": 1000,
        "kJ": 4.184,
        "J": 4184,
    },

    # Pressure: 1 mmHg = 0.133322 kPa = 0.0193368 psi
    "mmHg": {
        "kPa": 0.133322,
        "psi": 0.0193368,
        "cmAq": 1.35951,
    },

    # Concentration (mass-based, substance independent): 1 mg/dL = 10 mg/L = 0.01 g/L
    "mg/dL": {
        "mg/L": 10,
        "g/L": 0.01,
    },

    # Frequency: 1 count/min = 1 bpm = 1/60 Hz
    "count/min": {
        "bpm": 1,
        "/min": 1,
        "breaths/min": 1,
        "count/s": 1 / 60,
        "Hz": 1 / 60,
    },

    # Percentage: 1 % = 0.01 ratio
    "%": {
        "ratio": 0.01,
        "percent": 1,
    },

    # Volume: 1 L = 1000 mL = 33.814 fl_oz_us = 4.22675 cup_us
    "L": {
        "mL": 1000,
        "ml": 1000,  # Alias
        "fl_oz_us": 33.8140227,
        "cup_us": 4.2267528377,
    },

    # Speed: 1 m/s = 3.6 km/hr = 2.23694 mi/hr
    "m/s": {
        "km/hr": 3.6,
        "mi/hr": 2.2369362921,
    },

    # VO2 Max: 1 L/min/kg = 1000 mL/kg/min
    "L/min/kg": {
        "mL/kg/min": 1000,
        "mL/(min·kg)": 1000,
    },
}

# Units that convert only to themselves.
_STANDALONE_UNITS: Set[str] = {
    "count", "W", "kg/m²", "dBASPL", "IU", "score",
}

# Non-linear, handled by _convert_temperature.
_TEMPERATURE_UNITS: Set[str] = {"degC", "°C", "C", "degF", "°F", "F", "K"}


# ============================================================================
# AUTO-GENERATE COMPLETE CONVERSIONS
# ============================================================================

def _build_complete_conversions(raw_conversions: Dict[str, Dict[str, float]]) -> Dict[str, Dict[str, float]]:
    """
    Auto-generate complete bidirectional and transitive conversions from raw config

    Example:
        Input:  {"s": {"ms": 1000, "min": 1/60}}
        Output: {
            "s": {"ms": 1000, "min": 1/60},
            "ms": {"s": 0.001, "min": 1/60000},     # Auto-generated: reverse + transitive
            "min": {"s": 60, "ms": 60000}           # Auto-generated: reverse + transitive
        }

    Args:
        raw_conversions: Raw configuration with only base unit conversions

    Returns:
        Complete conversion mapping with all possible conversion paths
    """
    result: Dict[str, Dict[str, float]] = {}

    for base_unit, base_conversions in raw_conversions.items():
        units = [base_unit] + list(base_conversions.keys())

        for from_unit in units:
            result.setdefault(from_unit, {})

            for to_unit in units:
                if from_unit == to_unit or to_unit in result[from_unit]:
                    continue

                # from_unit -> base_unit -> to_unit
                from_to_base_factor = 1.0 if from_unit == base_unit else 1.0 / base_conversions[from_unit]
                base_to_to_factor = 1.0 if to_unit == base_unit else base_conversions[to_unit]

                result[from_unit][to_unit] = from_to_base_factor * base_to_to_factor

    return result


# Module-level auto-generation of complete conversions
UNIT_CONVERSIONS: Dict[str, Dict[str, float]] = _build_complete_conversions(_RAW_UNIT_CONVERSIONS)

KNOWN_UNITS: Set[str] = set(UNIT_CONVERSIONS) | _STANDALONE_UNITS | _TEMPERATURE_UNITS


# ============================================================================
# CORE API - Public Interface
# ============================================================================

def is_known_unit(unit: str) -> bool:
    return unit in KNOWN_UNITS


def are_compatible(from_unit: str, to_unit: str) -> bool:
    """Whether a value in `from_unit` can be expressed in `to_unit`."""
    _, success = convert_unit(0.0, from_unit, to_unit)
    return success


def convert(value: float, from_unit: str, to_unit: str) -> float:
    """
    Convert value between units, failing loudly

    Identical units return the value unchanged. No rounding is applied.

    Examples:
        convert(1000, "g", "kg")      # 1.0
        convert(2, "km", "m")         # 2000.0
        convert(36.6, "degC", "degF") # 97.88

    Raises:
        IncompatibleUnitError: If no conversion relates the two units
    """
    converted, success = convert_unit(value, from_unit, to_unit)
    if not success:
        raise IncompatibleUnitError(from_unit, to_unit)
    return converted


def convert_unit(value: float, from_unit: str, to_unit: str) -> Tuple[float, bool]:
    """
    Unit conversion with O(1) lookup

    Args:
        value: Value to convert
        from_unit: Source unit
        to_unit: Target unit

    Returns:
        Tuple[float, bool]: (converted_value, success)
    """
    if from_unit == to_unit:
        return value, True

    # Temperature special handling (non-linear)
    if from_unit in _TEMPERATURE_UNITS or to_unit in _TEMPERATURE_UNITS:
        if from_unit in _TEMPERATURE_UNITS and to_unit in _TEMPERATURE_UNITS:
            return _convert_temperature(value, from_unit, to_unit), True
        return value, False

    # One lookup for conversion (pre-processed at module load time)
    if from_unit in UNIT_CONVERSIONS and to_unit in UNIT_CONVERSIONS[from_unit]:
        return value * UNIT_CONVERSIONS[from_unit][to_unit], True

    logging.debug(f"No conversion rule found for {from_unit} -> {to_unit}")
    return value, False


def _normalize_temperature_unit(unit: str) -> str:
    if unit in ("degC", "°C", "C"):
        return "degC"
    if unit in ("degF", "°F", "F"):
        return "degF"
    return unit


def _convert_temperature(value: float, from_unit: str, to_unit: str) -> float:
    """Temperature conversion (non-linear)"""
    from_unit = _normalize_temperature_unit(from_unit)
    to_unit = _normalize_temperature_unit(to_unit)

    if from_unit == to_unit:
        return value

    # Convert to Celsius
    if from_unit == "degF":
        celsius = (value - 32) * 5 / 9
    elif from_unit == "K":
        celsius = value - 273.15
    else:
        celsius = value

    # Convert from Celsius to target unit
    if to_unit == "degF":
        return celsius * 9 / 5 + 32
    elif to_unit == "K":
        return celsius + 273.15
    return celsius


# ============================================================================
# VALUE OBJECT
# ============================================================================

class Quantity(BaseModel):
    """A scalar value expressed in a unit (store-native value object)"""

    model_config = ConfigDict(frozen=True)

    value: float = Field(..., description="Numeric value")
    unit: str = Field(..., description="Unit identifier")

    def value_in(self, unit: str) -> float:
        return convert(self.value, self.unit, unit)

    def is_compatible_with(self, unit: str) -> bool:
        return are_compatible(self.unit, unit)
