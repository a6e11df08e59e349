"""
Caller-side normalisation of weather-station payloads.

The FLC assumes sanitised numeric inputs. This module turns a raw device or
database payload into a SensorReading before it reaches the controller:

    - accepts dashboard keys (rain, soil, waterDistanceCM, pressure) and
      engine keys (rain_raw, soil_raw, water_distance_cm)
    - missing or unparsable fields fall back to the previous reading
      (or DEFAULT_READING) and are reported as errors
    - -1 is the firmware fault sentinel; ultrasonic echo timeouts report
      9999 cm, so distances >= 400 cm are treated as faults too
    - ADC values outside 0-1023 are clamped and reported as warnings
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

readings_log = logging.getLogger("readings")

ADC_MIN = 0
ADC_MAX = 1023
FAULT_SENTINEL = -1
MAX_VALID_DISTANCE_CM = 400.0

_KEYS = {
    "rain_raw": ("rain_raw", "rain"),
    "soil_raw": ("soil_raw", "soil"),
    "water_distance_cm": ("water_distance_cm", "waterDistanceCM"),
    "pressure": ("pressure",),
}


@dataclass(frozen=True)
class SensorReading:
    rain_raw: int
    soil_raw: int
    water_distance_cm: float
    pressure: float

    def as_args(self):
        return self.rain_raw, self.soil_raw, self.water_distance_cm, self.pressure


# Initial dashboard state: dry sensors, empty tank, standard pressure
DEFAULT_READING = SensorReading(
    rain_raw=1023, soil_raw=1023, water_distance_cm=50.0, pressure=1012.0
)


@dataclass(frozen=True)
class NormalizedReading:
    reading: SensorReading
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def usable(self) -> bool:
        return not self.errors


def _lookup(raw: Mapping[str, Any], name: str) -> Any:
    for key in _KEYS[name]:
        if key in raw and raw[key] not in (None, ""):
            return raw[key]
    return None


def _to_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def normalize_payload(
    raw: Mapping[str, Any], previous: Optional[SensorReading] = None
) -> NormalizedReading:
    """Normalize an incoming payload for the FLC.

    Args:
        raw: The device/database payload.
        previous: Last good reading, used for fallbacks. Defaults to
            DEFAULT_READING.

    Returns a NormalizedReading with:
    - reading: SensorReading safe to pass to the controller
    - errors: faults that forced a fallback value
    - warnings: non-fatal issues (clamping)
    """
    fallback = previous or DEFAULT_READING
    errors: List[str] = []
    warnings: List[str] = []
    values: Dict[str, Any] = {}

    for name in ("rain_raw", "soil_raw"):
        value = _to_float(_lookup(raw, name))
        short = name.split("_")[0]
        if value is None:
            errors.append(f"missing_{short}")
            value = getattr(fallback, name)
        elif value == FAULT_SENTINEL:
            errors.append(f"{short}_sensor_fault")
            value = getattr(fallback, name)
        elif value < ADC_MIN:
            warnings.append(f"{short}_clamped_low")
            value = ADC_MIN
        elif value > ADC_MAX:
            warnings.append(f"{short}_clamped_high")
            value = ADC_MAX
        values[name] = int(round(value))

    distance = _to_float(_lookup(raw, "water_distance_cm"))
    if distance is None:
        errors.append("missing_distance")
        distance = fallback.water_distance_cm
    elif distance < 0:
        errors.append("invalid_distance")
        distance = fallback.water_distance_cm
    elif distance >= MAX_VALID_DISTANCE_CM:
        errors.append("distance_sensor_fault")
        distance = fallback.water_distance_cm
    values["water_distance_cm"] = float(distance)

    pressure = _to_float(_lookup(raw, "pressure"))
    if pressure is None:
        errors.append("missing_pressure")
        pressure = fallback.pressure
    elif pressure <= 0:
        errors.append("pressure_sensor_fault")
        pressure = fallback.pressure
    values["pressure"] = float(pressure)

    for e in errors:
        readings_log.warning("payload_error=%s raw=%s", e, dict(raw))
    for w in warnings:
        readings_log.info("payload_warning=%s raw=%s", w, dict(raw))

    return NormalizedReading(reading=SensorReading(**values), errors=errors, warnings=warnings)
