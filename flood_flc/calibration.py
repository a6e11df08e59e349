"""
Calibration constants for the flood-risk fuzzy logic controller.

All breakpoints, rule weights and classification thresholds live here so the
rule logic never carries literals. The defaults come from the sensor
calibration study of the weather station:

    Rain sensor (ADC 0-1023, 1023 = dry)
        RAIN_HEAVY      falls from 1.0 at 306 to 0.0 at 511
        RAIN_MODERATE   triangle 306 -> 409 -> 767
    Soil moisture probe (ADC 0-1023, 1023 = dry)
        SOIL_SATURATED  falls from 1.0 at 511 to 0.0 at 818
    Ultrasonic tank gauge (distance to water surface, cm)
        WATER_CRITICAL  falls from 1.0 at 4 cm to 0.0 at 5.5 cm
    BMP180 barometer (hPa)
        PRESSURE_STORM  falls from 1.0 at 990 hPa to 0.0 at 1000 hPa

A `Calibration` can be rebuilt from the `[calibration]`, `[weights]` and
`[classification]` tables of config/flood_config.toml for recalibration.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional


class CalibrationError(ValueError):
    """Raised when configured breakpoints, weights or thresholds are invalid."""


@dataclass(frozen=True)
class RampParams:
    """Breakpoints of a falling ramp (see membership.is_low)."""

    low: float
    high: float

    def validate(self, name: str) -> None:
        if not self.low <= self.high:
            raise CalibrationError(
                f"Invalid ramp params for '{name}': [{self.low}, {self.high}]"
            )


@dataclass(frozen=True)
class TriangleParams:
    """Breakpoints of a triangle/trapezoid (see membership.is_middle)."""

    low: float
    peak_low: float
    high: float
    peak_high: Optional[float] = None

    def validate(self, name: str) -> None:
        peak_high = self.peak_low if self.peak_high is None else self.peak_high
        if not self.low <= self.peak_low <= peak_high <= self.high:
            raise CalibrationError(
                f"Invalid triangle params for '{name}': "
                f"[{self.low}, {self.peak_low}, {peak_high}, {self.high}]"
            )


# Fuzzification breakpoints
RAIN_HEAVY = RampParams(low=306, high=511)
RAIN_MODERATE = TriangleParams(low=306, peak_low=409, high=767)
SOIL_SATURATED = RampParams(low=511, high=818)
WATER_CRITICAL = RampParams(low=4.0, high=5.5)
PRESSURE_STORM = RampParams(low=990.0, high=1000.0)

# Defuzzification weights (score points contributed by a fully fired rule)
DANGER_WEIGHT = 100.0
STORM_WEIGHT = 60.0

# Score ceiling/floor
MAX_SCORE = 100.0
MIN_SCORE = 0.0

# Classification bands; a score strictly above the threshold takes the label
CRITICAL_ABOVE = 80.0
WARNING_ABOVE = 50.0
CAUTION_ABOVE = 20.0

_RAMP_TERMS = ("rain_heavy", "soil_saturated", "water_critical", "pressure_storm")
_TRIANGLE_TERMS = ("rain_moderate",)


def _as_table(value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise CalibrationError(f"'{where}' must be a table, got {value!r}")
    return value


def _table(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    return _as_table(config.get(name) or {}, name)


def _number(table: Dict[str, Any], key: str, default: Optional[float], where: str) -> Optional[float]:
    value = table.get(key, default)
    if value is None:
        return None
    if isinstance(value, bool):
        raise CalibrationError(f"'{where}.{key}' must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise CalibrationError(f"'{where}.{key}' must be a number, got {value!r}") from e


@dataclass(frozen=True)
class Calibration:
    """
    The single configuration structure consumed by the controller.

    Attributes:
        rain_heavy (RampParams): Heavy-rain ramp on the rain ADC.
        rain_moderate (TriangleParams): Moderate-rain triangle on the rain ADC.
        soil_saturated (RampParams): Saturated-soil ramp on the soil ADC.
        water_critical (RampParams): Critical tank level ramp on distance (cm).
        pressure_storm (RampParams): Storm pressure ramp (hPa).
        danger_weight (float): Score points of a fully fired danger rule.
        storm_weight (float): Score points of a fully fired storm rule.
        critical_above (float): Scores above this are CRITICAL.
        warning_above (float): Scores above this are WARNING.
        caution_above (float): Scores above this are CAUTION, else SAFE.
    """

    rain_heavy: RampParams = field(default=RAIN_HEAVY)
    rain_moderate: TriangleParams = field(default=RAIN_MODERATE)
    soil_saturated: RampParams = field(default=SOIL_SATURATED)
    water_critical: RampParams = field(default=WATER_CRITICAL)
    pressure_storm: RampParams = field(default=PRESSURE_STORM)
    danger_weight: float = DANGER_WEIGHT
    storm_weight: float = STORM_WEIGHT
    critical_above: float = CRITICAL_ABOVE
    warning_above: float = WARNING_ABOVE
    caution_above: float = CAUTION_ABOVE

    def __post_init__(self) -> None:
        for name in _RAMP_TERMS + _TRIANGLE_TERMS:
            getattr(self, name).validate(name)
        if self.danger_weight < 0 or self.storm_weight < 0:
            raise CalibrationError(
                f"Rule weights must be non-negative, got danger={self.danger_weight}, "
                f"storm={self.storm_weight}"
            )
        if not self.critical_above > self.warning_above > self.caution_above:
            raise CalibrationError(
                "Classification thresholds must be strictly descending: "
                f"{self.critical_above}, {self.warning_above}, {self.caution_above}"
            )

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "Calibration":
        """
        Builds a Calibration from a parsed flood_config.toml mapping.

        Missing tables or keys keep their built-in defaults.

        Args:
            config (Dict[str, Any]): The full configuration dictionary.

        Returns:
            Calibration: The validated calibration.

        Raises:
            CalibrationError: On unknown terms or invalid values.
        """
        calibration = cls()
        overrides: Dict[str, Any] = {}

        for term, params in _table(config, "calibration").items():
            where = f"calibration.{term}"
            if term in _RAMP_TERMS:
                params = _as_table(params, where)
                current = getattr(calibration, term)
                overrides[term] = RampParams(
                    low=_number(params, "LOW", current.low, where),
                    high=_number(params, "HIGH", current.high, where),
                )
            elif term in _TRIANGLE_TERMS:
                params = _as_table(params, where)
                current = getattr(calibration, term)
                overrides[term] = TriangleParams(
                    low=_number(params, "LOW", current.low, where),
                    peak_low=_number(params, "PEAK", current.peak_low, where),
                    high=_number(params, "HIGH", current.high, where),
                    peak_high=_number(params, "PEAK_HIGH", current.peak_high, where),
                )
            else:
                raise CalibrationError(f"Unknown calibration term '{term}'")

        weights = _table(config, "weights")
        for key, attr in (("DANGER_WEIGHT", "danger_weight"), ("STORM_WEIGHT", "storm_weight")):
            if key in weights:
                overrides[attr] = _number(weights, key, None, "weights")

        bands = _table(config, "classification")
        for key, attr in (
            ("CRITICAL_ABOVE", "critical_above"),
            ("WARNING_ABOVE", "warning_above"),
            ("CAUTION_ABOVE", "caution_above"),
        ):
            if key in bands:
                overrides[attr] = _number(bands, key, None, "classification")

        return replace(calibration, **overrides)


DEFAULT_CALIBRATION = Calibration()
