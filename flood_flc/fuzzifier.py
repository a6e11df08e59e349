"""
Fuzzifies raw sensor readings into flood-risk membership degrees.

This module takes the four raw readings of the weather station (rain ADC, soil
ADC, tank distance, barometric pressure) and determines their degree of
membership in the linguistic terms used by the rule base (e.g. 'rain_heavy',
'water_critical').
"""

import logging
from typing import Dict

from flood_flc.calibration import Calibration
from flood_flc.membership import is_low, is_middle

fuzzifier_log = logging.getLogger("fuzzifier")


class Fuzzifier:
    """
    Calculates membership degrees for raw readings.

    Attributes:
        calibration (Calibration): Breakpoints for every linguistic term.
    """

    def __init__(self, calibration: Calibration) -> None:
        self.calibration = calibration
        fuzzifier_log.info(
            "Fuzzifier initialized: rain_heavy=%s, rain_moderate=%s, "
            "soil_saturated=%s, water_critical=%s, pressure_storm=%s",
            calibration.rain_heavy,
            calibration.rain_moderate,
            calibration.soil_saturated,
            calibration.water_critical,
            calibration.pressure_storm,
        )

    def fuzzify(
        self,
        rain_raw: float,
        soil_raw: float,
        water_distance_cm: float,
        pressure: float,
    ) -> Dict[str, float]:
        """
        Fuzzifies one reading.

        Args:
            rain_raw (float): Rain sensor ADC value (lower = heavier rain).
            soil_raw (float): Soil probe ADC value (lower = wetter soil).
            water_distance_cm (float): Distance from gauge to water surface.
            pressure (float): Barometric pressure in hPa.

        Returns:
            Dict[str, float]: Every term name mapped to its degree in [0, 1].
                Unlike a sparse fuzzifier, zero degrees are kept so the
                details of an assessment always carry all factors.
        """
        cal = self.calibration
        moderate = cal.rain_moderate
        degrees = {
            "rain_heavy": is_low(rain_raw, cal.rain_heavy.low, cal.rain_heavy.high),
            "rain_moderate": is_middle(
                rain_raw, moderate.low, moderate.peak_low, moderate.high, moderate.peak_high
            ),
            "soil_saturated": is_low(
                soil_raw, cal.soil_saturated.low, cal.soil_saturated.high
            ),
            "water_critical": is_low(
                water_distance_cm, cal.water_critical.low, cal.water_critical.high
            ),
            "pressure_storm": is_low(
                pressure, cal.pressure_storm.low, cal.pressure_storm.high
            ),
        }

        formatted_output = {k: f"{v:.3f}" for k, v in degrees.items()}
        fuzzifier_log.debug(
            "Fuzzified rain=%s soil=%s water=%s pressure=%s -> %s",
            rain_raw,
            soil_raw,
            water_distance_cm,
            pressure,
            formatted_output,
        )
        return degrees
