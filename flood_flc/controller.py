"""
Orchestrates the flood-risk Fuzzy Logic Controller (FLC).

This module integrates the Fuzzifier, Rule Engine, and Defuzzifier to turn the
four raw weather-station readings into a RiskAssessment. It serves as the main
interface to the FLC. It does not read sensors or persist results; sanitising
sensor fault sentinels is left to the caller (see sensor.readings).
"""

import logging
from typing import Any, Dict, Optional

from flood_flc.calibration import DEFAULT_CALIBRATION, Calibration
from flood_flc.defuzzifier import Defuzzifier, RiskAssessment
from flood_flc.fuzzifier import Fuzzifier
from flood_flc.rule_engine import RuleEngine

controller_log = logging.getLogger("controller")


class FloodRiskController:
    """
    The flood-risk Fuzzy Logic Controller.

    Holds only immutable calibration, so one instance may be shared by any
    number of concurrent callers.

    Attributes:
        calibration (Calibration): Breakpoints, weights and bands in use.
        fuzzifier (Fuzzifier): The fuzzifier instance.
        rule_engine (RuleEngine): The rule engine instance.
        defuzzifier (Defuzzifier): The defuzzifier instance.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        calibration: Optional[Calibration] = None,
    ):
        """
        Initializes the FLC by setting up its components.

        Args:
            config (Dict[str, Any], optional): The parsed flood_config.toml.
                Ignored when `calibration` is given.
            calibration (Calibration, optional): A prebuilt calibration.

        Raises:
            CalibrationError: If the configured calibration is invalid.
        """
        if calibration is None:
            calibration = Calibration.from_config(config) if config else DEFAULT_CALIBRATION
        self.calibration = calibration

        self.fuzzifier = Fuzzifier(calibration)
        self.rule_engine = RuleEngine()
        self.defuzzifier = Defuzzifier(calibration)
        controller_log.info("FLC Controller initialized and ready.")

    def evaluate(
        self,
        rain_raw: float,
        soil_raw: float,
        water_distance_cm: float,
        pressure: float,
    ) -> RiskAssessment:
        """
        Executes one full cycle of the fuzzy inference system.

        Args:
            rain_raw (float): Rain sensor ADC value (0-1023, 1023 = dry).
            soil_raw (float): Soil probe ADC value (0-1023, 1023 = dry).
            water_distance_cm (float): Gauge-to-water distance in cm.
            pressure (float): Barometric pressure in hPa.

        Returns:
            RiskAssessment: The scored and classified assessment.
        """
        controller_log.debug(
            "--- FLC Cycle Start (rain=%s, soil=%s, water=%s, pressure=%s) ---",
            rain_raw,
            soil_raw,
            water_distance_cm,
            pressure,
        )

        # 1) Fuzzification
        degrees = self.fuzzifier.fuzzify(rain_raw, soil_raw, water_distance_cm, pressure)

        # 2) Rule Evaluation
        rule_outputs = self.rule_engine.evaluate(degrees)

        # 3) Defuzzification
        assessment = self.defuzzifier.assess(degrees, rule_outputs)
        controller_log.debug(
            "--- FLC Cycle End (score=%.1f, status=%s) ---",
            assessment.score,
            assessment.status,
        )
        return assessment


_default_controller: Optional[FloodRiskController] = None


def evaluate(
    rain_raw: float,
    soil_raw: float,
    water_distance_cm: float,
    pressure: float,
) -> RiskAssessment:
    """Scores one reading with the default calibration."""
    global _default_controller
    if _default_controller is None:
        _default_controller = FloodRiskController()
    return _default_controller.evaluate(rain_raw, soil_raw, water_distance_cm, pressure)
