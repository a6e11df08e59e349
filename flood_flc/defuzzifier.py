"""
Computes the crisp flood-risk score from the fired rules and classifies it.

This module implements a weighted-sum defuzzification: every rule contributes
its firing strength times a fixed weight, the total is capped at 100 and
mapped onto the ordered status bands.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict

from flood_flc.calibration import MAX_SCORE, MIN_SCORE, Calibration

defuzzifier_log = logging.getLogger("defuzzifier")

# Ordered from most to least severe
STATUSES = ("CRITICAL", "WARNING", "CAUTION", "SAFE")

MESSAGES = {
    "CRITICAL": "EVACUATE. Water is at High Capacity limits.",
    "WARNING": "Water levels rising rapidly. Monitor closely.",
    "CAUTION": "Rain detected. Check water reserves.",
    "SAFE": "Water levels are low. Conditions stable.",
}


def to_percent(degree: float) -> int:
    """Converts a degree in [0, 1] to an integer percentage, rounding half up."""
    return int(math.floor(degree * 100.0 + 0.5))


@dataclass(frozen=True)
class RiskAssessment:
    """
    Result of one evaluation.

    Attributes:
        score (float): Flood-risk score in [0, 100], one decimal.
        status (str): One of STATUSES.
        message (str): Advisory text for the status.
        details (Dict[str, int]): Percentages of the danger-rule factors
            (rain, soil, water).
        rules (Dict[str, int]): Percent firing strength of each rule.
    """

    score: float
    status: str
    message: str
    details: Dict[str, int] = field(default_factory=dict)
    rules: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "status": self.status,
            "message": self.message,
            "details": dict(self.details),
            "rules": dict(self.rules),
        }


class Defuzzifier:
    """Performs weighted-sum defuzzification and status classification."""

    def __init__(self, calibration: Calibration):
        self.calibration = calibration
        defuzzifier_log.info(
            "Defuzzifier initialized (danger weight=%.1f, storm weight=%.1f).",
            calibration.danger_weight,
            calibration.storm_weight,
        )

    def defuzzify(self, rule_outputs: Dict[str, float]) -> float:
        """
        Calculates the final crisp score.

            score = min(100, danger * DANGER_WEIGHT + storm * STORM_WEIGHT)

        Args:
            rule_outputs (Dict[str, float]): Firing strengths from the RuleEngine.

        Returns:
            float: The score, clamped to [0, 100]. Not rounded; classification
                compares this value against the bands.
        """
        raw_score = (
            rule_outputs.get("danger", 0.0) * self.calibration.danger_weight
            + rule_outputs.get("storm", 0.0) * self.calibration.storm_weight
        )
        final_score = max(MIN_SCORE, min(MAX_SCORE, raw_score))

        if final_score != raw_score:
            defuzzifier_log.debug(
                "Raw score %.4f was outside range and clamped to %.4f.",
                raw_score,
                final_score,
            )
        return final_score

    def classify(self, score: float) -> str:
        """
        Maps a score onto its status band.

        Bands are evaluated high to low; a score equal to a threshold falls
        into the lower band.
        """
        cal = self.calibration
        if score > cal.critical_above:
            return "CRITICAL"
        if score > cal.warning_above:
            return "WARNING"
        if score > cal.caution_above:
            return "CAUTION"
        return "SAFE"

    def assess(
        self, degrees: Dict[str, float], rule_outputs: Dict[str, float]
    ) -> RiskAssessment:
        """
        Builds the full assessment from the fuzzified inputs and fired rules.

        Args:
            degrees (Dict[str, float]): Membership degrees from the Fuzzifier.
            rule_outputs (Dict[str, float]): Firing strengths from the RuleEngine.

        Returns:
            RiskAssessment: Score, status, message and diagnostic details.
        """
        final_score = self.defuzzify(rule_outputs)
        status = self.classify(final_score)
        # Rounded for display only
        score = round(final_score, 1)

        # Danger-rule factors only, each taken straight from its own degree
        details = {
            "rain": to_percent(degrees.get("rain_heavy", 0.0)),
            "soil": to_percent(degrees.get("soil_saturated", 0.0)),
            "water": to_percent(degrees.get("water_critical", 0.0)),
        }
        rules = {name: to_percent(w) for name, w in rule_outputs.items()}

        defuzzifier_log.debug("Defuzzified score: %.1f -> %s", score, status)
        return RiskAssessment(
            score=score,
            status=status,
            message=MESSAGES[status],
            details=details,
            rules=rules,
        )
