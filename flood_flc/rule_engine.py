"""
Evaluates the flood-risk rule base.

Two fixed rules combine the fuzzified readings:

    danger = water_critical OR (rain_heavy AND soil_saturated)
    storm  = pressure_storm AND rain_moderate

Fuzzy AND is the minimum of the antecedent degrees (a rule is only as true as
its weakest premise) and fuzzy OR is the maximum.
"""

import logging
from typing import Dict

rule_engine_log = logging.getLogger("rule_engine")


def fuzzy_and(*degrees: float) -> float:
    return min(degrees)


def fuzzy_or(*degrees: float) -> float:
    return max(degrees)


class RuleEngine:
    """Computes the firing strength of the danger and storm rules."""

    RULES = ("danger", "storm")

    def __init__(self):
        rule_engine_log.info(
            "Rule Engine initialized with %d rules: %s", len(self.RULES), ", ".join(self.RULES)
        )

    def evaluate(self, degrees: Dict[str, float]) -> Dict[str, float]:
        """
        Evaluates all rules.

        Args:
            degrees (Dict[str, float]): Membership degrees from the Fuzzifier.
                Missing terms count as 0.0.

        Returns:
            Dict[str, float]: Firing strength in [0, 1] for each rule name.
        """
        rain_heavy = degrees.get("rain_heavy", 0.0)
        rain_moderate = degrees.get("rain_moderate", 0.0)
        soil_saturated = degrees.get("soil_saturated", 0.0)
        water_critical = degrees.get("water_critical", 0.0)
        pressure_storm = degrees.get("pressure_storm", 0.0)

        # Tank level alone, or heavy rain on saturated soil
        runoff = fuzzy_and(rain_heavy, soil_saturated)
        danger = fuzzy_or(water_critical, runoff)

        # Low pressure with moderate (not heavy) rain
        storm = fuzzy_and(pressure_storm, rain_moderate)

        rule_engine_log.debug(
            "Rule danger fired: W=%.3f (water=%.3f, runoff=%.3f)",
            danger,
            water_critical,
            runoff,
        )
        rule_engine_log.debug(
            "Rule storm fired: W=%.3f (pressure=%.3f, rain_moderate=%.3f)",
            storm,
            pressure_storm,
            rain_moderate,
        )
        return {"danger": danger, "storm": storm}
