"""
storm_replay.py
===============

Replays sequences of weather-station readings through the flood-risk FLC.

Two sources of readings are supported:

    • storm_profile(n)      deterministic synthetic storm (numpy)
    • load_readings_csv()   recorded readings, one row per sample

Every sample is scored independently; no smoothing or state is carried from
one sample to the next. Results can be summarised or written back to CSV.

Typical usage::

    from flood_flc.controller import FloodRiskController
    from simulation.storm_replay import storm_profile, replay, summarize

    results = replay(FloodRiskController(), storm_profile(120))
    print(summarize(results))
"""
from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from flood_flc.controller import FloodRiskController
from flood_flc.defuzzifier import STATUSES, RiskAssessment
from sensor.readings import NormalizedReading, SensorReading, normalize_payload
from utils.logger import set_sample_index

replay_log = logging.getLogger("replay")

ReplayResult = Tuple[SensorReading, RiskAssessment]

CSV_FIELDS = ["rain", "soil", "waterDistanceCM", "pressure", "score", "status", "flags"]


@dataclass(frozen=True)
class StormShape:
    # Lowest rain / soil ADC reached at the storm peak
    rain_min: float = 150.0
    soil_min: float = 380.0
    # Tank distance at the end of the storm (cm)
    water_min_cm: float = 3.0
    # Pressure dip below the baseline (hPa)
    pressure_dip: float = 25.0
    baseline_pressure: float = 1012.0
    dry_adc: float = 1023.0
    empty_tank_cm: float = 50.0


def storm_profile(n: int = 120, shape: Optional[StormShape] = None) -> List[SensorReading]:
    """
    Generates a synthetic storm as a list of readings.

    Rain builds and eases as a half sine, soil saturates with a lag behind
    the rain, the tank fills over the second half, and pressure dips with the
    rain front.

    Args:
        n (int): Number of samples (>= 2).
        shape (StormShape, optional): Storm amplitudes.

    Returns:
        List[SensorReading]: The samples in time order.
    """
    if n < 2:
        raise ValueError(f"storm_profile needs at least 2 samples, got {n}")
    s = shape or StormShape()
    t = np.linspace(0.0, 1.0, n)

    front = np.sin(np.pi * t)
    rain = s.dry_adc - (s.dry_adc - s.rain_min) * front
    soil_wetting = np.clip((t - 0.15) / 0.45, 0.0, 1.0)
    soil = s.dry_adc - (s.dry_adc - s.soil_min) * soil_wetting
    tank_fill = np.clip((t - 0.4) / 0.55, 0.0, 1.0)
    water = s.empty_tank_cm - (s.empty_tank_cm - s.water_min_cm) * tank_fill
    pressure = s.baseline_pressure - s.pressure_dip * front

    return [
        SensorReading(
            rain_raw=int(round(r)),
            soil_raw=int(round(so)),
            water_distance_cm=float(w),
            pressure=float(p),
        )
        for r, so, w, p in zip(rain, soil, water, pressure)
    ]


def replay(
    controller: FloodRiskController, readings: Iterable[SensorReading]
) -> List[ReplayResult]:
    """Scores each reading in order."""
    results: List[ReplayResult] = []
    for i, reading in enumerate(readings):
        set_sample_index(i)
        assessment = controller.evaluate(*reading.as_args())
        replay_log.debug(
            "sample=%d reading=%s score=%.1f status=%s",
            i,
            reading,
            assessment.score,
            assessment.status,
        )
        results.append((reading, assessment))
    set_sample_index(-1)
    return results


def summarize(results: List[ReplayResult]) -> Dict[str, object]:
    """
    Counts samples per status and finds the peak score.

    Returns:
        Dict[str, object]: {'samples', 'peak_score', 'peak_index',
            'counts' (status -> count, every status present)}.
    """
    counts = {status: 0 for status in STATUSES}
    peak_score = 0.0
    peak_index = -1
    for i, (_, assessment) in enumerate(results):
        counts[assessment.status] += 1
        if peak_index < 0 or assessment.score > peak_score:
            peak_score = assessment.score
            peak_index = i
    return {
        "samples": len(results),
        "peak_score": peak_score,
        "peak_index": peak_index,
        "counts": counts,
    }


def load_readings_csv(path: str) -> List[NormalizedReading]:
    """
    Reads recorded readings, normalising each row.

    Each row falls back to the previous good reading for faulty fields, the
    same way the live dashboard holds its last value.
    """
    normalized: List[NormalizedReading] = []
    previous: Optional[SensorReading] = None
    with open(path, "r", newline="", encoding="utf-8") as f:
        for row_no, row in enumerate(csv.DictReader(f), start=1):
            set_sample_index(row_no)
            item = normalize_payload(row, previous=previous)
            if item.usable:
                previous = item.reading
            normalized.append(item)
    set_sample_index(-1)
    replay_log.info("Loaded %d readings from %s", len(normalized), path)
    return normalized


def write_results_csv(
    path: str, results: List[ReplayResult], flags: Optional[List[List[str]]] = None
) -> None:
    """Writes one CSV row per scored reading."""
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for i, (reading, assessment) in enumerate(results):
            writer.writerow(
                {
                    "rain": reading.rain_raw,
                    "soil": reading.soil_raw,
                    "waterDistanceCM": reading.water_distance_cm,
                    "pressure": reading.pressure,
                    "score": f"{assessment.score:.1f}",
                    "status": assessment.status,
                    "flags": ";".join(flags[i]) if flags else "",
                }
            )
    replay_log.info("Wrote %d results to %s", len(results), path)
