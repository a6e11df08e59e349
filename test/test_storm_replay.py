# test/test_storm_replay.py

import csv

import pytest

from flood_flc.controller import FloodRiskController
from sensor.readings import DEFAULT_READING, SensorReading
from simulation.storm_replay import (
    StormShape,
    load_readings_csv,
    replay,
    storm_profile,
    summarize,
    write_results_csv,
)


def test_storm_profile_shape():
    readings = storm_profile(120)
    assert len(readings) == 120
    assert readings[0] == DEFAULT_READING
    assert readings[-1].water_distance_cm == pytest.approx(3.0)
    assert readings[-1].soil_raw == 380
    # rain peaks mid-storm
    assert min(r.rain_raw for r in readings) < 200


def test_storm_profile_rejects_tiny_runs():
    with pytest.raises(ValueError):
        storm_profile(1)


def test_storm_profile_custom_shape():
    readings = storm_profile(10, StormShape(water_min_cm=20.0))
    assert readings[-1].water_distance_cm == pytest.approx(20.0)


def test_replay_and_summary(flc_controller):
    results = replay(flc_controller, storm_profile(120))
    summary = summarize(results)

    assert summary["samples"] == 120
    assert sum(summary["counts"].values()) == 120
    assert summary["peak_score"] == 100.0
    assert summary["counts"]["CRITICAL"] > 0
    assert summary["counts"]["SAFE"] > 0
    assert results[0][1].status == "SAFE"
    assert results[-1][1].status == "CRITICAL"


def test_replay_is_stateless(flc_controller):
    readings = storm_profile(40)
    forward = [a for _, a in replay(flc_controller, readings)]
    backward = [a for _, a in replay(flc_controller, list(reversed(readings)))]
    assert forward == list(reversed(backward))


def test_summarize_empty():
    summary = summarize([])
    assert summary["samples"] == 0
    assert summary["peak_index"] == -1
    assert summary["peak_score"] == 0.0


def test_load_readings_csv_falls_back_to_last_good_row(write_csv):
    path = write_csv(
        "readings.csv",
        ["rain", "soil", "waterDistanceCM", "pressure"],
        [
            [300, 500, 20.0, 1005.0],
            [-1, 480, 9999, 1004.0],
            [250, 450, 4.0, 998.0],
        ],
    )
    normalized = load_readings_csv(path)
    assert len(normalized) == 3
    assert normalized[0].usable
    assert not normalized[1].usable
    assert normalized[1].reading == SensorReading(300, 480, 20.0, 1004.0)
    assert normalized[2].reading == SensorReading(250, 450, 4.0, 998.0)


def test_write_results_csv(tmp_path):
    flc = FloodRiskController()
    results = replay(flc, [SensorReading(1023, 1023, 3.0, 1012.0), DEFAULT_READING])
    out = tmp_path / "results.csv"
    write_results_csv(str(out), results, flags=[["distance_sensor_fault"], []])

    with open(out, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [r["status"] for r in rows] == ["CRITICAL", "SAFE"]
    assert rows[0]["score"] == "100.0"
    assert rows[0]["flags"] == "distance_sensor_fault"
    assert rows[1]["flags"] == ""
