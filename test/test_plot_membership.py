# test/test_plot_membership.py

import matplotlib

matplotlib.use("Agg")

import numpy as np

from flood_flc.calibration import DEFAULT_CALIBRATION, Calibration
from flood_flc.controller import FloodRiskController
from simulation.storm_replay import replay, storm_profile
from utils.plot_membership_shapes import (
    membership_curves,
    plot_membership_functions,
    plot_score_trace,
    status_bands,
)


def test_membership_curves_cover_every_term():
    curves = membership_curves(DEFAULT_CALIBRATION, points=200)
    assert set(curves) == {"rain", "soil", "water", "pressure"}
    assert set(curves["rain"]) == {"x", "rain_heavy", "rain_moderate"}

    heavy = curves["rain"]["rain_heavy"]
    assert heavy[0] == 1.0 and heavy[-1] == 0.0
    assert np.all(np.diff(heavy) <= 1e-12)

    for entry in curves.values():
        for term, y in entry.items():
            if term != "x":
                assert y.shape == entry["x"].shape
                assert np.all((y >= 0.0) & (y <= 1.0))


def test_plots_are_saved(tmp_path):
    path = plot_membership_functions(DEFAULT_CALIBRATION, save=True, show=False, output_dir=str(tmp_path))
    assert path is not None and (tmp_path / "flood_membership_functions.png").exists()

    results = replay(FloodRiskController(), storm_profile(30))
    path = plot_score_trace(results, save=True, show=False, output_dir=str(tmp_path))
    assert (tmp_path / "storm_score_trace.png").exists()


def test_status_bands_follow_calibration(tmp_path):
    assert [(lo, hi) for lo, hi, _ in status_bands(DEFAULT_CALIBRATION)] == [
        (80.0, 100.0),
        (50.0, 80.0),
        (20.0, 50.0),
    ]

    recalibrated = Calibration.from_config(
        {"classification": {"CRITICAL_ABOVE": 90.0, "WARNING_ABOVE": 60.0, "CAUTION_ABOVE": 30.0}}
    )
    assert [(lo, hi) for lo, hi, _ in status_bands(recalibrated)] == [
        (90.0, 100.0),
        (60.0, 90.0),
        (30.0, 60.0),
    ]

    results = replay(FloodRiskController(calibration=recalibrated), storm_profile(20))
    plot_score_trace(results, recalibrated, save=True, show=False, output_dir=str(tmp_path))
    assert (tmp_path / "storm_score_trace.png").exists()
