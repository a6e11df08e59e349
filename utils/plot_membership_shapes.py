import os
import tomllib

import numpy as np
import matplotlib.pyplot as plt

from flood_flc.calibration import DEFAULT_CALIBRATION, MAX_SCORE, Calibration
from flood_flc.membership import is_low, is_middle

# sensor -> (x range, unit, terms on that sensor)
SENSOR_AXES = {
    "rain": ((0.0, 1023.0), "Rain ADC (1023 = dry)", ("rain_heavy", "rain_moderate")),
    "soil": ((0.0, 1023.0), "Soil ADC (1023 = dry)", ("soil_saturated",)),
    "water": ((0.0, 15.0), "Distance to water (cm)", ("water_critical",)),
    "pressure": ((970.0, 1030.0), "Pressure (hPa)", ("pressure_storm",)),
}


def membership_curves(calibration, points=400):
    """
    Sample every calibrated membership function over its sensor range.

    Returns:
        dict: sensor -> {'x': ndarray, term: ndarray, ...}
    """
    curves = {}
    for sensor, ((lo, hi), _unit, terms) in SENSOR_AXES.items():
        x = np.linspace(lo, hi, points)
        entry = {"x": x}
        for term in terms:
            p = getattr(calibration, term)
            if hasattr(p, "peak_low"):
                entry[term] = np.array([is_middle(v, p.low, p.peak_low, p.high, p.peak_high) for v in x])
            else:
                entry[term] = np.array([is_low(v, p.low, p.high) for v in x])
        curves[sensor] = entry
    return curves


def plot_membership_functions(calibration, save=False, show=True, output_dir="plots"):
    """
    Plot the membership functions of each sensor in one figure.

    Args:
        calibration (Calibration): Breakpoints to draw.
        save (bool): Whether to save the plot as a PNG.
        show (bool): Whether to open an interactive window.
        output_dir (str): Directory to save the plot.

    Returns:
        str | None: Path of the saved PNG, if any.
    """
    curves = membership_curves(calibration)
    fig, axes = plt.subplots(len(curves), 1, figsize=(8, 2.6 * len(curves)))

    for ax, (sensor, entry) in zip(axes, curves.items()):
        x = entry["x"]
        for term, y in entry.items():
            if term == "x":
                continue
            ax.plot(x, y, label=term)
            ax.fill_between(x, y, alpha=0.1)
        ax.set_xlabel(SENSOR_AXES[sensor][1])
        ax.set_ylabel("Membership")
        ax.set_ylim(-0.05, 1.05)
        ax.grid(True)
        ax.legend(loc="upper right")

    fig.suptitle("Flood FLC Membership Functions")
    fig.tight_layout()

    path = None
    if save:
        os.makedirs(output_dir, exist_ok=True)
        path = os.path.join(output_dir, "flood_membership_functions.png")
        fig.savefig(path)
        print(f"Saved plot to: {path}")
    if show:
        plt.show()
    plt.close(fig)
    return path


def status_bands(calibration):
    """(lower, upper, color) of each non-SAFE status band, most severe first."""
    return [
        (calibration.critical_above, MAX_SCORE, "red"),
        (calibration.warning_above, calibration.critical_above, "orange"),
        (calibration.caution_above, calibration.warning_above, "yellow"),
    ]


def plot_score_trace(results, calibration=DEFAULT_CALIBRATION, save=False, show=True, output_dir="plots"):
    """
    Plot a replayed storm: score over samples with the status bands shaded.

    Args:
        results (list): (SensorReading, RiskAssessment) pairs from storm_replay.replay.
        calibration (Calibration): Supplies the band thresholds to shade.
    """
    scores = np.array([a.score for _, a in results])
    water = np.array([r.water_distance_cm for r, _ in results])
    idx = np.arange(len(scores))

    fig, ax = plt.subplots(figsize=(9, 4))
    ax.plot(idx, scores, color="purple", label="Risk score")
    for lower, upper, color in status_bands(calibration):
        ax.axhspan(lower, upper, color=color, alpha=0.08)
    ax.set_ylim(0, 105)
    ax.set_xlabel("Sample")
    ax.set_ylabel("Score")
    ax.grid(True)

    ax2 = ax.twinx()
    ax2.plot(idx, water, color="tab:blue", linestyle="--", label="Water distance (cm)")
    ax2.set_ylabel("Distance (cm)")

    lines = list(ax.get_lines()) + list(ax2.get_lines())
    ax.legend(lines, [ln.get_label() for ln in lines], loc="upper left")
    fig.tight_layout()

    path = None
    if save:
        os.makedirs(output_dir, exist_ok=True)
        path = os.path.join(output_dir, "storm_score_trace.png")
        fig.savefig(path)
        print(f"Saved plot to: {path}")
    if show:
        plt.show()
    plt.close(fig)
    return path


def main():
    import argparse

    from flood_flc.controller import FloodRiskController
    from simulation.storm_replay import replay, storm_profile

    parser = argparse.ArgumentParser(description="Plot flood FLC membership function shapes.")
    parser.add_argument("--save", action="store_true", help="Save plots as PNG files in the 'plots/' directory.")
    parser.add_argument("--storm", type=int, default=0, metavar="N", help="Also plot a synthetic storm of N samples.")
    args = parser.parse_args()

    config_path = os.path.join("config", "flood_config.toml")
    config = {}
    if os.path.exists(config_path):
        with open(config_path, "rb") as f:
            config = tomllib.load(f)
    else:
        print(f"No config at {config_path}, plotting built-in calibration.")

    calibration = Calibration.from_config(config)
    plot_membership_functions(calibration, save=args.save)
    if args.storm:
        results = replay(FloodRiskController(calibration=calibration), storm_profile(args.storm))
        plot_score_trace(results, calibration, save=args.save)


if __name__ == "__main__":
    main()
