"""
Main entry point for the flood-risk Fuzzy Logic Controller.

Scores a single weather-station reading given on the command line, or replays
a CSV of recorded readings through the FLC:

    python main.py --rain 200 --soil 600 --water 50 --pressure 1012
    python main.py --replay readings.csv --out results.csv
    python main.py --storm 120
"""

import argparse
import json
import logging
import os
import sys
import tomllib

from utils.logger import setup_logging
from flood_flc.calibration import CalibrationError
from flood_flc.controller import FloodRiskController
from simulation.storm_replay import (
    load_readings_csv,
    replay,
    storm_profile,
    summarize,
    write_results_csv,
)

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config", "flood_config.toml")


def load_config(path=None):
    """
    Loads configuration from config/flood_config.toml located relative to this script.
    """
    cfg_path = path or DEFAULT_CONFIG_PATH
    with open(cfg_path, "rb") as f:
        return tomllib.load(f)


def build_parser():
    parser = argparse.ArgumentParser(description="Score flood risk from weather-station readings.")
    parser.add_argument("--config", default=None, help="Path to flood_config.toml.")
    parser.add_argument("--rain", type=float, help="Rain sensor ADC value (0-1023, 1023 = dry).")
    parser.add_argument("--soil", type=float, help="Soil moisture ADC value (0-1023, 1023 = dry).")
    parser.add_argument("--water", type=float, help="Distance to water surface in cm.")
    parser.add_argument("--pressure", type=float, help="Barometric pressure in hPa.")
    parser.add_argument("--replay", metavar="CSV", help="Replay recorded readings from a CSV file.")
    parser.add_argument("--out", metavar="CSV", help="Write replay results to a CSV file.")
    parser.add_argument("--storm", type=int, metavar="N", help="Replay a synthetic storm of N samples.")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    single = (args.rain, args.soil, args.water, args.pressure)
    if args.storm is not None and args.storm < 2:
        parser.error(f"--storm needs at least 2 samples, got {args.storm}")
    if not args.replay and args.storm is None and any(v is None for v in single):
        parser.error("--rain, --soil, --water and --pressure are required unless --replay or --storm is given")

    try:
        config = load_config(args.config)
    except (OSError, tomllib.TOMLDecodeError) as e:
        parser.error(f"cannot load config: {e}")
    log_cfg = config.get("logging", {})
    setup_logging(
        log_dir=log_cfg.get("LOG_DIR", "logs"),
        overwrite=bool(log_cfg.get("OVERWRITE", True)),
    )
    main_log = logging.getLogger("main")
    main_log.info("Configuration file '%s' loaded.", args.config or "flood_config.toml")

    try:
        flc = FloodRiskController(config)
    except CalibrationError as e:
        main_log.critical("Invalid calibration: %s", e)
        return 2

    if args.replay:
        try:
            normalized = load_readings_csv(args.replay)
        except OSError as e:
            main_log.critical("Cannot read replay file: %s", e)
            return 1
        results = replay(flc, [n.reading for n in normalized])
        flags = [n.errors + n.warnings for n in normalized]
        for i, item in enumerate(normalized):
            if not item.usable:
                main_log.warning("Row %d scored with substituted values: %s", i + 1, item.errors)
        if args.out:
            write_results_csv(args.out, results, flags)
        print(json.dumps(summarize(results), indent=2))
        return 0

    if args.storm is not None:
        results = replay(flc, storm_profile(args.storm))
        if args.out:
            write_results_csv(args.out, results)
        print(json.dumps(summarize(results), indent=2))
        return 0

    assessment = flc.evaluate(*single)
    main_log.info("score=%.1f status=%s", assessment.score, assessment.status)
    print(json.dumps(assessment.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
