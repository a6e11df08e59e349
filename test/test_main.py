# test/test_main.py

import json
import os

import pytest

import main

CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "config", "flood_config.toml"
)


@pytest.fixture(autouse=True)
def _run_in_tmp(tmp_path, monkeypatch):
    # logs/ is created relative to the working directory
    monkeypatch.chdir(tmp_path)


def test_load_config_defaults_to_shipped_file():
    config = main.load_config()
    assert config["weights"]["DANGER_WEIGHT"] == 100.0


def test_single_reading_prints_assessment(capsys):
    rc = main.main(["--config", CONFIG_PATH, "--rain", "200", "--soil", "600", "--water", "50", "--pressure", "1012"])
    assert rc == 0
    data = json.loads(capsys.readouterr().out)
    assert data["score"] == 71.0
    assert data["status"] == "WARNING"
    assert data["details"] == {"rain": 100, "soil": 71, "water": 0}


def test_missing_reading_args_is_usage_error():
    with pytest.raises(SystemExit):
        main.main(["--rain", "200"])


def test_storm_replay_summary(capsys, tmp_path):
    out = tmp_path / "storm.csv"
    rc = main.main(["--config", CONFIG_PATH, "--storm", "50", "--out", str(out)])
    assert rc == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["samples"] == 50
    assert out.exists()


def test_csv_replay(capsys, write_csv, tmp_path):
    path = write_csv(
        "in.csv",
        ["rain", "soil", "waterDistanceCM", "pressure"],
        [[1023, 1023, 50, 1012], [200, 300, 3, 990]],
    )
    out = tmp_path / "out.csv"
    rc = main.main(["--config", CONFIG_PATH, "--replay", path, "--out", str(out)])
    assert rc == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["counts"]["SAFE"] == 1
    assert summary["counts"]["CRITICAL"] == 1


def test_invalid_calibration_returns_error_code(tmp_path):
    bad = tmp_path / "bad.toml"
    bad.write_text("[calibration.rain_heavy]\nLOW = 600\nHIGH = 500\n", encoding="utf-8")
    rc = main.main(["--config", str(bad), "--rain", "1", "--soil", "1", "--water", "1", "--pressure", "1"])
    assert rc == 2


@pytest.mark.parametrize(
    "toml_text",
    [
        '[calibration.rain_heavy]\nLOW = "abc"\n',
        "[calibration]\nrain_heavy = 5\n",
    ],
)
def test_malformed_calibration_returns_error_code(tmp_path, toml_text):
    bad = tmp_path / "bad.toml"
    bad.write_text(toml_text, encoding="utf-8")
    rc = main.main(["--config", str(bad), "--rain", "1", "--soil", "1", "--water", "1", "--pressure", "1"])
    assert rc == 2


@pytest.mark.parametrize("samples", ["1", "0", "-5"])
def test_too_short_storm_is_usage_error(samples):
    with pytest.raises(SystemExit) as exc:
        main.main(["--config", CONFIG_PATH, "--storm", samples])
    assert exc.value.code == 2


def test_missing_replay_file_returns_error_code(tmp_path):
    rc = main.main(["--config", CONFIG_PATH, "--replay", str(tmp_path / "missing.csv")])
    assert rc == 1


def test_missing_config_file_is_usage_error(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main.main(["--config", str(tmp_path / "nope.toml"), "--storm", "10"])
    assert exc.value.code == 2
