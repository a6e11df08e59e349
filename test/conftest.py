# test/conftest.py
import os
import tomllib

import pytest

from flood_flc.controller import FloodRiskController

REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CONFIG_PATH = os.path.join(REPO_ROOT, "config", "flood_config.toml")


@pytest.fixture
def flood_config():
    """The shipped config/flood_config.toml, parsed."""
    with open(CONFIG_PATH, "rb") as f:
        return tomllib.load(f)


@pytest.fixture
def flc_controller(flood_config):
    """Controller built from the REAL config file."""
    return FloodRiskController(flood_config)


@pytest.fixture
def write_csv(tmp_path):
    """
    Write rows to a CSV under tmp_path.
    Usage:
        path = write_csv("name.csv", ["rain", "soil", ...], [[...], ...])
    """
    def _writer(name, header, rows):
        path = tmp_path / name
        lines = [",".join(header)] + [",".join(str(v) for v in row) for row in rows]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return str(path)

    return _writer
