"""Shared fixtures for unit tests."""

import json

import pytest

from lhdncalc.sdk.taxes.rules import clear_rules_cache


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point config and data at a temp directory so tests never touch ~/.config."""
    config_dir = tmp_path / "config"
    data_dir = tmp_path / "data"
    config_dir.mkdir()
    data_dir.mkdir()

    monkeypatch.setenv("LHDN_CALC_CONFIG_PATH", str(config_dir))
    (config_dir / "settings.json").write_text(json.dumps({"data_dir": str(data_dir)}))

    clear_rules_cache()
    yield {
        "config_dir": config_dir,
        "data_dir": data_dir,
        "records_dir": data_dir / "records",
    }
    clear_rules_cache()
