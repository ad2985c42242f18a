import argparse

import pytest

from ghworld.config import Settings, build_settings, load_config, merge_config_with_args


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yml")


def test_load_config_none():
    assert load_config(None) == {}


def test_config_file_fills_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    config_file = tmp_path / "config.yml"
    config_file.write_text("database_url: postgresql://u:p@db/ghworld\nenrichment_floor: 250\n")

    args = argparse.Namespace(config=str(config_file), token="cli-token",
                              database_url="sqlite:///ghworld.db", log_level="INFO")
    settings = build_settings(args)

    assert settings.database_url == "postgresql://u:p@db/ghworld"
    assert settings.enrichment_floor == 250
    assert settings.token == "cli-token"


def test_explicit_cli_value_wins(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    args = argparse.Namespace(database_url="sqlite:///other.db")
    merged = merge_config_with_args(args, {"database_url": "postgresql://u:p@db/ghworld"})
    assert merged.database_url == "sqlite:///other.db"


def test_settings_ignore_unknown_keys():
    settings = Settings.from_mapping({"command": "poll", "scan_limit": 100, "result_limit": None})
    assert settings.scan_limit == 100
    assert settings.result_limit == 5000
