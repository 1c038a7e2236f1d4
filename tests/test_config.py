"""Tests for polytracker.config (TOML + env overrides + validation)."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from polytracker.config import AlignmentConfig, ApiConfig, AppConfig, load_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for var in (
        "POLYTRACKER_API_URL",
        "POLYTRACKER_LOG_LEVEL",
        "POLYTRACKER_STRICT_ORDER",
        "POLYTRACKER_DEBUG",
    ):
        monkeypatch.delenv(var, raising=False)


def test_defaults() -> None:
    cfg = AppConfig()
    assert cfg.api.base_url == "http://localhost:3000"
    assert cfg.leaderboard.strict_order is False
    assert cfg.collection.refresh_delay_seconds == 3.0
    assert cfg.alignment.display_timezone is None


def test_load_from_file(config_file: Path) -> None:
    cfg = load_config(config_file)
    assert cfg.api.base_url == "http://backend.test"
    assert cfg.api.timeout_seconds == 5.0
    assert cfg.collection.refresh_delay_seconds == 0.0
    assert cfg.logging.level == "WARNING"
    assert cfg.logging.log_file == ""


def test_local_toml_overrides(config_file: Path) -> None:
    (config_file.parent / "local.toml").write_text(
        '[leaderboard]\nstrict_order = true\n', encoding="utf-8"
    )
    cfg = load_config(config_file)
    assert cfg.leaderboard.strict_order is True
    assert cfg.api.base_url == "http://backend.test"


def test_env_overrides(config_file: Path, monkeypatch) -> None:
    monkeypatch.setenv("POLYTRACKER_API_URL", "https://api.example.com/")
    monkeypatch.setenv("POLYTRACKER_LOG_LEVEL", "debug")
    monkeypatch.setenv("POLYTRACKER_STRICT_ORDER", "yes")
    monkeypatch.setenv("POLYTRACKER_DEBUG", "1")
    cfg = load_config(config_file)
    assert cfg.api.base_url == "https://api.example.com"
    assert cfg.logging.level == "DEBUG"
    assert cfg.leaderboard.strict_order is True
    assert cfg.debug is True


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.toml")


def test_invalid_log_level(tmp_path: Path) -> None:
    path = tmp_path / "bad.toml"
    path.write_text('[logging]\nlevel = "LOUD"\n', encoding="utf-8")
    with pytest.raises(ValidationError):
        load_config(path)


def test_invalid_base_url() -> None:
    with pytest.raises(ValidationError):
        ApiConfig(base_url="localhost:3000")


def test_invalid_timezone() -> None:
    with pytest.raises(ValidationError):
        AlignmentConfig(display_timezone="Mars/Olympus_Mons")


def test_blank_timezone_means_none() -> None:
    assert AlignmentConfig(display_timezone="").display_timezone is None


def test_config_is_frozen() -> None:
    cfg = AppConfig()
    with pytest.raises(ValidationError):
        cfg.debug = True  # type: ignore[misc]
