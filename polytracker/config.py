"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``POLYTRACKER_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The CLI and the dashboard receive an ``AppConfig`` instance; the alignment
engine and leaderboard selector take plain arguments and never read config.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class ApiConfig(BaseModel):
    """Forecast backend connection settings."""

    model_config = ConfigDict(frozen=True)

    base_url: str = "http://localhost:3000"
    timeout_seconds: float = 30.0

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got '{v}'.")
        return v.rstrip("/")

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {v}.")
        return v


class AlignmentConfig(BaseModel):
    """How forecast timestamps are bucketed into calendar days."""

    model_config = ConfigDict(frozen=True)

    display_timezone: Optional[str] = None

    @field_validator("display_timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown display_timezone '{v}'.")
        return v


class LeaderboardConfig(BaseModel):
    """Accuracy leaderboard settings."""

    model_config = ConfigDict(frozen=True)

    strict_order: bool = False


class CollectionConfig(BaseModel):
    """Settings for the trigger-collection-then-refresh workflow."""

    model_config = ConfigDict(frozen=True)

    refresh_delay_seconds: float = 3.0

    @field_validator("refresh_delay_seconds")
    @classmethod
    def validate_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"refresh_delay_seconds must be >= 0, got {v}.")
        return v


class DataConfig(BaseModel):
    """Filesystem paths for exported reports."""

    model_config = ConfigDict(frozen=True)

    export_dir: str = "data/outputs"


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "data/logs/polytracker.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration.

    Constructed by ``load_config()`` which merges TOML + .env.
    """

    model_config = ConfigDict(frozen=True)

    api: ApiConfig = ApiConfig()
    alignment: AlignmentConfig = AlignmentConfig()
    leaderboard: LeaderboardConfig = LeaderboardConfig()
    collection: CollectionConfig = CollectionConfig()
    data: DataConfig = DataConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply POLYTRACKER_* environment variable overrides
    raw = _apply_env_overrides(raw)

    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _truthy(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes")


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply POLYTRACKER_* env vars to the raw config dict.

    Supported overrides:
      POLYTRACKER_API_URL       → raw["api"]["base_url"]
      POLYTRACKER_LOG_LEVEL     → raw["logging"]["level"]
      POLYTRACKER_STRICT_ORDER  → raw["leaderboard"]["strict_order"]
      POLYTRACKER_DEBUG         → raw["debug"]
    """
    if api_url := os.environ.get("POLYTRACKER_API_URL"):
        raw.setdefault("api", {})["base_url"] = api_url

    if log_level := os.environ.get("POLYTRACKER_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if strict := os.environ.get("POLYTRACKER_STRICT_ORDER"):
        raw.setdefault("leaderboard", {})["strict_order"] = _truthy(strict)

    if debug := os.environ.get("POLYTRACKER_DEBUG"):
        raw["debug"] = _truthy(debug)

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        api=ApiConfig(**raw.get("api", {})),
        alignment=AlignmentConfig(**raw.get("alignment", {})),
        leaderboard=LeaderboardConfig(**raw.get("leaderboard", {})),
        collection=CollectionConfig(**raw.get("collection", {})),
        data=DataConfig(**raw.get("data", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
