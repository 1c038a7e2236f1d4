"""
PolyTracker — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Fetch (or read an offline payload file).
  4. Align / rank.
  5. Print a plain-text table to stdout.

Install and run::

    pip install -e .
    polytracker --help
    polytracker validate-config
    polytracker forecasts
    polytracker forecasts --from-file snapshot.json --export data/outputs/comparison.csv
    polytracker accuracy --strict
    polytracker collect --start-date 2024-11-21
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import NoReturn, Optional

import typer

app = typer.Typer(
    name="polytracker",
    help="Compare weather-model forecasts against observed highs and rank model accuracy.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from pydantic import ValidationError

    from polytracker.config import load_config

    try:
        return load_config(Path(config_path) if config_path else None)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except (ValidationError, ValueError) as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config) -> None:
    from polytracker.utils.logging import configure_logging
    configure_logging(config.logging, debug=config.debug)


def _client(config):
    from polytracker.ingestion.api_client import TrackerApiClient
    return TrackerApiClient(config.api.base_url, timeout=config.api.timeout_seconds)


def _load_snapshot_or_exit(from_file: str):
    from polytracker.ingestion.payloads import load_payload_file

    try:
        return load_payload_file(Path(from_file))
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except (json.JSONDecodeError, ValueError) as exc:
        typer.echo(f"[ERROR] Payload file is invalid: {exc}", err=True)
        raise typer.Exit(code=1)


def _fail(exc: Exception) -> NoReturn:
    typer.echo(f"[ERROR] {exc}", err=True)
    raise typer.Exit(code=1)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Backend URL:      {config.api.base_url}")
    typer.echo(f"  Request timeout:  {config.api.timeout_seconds}s")
    typer.echo(f"  Display timezone: {config.alignment.display_timezone or '(as written)'}")
    typer.echo(f"  Strict ordering:  {config.leaderboard.strict_order}")
    typer.echo(f"  Refresh delay:    {config.collection.refresh_delay_seconds}s")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("forecasts")
def forecasts(
    from_file: Optional[str] = typer.Option(
        None,
        "--from-file",
        "-f",
        help="Read forecasts/resolutions from a JSON snapshot instead of the backend.",
    ),
    export: Optional[str] = typer.Option(
        None,
        "--export",
        help="Also write the aligned table to this CSV path.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Show every source's forecast next to the actual high, one row per day.

    Days with no forecast from a source show ``-`` for that source.
    Resolutions for days without any forecast are not shown.
    """
    from pydantic import ValidationError

    from polytracker.errors import TrackerApiError
    from polytracker.pipeline.comparison import build_comparison, load_comparison
    from polytracker.reporting.export import comparison_rows, export_to_csv
    from polytracker.reporting.formatters import format_comparison_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    tz = config.alignment.display_timezone

    try:
        if from_file:
            snapshot = _load_snapshot_or_exit(from_file)
            result = build_comparison(snapshot.forecasts, snapshot.resolutions, tz)
        else:
            with _client(config) as client:
                result = load_comparison(client, tz)
    except (TrackerApiError, ValidationError, ValueError) as exc:
        _fail(exc)

    typer.echo(f"Forecast comparison | series={', '.join(result.series) or '(none)'}")
    typer.echo("")
    typer.echo(format_comparison_table(result.records))

    if export and not result.is_empty:
        path = export_to_csv(comparison_rows(result.records), Path(export))
        typer.echo("")
        typer.echo(f"[OK] Exported {len(result.records)} row(s) to {path}")


@app.command("accuracy")
def accuracy(
    from_file: Optional[str] = typer.Option(
        None,
        "--from-file",
        "-f",
        help="Read accuracy rows from a JSON snapshot instead of the backend.",
    ),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--no-strict",
        help="Fail if rows are not sorted by MAE ascending. Defaults to config.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Show the most accurate model and the ranked accuracy table.

    Rows are displayed in the backend's order (MAE ascending); they are
    never re-sorted here.
    """
    from pydantic import ValidationError

    from polytracker.errors import LeaderboardOrderError, TrackerApiError
    from polytracker.pipeline.comparison import build_leaderboard, load_leaderboard
    from polytracker.reporting.formatters import format_leaderboard

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    use_strict = config.leaderboard.strict_order if strict is None else strict

    try:
        if from_file:
            snapshot = _load_snapshot_or_exit(from_file)
            result = build_leaderboard(snapshot.accuracy, strict=use_strict)
        else:
            with _client(config) as client:
                result = load_leaderboard(client, strict=use_strict)
    except (LeaderboardOrderError, TrackerApiError, ValidationError) as exc:
        _fail(exc)

    typer.echo("Model Accuracy Comparison")
    typer.echo("")
    typer.echo(format_leaderboard(result.best, result.table))


@app.command("collect")
def collect(
    start_date: str = typer.Option(
        ...,
        "--start-date",
        help="First date to collect forecasts for (ISO date, e.g. 2024-11-21).",
    ),
    wait: Optional[float] = typer.Option(
        None,
        "--wait",
        help="Seconds to wait before refreshing. Defaults to config.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Ask the backend to collect forecasts, wait, then show the refreshed comparison.

    The wait is a fixed delay; if the collection job is slower, run
    ``polytracker forecasts`` again later.
    """
    from pydantic import ValidationError

    from polytracker.errors import TrackerApiError
    from polytracker.pipeline.comparison import collect_and_refresh
    from polytracker.reporting.formatters import format_comparison_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        start = date.fromisoformat(start_date)
    except ValueError as exc:
        typer.echo(f"[ERROR] Invalid date format: {exc}", err=True)
        raise typer.Exit(code=1)

    delay = config.collection.refresh_delay_seconds if wait is None else wait
    if delay < 0:
        typer.echo("[ERROR] --wait must be >= 0.", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Triggering collection from {start} | refresh in {delay:g}s")
    try:
        with _client(config) as client:
            result = collect_and_refresh(
                client, start, delay, config.alignment.display_timezone
            )
    except (TrackerApiError, ValidationError, ValueError) as exc:
        _fail(exc)

    typer.echo("")
    typer.echo(format_comparison_table(result.records))


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
