"""
Logging setup for PolyTracker.

``configure_logging(config)`` is called once by the CLI (and the dashboard)
before any fetch or alignment work.  Library modules only ever do
``logger = logging.getLogger(__name__)``.

With ``json_format = true`` in the ``[logging]`` section each record is one
JSON object per line::

    {"ts": "2024-11-21T15:00:00Z", "level": "WARNING",
     "logger": "polytracker.engine.alignment", "msg": "...", "source": "NWS"}

Values passed through ``extra=`` appear as top-level keys.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from polytracker.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Attributes every LogRecord carries; anything else came from ``extra=``.
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

_NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "watchdog")


class JsonLineFormatter(logging.Formatter):
    """Render a record as a single JSON line (``ts``, ``level``, ``logger``, ``msg``)."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                LOG_DATE_FORMAT
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key, val in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                payload[key] = val
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(config: "LoggingConfig", debug: bool = False) -> None:
    """Configure the root logger from a ``LoggingConfig``.

    Args:
        config: ``[logging]`` section of ``AppConfig``.
        debug:  Force DEBUG level regardless of ``config.level``.
    """
    level = logging.DEBUG if debug else getattr(logging, config.level.upper(), logging.INFO)

    formatter: logging.Formatter
    if config.json_format:
        formatter = JsonLineFormatter()
    else:
        formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    handlers: list[logging.Handler] = [console]

    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(level)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
