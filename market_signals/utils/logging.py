"""
Logging setup for the market signal engine.

``configure_logging(config)`` is called once by each CLI command.  Engine
modules only ever call ``logging.getLogger(__name__)``.

Handlers write to stderr and, optionally, to a file.  stdout carries command
output only, so ``market-signals analyze --json`` can be piped to ``jq``.

With ``json_format = true`` each record becomes one JSON object::

    {"ts": "2026-10-19T15:00:00Z", "level": "INFO",
     "logger": "market_signals.engine", "msg": "Analyzed bitcoin: ...",
     "asset": "bitcoin", "series_hash": "3f2a9c...", "action": "STRONG_BUY"}

Keys after ``msg`` are the ``extra=`` fields of the logging call.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from market_signals.config import LoggingConfig

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Attributes every LogRecord carries before ``extra=`` is applied.
_BUILTIN_RECORD_KEYS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


def _record_extras(record: logging.LogRecord) -> dict[str, Any]:
    """Fields attached to ``record`` through ``extra=``."""
    return {
        key: val
        for key, val in record.__dict__.items()
        if key not in _BUILTIN_RECORD_KEYS and not key.startswith("_")
    }


class _JsonFormatter(logging.Formatter):
    """One JSON object per record: ``ts``, ``level``, ``logger``, ``msg``, extras."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "ts": ts.strftime(TIMESTAMP_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(_record_extras(record))
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def build_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return _JsonFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TIMESTAMP_FORMAT)


def _attach(
    handler: logging.Handler, level: int, formatter: logging.Formatter
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging(config: "LoggingConfig") -> None:
    """Replace the root logger's handlers according to ``config``.

    Installs a stderr handler, plus a UTF-8 file handler when
    ``config.log_file`` is set (missing parent directories are created).
    Both share one formatter: JSON lines or the plain text format.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)
    formatter = build_formatter(config.json_format)

    handlers = [_attach(logging.StreamHandler(sys.stderr), level, formatter)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            _attach(logging.FileHandler(log_path, encoding="utf-8"), level, formatter)
        )

    logging.basicConfig(level=level, handlers=handlers, force=True)
