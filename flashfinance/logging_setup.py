"""Logging for ``flashfinance``.

Every module logs through a child of the ``"flashfinance"`` logger obtained
with :func:`get_logger`. Importing the package never prints anything: the
package logger carries a ``NullHandler`` until an entrypoint calls
:func:`configure_logging`.

Drift diagnostics (unexpected response shapes, dropped entries, failed
lookups) are warnings and errors on these loggers. The CLI writes records to
stdout, so diagnostics always go to stderr, either as plain text or as one
JSON object per line for log collectors.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import IO, Any

LOGGER_NAME = "flashfinance"
LEVEL_ENV = "FLASHFINANCE_LOG_LEVEL"

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


class _JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def _named_level(text: str | None) -> int | None:
    if not text:
        return None
    text = text.strip().upper()
    if text.isdigit():
        return int(text)
    return logging.getLevelNamesMapping().get(text)


def resolve_level(level: int | str | None = None) -> int:
    """Explicit ``level``, else ``FLASHFINANCE_LOG_LEVEL``, else ``INFO``.

    Unknown level names are ignored rather than rejected.
    """

    if isinstance(level, int):
        return level
    return _named_level(level) or _named_level(os.getenv(LEVEL_ENV)) or logging.INFO


def _installed_handler(logger: logging.Logger) -> logging.Handler | None:
    for handler in logger.handlers:
        if getattr(handler, "_flashfinance", False):
            return handler
    return None


def configure_logging(
    level: int | str | None = None,
    *,
    json_lines: bool = False,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Send package diagnostics to ``stream`` (``sys.stderr`` by default).

    Idempotent: a second call only adjusts the level of the handler installed
    by the first. Records stop propagating to the root logger so a host that
    also configures the root does not print them twice.
    """

    logger = logging.getLogger(LOGGER_NAME)
    resolved = resolve_level(level)
    logger.setLevel(resolved)

    handler = _installed_handler(logger)
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler._flashfinance = True  # type: ignore[attr-defined]
        handler.setFormatter(_JsonLineFormatter() if json_lines else logging.Formatter(_TEXT_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    handler.setLevel(resolved)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a ``flashfinance`` module.

    Short names are placed under the package logger, so ``get_logger("client")``
    and ``get_logger("flashfinance.client")`` are the same logger.
    """

    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(LOGGER_NAME).getChild(name)


__all__ = ["LEVEL_ENV", "LOGGER_NAME", "configure_logging", "get_logger", "resolve_level"]
