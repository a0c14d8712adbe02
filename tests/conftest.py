"""Pytest configuration for test isolation.

Settings and the log level are read from ``FLASHFINANCE_*`` environment
variables, and the CLI installs a stderr handler on the package logger. Both
would leak between tests (and from a developer's shell), so each test starts
from a clean environment and an unconfigured ``flashfinance`` logger.
"""

from __future__ import annotations

import logging
import os

import pytest

from flashfinance.logging_setup import LOGGER_NAME


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("FLASHFINANCE_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Undo ``configure_logging`` so ``caplog`` sees package records."""

    yield
    logger = logging.getLogger(LOGGER_NAME)
    for h in list(logger.handlers):
        if not isinstance(h, logging.NullHandler):
            logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
