"""Runtime settings for the HTTP collaborators and composed lookups.

Values come from environment variables. Entrypoints (the CLI) load a local
``.env`` via ``python-dotenv`` before calling :func:`load_settings`; library
code never touches ``.env`` itself.

- ``FLASHFINANCE_API_BASE``: backend base URL (default ``http://localhost:8000/api``)
- ``FLASHFINANCE_HTTP_TIMEOUT``: request timeout in seconds (default ``10``)
- ``FLASHFINANCE_LOOKUP_CONCURRENCY``: worker cap for composed lookups
  (default ``8``, clamped to ``1..32``)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_API_BASE = "http://localhost:8000/api"
DEFAULT_HTTP_TIMEOUT = 10.0
DEFAULT_LOOKUP_CONCURRENCY = 8
_MAX_LOOKUP_CONCURRENCY = 32


@dataclass(frozen=True, slots=True)
class Settings:
    api_base: str = DEFAULT_API_BASE
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    lookup_concurrency: int = DEFAULT_LOOKUP_CONCURRENCY


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    try:
        value = float(raw) if raw else None
    except ValueError:
        value = None
    if value is None or value <= 0:
        return default
    return value


def _resolve_lookup_concurrency() -> int:
    """Honor ``FLASHFINANCE_LOOKUP_CONCURRENCY``, capped to 32 and at least 1."""

    raw = os.getenv("FLASHFINANCE_LOOKUP_CONCURRENCY")
    try:
        workers = int(raw) if raw else None
    except ValueError:
        workers = None
    if workers is None:
        return DEFAULT_LOOKUP_CONCURRENCY
    return max(1, min(workers, _MAX_LOOKUP_CONCURRENCY))


def load_settings() -> Settings:
    """Build :class:`Settings` from the current environment."""

    api_base = (os.getenv("FLASHFINANCE_API_BASE") or "").strip() or DEFAULT_API_BASE
    return Settings(
        api_base=api_base.rstrip("/"),
        http_timeout=_env_float("FLASHFINANCE_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        lookup_concurrency=_resolve_lookup_concurrency(),
    )


__all__ = ["Settings", "load_settings"]
