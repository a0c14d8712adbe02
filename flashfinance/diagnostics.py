"""Debug sinks for raw response payloads.

Normalizers that accept a ``sink`` hand it every raw payload they receive,
before normalization. The sink is owned by the caller; nothing here is module
state, and no sink ever influences normalization output.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

type PayloadSink = Callable[[str, Any], None]
"""Called as ``sink(label, raw_payload)``."""


class LastPayload:
    """Thread-safe holder of the most recent raw payload it was handed.

    Last writer wins; concurrent writers may interleave in any order, and a
    reader sees whichever payload was written most recently.
    """

    __slots__ = ("_label", "_lock", "_payload")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._label: str | None = None
        self._payload: Any = None

    def __call__(self, label: str, payload: Any) -> None:
        with self._lock:
            self._label = label
            self._payload = payload

    @property
    def label(self) -> str | None:
        with self._lock:
            return self._label

    @property
    def payload(self) -> Any:
        with self._lock:
            return self._payload

    def snapshot(self) -> tuple[str | None, Any]:
        with self._lock:
            return self._label, self._payload


__all__ = ["LastPayload", "PayloadSink"]
