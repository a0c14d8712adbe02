"""Collection and entry unwrapping for drifted response envelopes.

Two levels are involved because backends wrap both the collection and each
element of it, e.g. ``{"results": [{"tx": {...}}, ...]}``:

- :func:`unwrap_entries` handles the *container*: bare arrays, ``null``, and
  mappings that hold the collection under ``results``/``data`` or an
  entity-specific synonym.
- :func:`unwrap_entry` handles one *element*: arrays of candidates and
  mappings that nest the record under ``tx``/``transaction``/``value``/
  ``data``/``item``.

Both take an ``accept`` callable deciding whether a candidate mapping is a
valid entry. Entity normalizers pass their record builder so that "valid"
means "passes that entity's identifier gate"; the default accepts any mapping.
Neither function raises for JSON input.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

COLLECTION_KEYS: tuple[str, ...] = ("results", "data", "transactions", "items", "values", "metrics")
ENTRY_KEYS: tuple[str, ...] = ("tx", "transaction", "value", "data", "item")

type Accept[T] = Callable[[Mapping[str, Any]], T | None]


def as_entry(record: Mapping[str, Any]) -> Mapping[str, Any]:
    """Default ``accept``: any mapping is an entry."""

    return record


def _is_sequence(value: Any) -> bool:
    return isinstance(value, list | tuple)


def unwrap_entry[T](value: Any, accept: Accept[T] = as_entry) -> T | None:
    """Return the first accepted entry found in ``value``, or ``None``.

    Arrays are searched in order and the search stops at the first accepted
    element. For a mapping, each present wrapper key in :data:`ENTRY_KEYS` is
    tried in order; when none of them yields an entry, the mapping itself is
    offered to ``accept``. Primitives are never entries.
    """

    if _is_sequence(value):
        for item in value:
            entry = unwrap_entry(item, accept)
            if entry is not None:
                return entry
        return None

    if not isinstance(value, Mapping):
        return None

    for key in ENTRY_KEYS:
        if key in value:
            nested = unwrap_entry(value[key], accept)
            if nested is not None:
                return nested

    return accept(value)


def unwrap_entries[T](
    value: Any,
    *,
    keys: Sequence[str] = COLLECTION_KEYS,
    accept: Accept[T] = as_entry,
    on_drop: Callable[[Any], None] | None = None,
) -> list[T]:
    """Flatten a collection response into its accepted entries, in order.

    ``keys`` lists the container keys to look for on a mapping; the first one
    holding an array (or a single mapping) is unwrapped in its place. A value
    with no recognized container key is treated as a one-element collection.
    ``on_drop`` is called with every element that yields no entry.
    """

    if value is None:
        return []

    if _is_sequence(value):
        entries: list[T] = []
        for item in value:
            try:
                entry = unwrap_entry(item, accept)
            except RecursionError:
                entry = None
            if entry is None:
                if on_drop is not None:
                    on_drop(item)
                continue
            entries.append(entry)
        return entries

    if isinstance(value, Mapping):
        for key in keys:
            nested = value.get(key)
            if _is_sequence(nested) or isinstance(nested, Mapping):
                return unwrap_entries(nested, keys=keys, accept=accept, on_drop=on_drop)

    return unwrap_entries([value], keys=keys, accept=accept, on_drop=on_drop)


def is_blank(value: Any) -> bool:
    """``None``, an empty string, or an empty array/mapping."""

    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if _is_sequence(value) or isinstance(value, Mapping):
        return not value
    return False


def is_empty_result(value: Any, keys: Sequence[str] = COLLECTION_KEYS) -> bool:
    """Whether ``value`` is a known way for the backend to say "nothing".

    Recognized: an empty array, a mapping whose first container key holds an
    empty array or ``null``, and ``{"ok": true}`` with no container key.
    """

    if _is_sequence(value):
        return not value
    if not isinstance(value, Mapping):
        return False
    for key in keys:
        if key not in value:
            continue
        nested = value[key]
        if nested is None:
            return True
        if _is_sequence(nested) or isinstance(nested, Mapping):
            return is_empty_result(nested, keys) or not nested
    # ``ok`` only means "nothing" when no collection key carries data.
    return value.get("ok") is True


__all__ = [
    "COLLECTION_KEYS",
    "ENTRY_KEYS",
    "as_entry",
    "is_blank",
    "is_empty_result",
    "unwrap_entries",
    "unwrap_entry",
]
