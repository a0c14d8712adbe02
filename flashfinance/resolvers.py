"""Scalar resolvers: identifiers, names, numbers and instants from drifted JSON.

Each resolver is an ordered list of extraction strategies. A strategy is a
total function from a dynamic value to ``T | None``; the resolver returns the
first non-``None`` result. Absence (``None``, or the caller's fallback for
numbers) is the only failure signal: no resolver raises for any input.

Shapes absorbed here, as seen across backend versions:

- identifiers as plain strings, numbers, ``{"$oid": ...}``, ``{"_id": ...}``
  or nested ``{"value": {"value": ...}}`` wrappers;
- numbers as JSON numbers, numeric strings, MongoDB extended JSON
  (``{"$numberDecimal": "10.5"}``) or single-element arrays;
- instants as ISO-8601 strings, epoch milliseconds, ``{"$date": ...}``.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping
from datetime import UTC, date, datetime, time
from decimal import Decimal
from email.utils import parsedate_to_datetime
from typing import Any

type Strategy[T] = Callable[[Any], T | None]

# Key order matters: earlier keys win when several are present.
ID_KEYS: tuple[str, ...] = (
    "$oid",
    "id",
    "_id",
    "value",
    "tx_id",
    "txId",
    "category_id",
    "categoryId",
    "user_id",
    "userId",
    "owner_id",
    "ownerId",
)
NAME_KEYS: tuple[str, ...] = ("name", "label", "value")
NUMBER_KEYS: tuple[str, ...] = (
    "$numberDecimal",
    "$numberDouble",
    "$numberInt",
    "$numberLong",
    "value",
    "amount",
)
DATE_KEYS: tuple[str, ...] = ("date", "$date", "value", "timestamp")

# Text forms that stand for a missing value rather than a real token.
_PLACEHOLDER_TEXT = frozenset({"", "none", "null", "undefined", "nan"})

# Formats seen in legacy exports that ``fromisoformat`` does not cover.
_LEGACY_DATE_FORMATS: tuple[str, ...] = (
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%Y/%m/%d",
)


def _first_resolved[T](value: Any, strategies: Iterable[Strategy[T]]) -> T | None:
    for strategy in strategies:
        try:
            result = strategy(value)
        except RecursionError:
            # Nesting deeper than the stack allows is unresolved, not an error.
            return None
        if result is not None:
            return result
    return None


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a number in JSON terms.
    return isinstance(value, int | float | Decimal) and not isinstance(value, bool)


def _is_placeholder(text: str) -> bool:
    return text.strip().lower() in _PLACEHOLDER_TEXT


# ---------------------------------------------------------------------------
# Shared text strategies
# ---------------------------------------------------------------------------


def _text(value: Any) -> str | None:
    if isinstance(value, str) and not _is_placeholder(value):
        return value
    return None


def _number_text(value: Any) -> str | None:
    """Canonical decimal text for a finite number (``42.0`` -> ``"42"``)."""

    if not _is_number(value):
        return None
    if isinstance(value, int):
        try:
            return str(value)
        except ValueError:
            # Exceeds the interpreter's int-to-str digit limit.
            return None
    if isinstance(value, Decimal):
        if not value.is_finite():
            return None
        return format(value.normalize(), "f")
    if not math.isfinite(value):
        return None
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def _coerced_text(value: Any) -> str | None:
    # Last resort for scalar objects from non-JSON deserializers (UUID, ObjectId).
    # Numbers that reach here are non-finite and carry no text.
    if value is None or _is_number(value):
        return None
    if isinstance(value, bool | bytes | Mapping | list | tuple | set | frozenset):
        return None
    try:
        text = str(value)
    except Exception:  # noqa: BLE001
        return None
    if _is_placeholder(text):
        return None
    return text


# ---------------------------------------------------------------------------
# Identifier
# ---------------------------------------------------------------------------


def _id_from_mapping(value: Any) -> str | None:
    if not isinstance(value, Mapping):
        return None
    for key in ID_KEYS:
        candidate = value.get(key)
        if candidate is None:
            continue
        resolved = resolve_id(candidate)
        if resolved is not None:
            return resolved
    return None


_ID_STRATEGIES: tuple[Strategy[str], ...] = (_text, _number_text, _id_from_mapping, _coerced_text)


def resolve_id(value: Any) -> str | None:
    """Return the canonical identifier carried by ``value``, or ``None``.

    Strings are returned untrimmed when they contain non-whitespace; numbers
    become their decimal text; mappings are searched through :data:`ID_KEYS`
    recursively. ``None``, blank strings, booleans and containers without a
    recognized key resolve to ``None``.
    """

    return _first_resolved(value, _ID_STRATEGIES)


# ---------------------------------------------------------------------------
# Name
# ---------------------------------------------------------------------------


def _name_from_items(value: Any) -> str | None:
    if not isinstance(value, list | tuple):
        return None
    for item in value:
        resolved = resolve_name(item)
        if resolved is not None:
            return resolved
    return None


def _name_from_mapping(value: Any) -> str | None:
    if not isinstance(value, Mapping):
        return None
    for key in NAME_KEYS:
        candidate = value.get(key)
        if candidate is None:
            continue
        resolved = resolve_name(candidate)
        if resolved is not None:
            return resolved
    return None


_NAME_STRATEGIES: tuple[Strategy[str], ...] = (
    _text,
    _number_text,
    _name_from_items,
    _name_from_mapping,
    _coerced_text,
)


def resolve_name(value: Any) -> str | None:
    """Return a display string from ``value``, or ``None``.

    Lists yield their earliest resolvable element; mappings are searched for
    ``name``, ``label`` and then ``value``.
    """

    return _first_resolved(value, _NAME_STRATEGIES)


# ---------------------------------------------------------------------------
# Number
# ---------------------------------------------------------------------------


def _finite_number(value: Any) -> float | None:
    if not _is_number(value):
        return None
    try:
        number = float(value)
    except (OverflowError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _number_from_text(value: Any) -> float | None:
    if not isinstance(value, str):
        return None
    s = value.strip()
    if not s:
        return None
    try:
        number = float(s)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _number_from_wrapper(value: Any) -> float | None:
    if not isinstance(value, Mapping):
        return None
    for key in NUMBER_KEYS:
        if key not in value:
            continue
        # A wrapper holding a non-finite value does not stop the search.
        resolved = _resolve_number_or_none(value[key])
        if resolved is not None:
            return resolved
    return None


def _number_from_items(value: Any) -> float | None:
    if not isinstance(value, list | tuple):
        return None
    for item in value:
        resolved = _resolve_number_or_none(item)
        if resolved is not None:
            return resolved
    return None


_NUMBER_STRATEGIES: tuple[Strategy[float], ...] = (
    _finite_number,
    _number_from_text,
    _number_from_wrapper,
    _number_from_items,
)


def _resolve_number_or_none(value: Any) -> float | None:
    return _first_resolved(value, _NUMBER_STRATEGIES)


def resolve_number(value: Any, fallback: float = 0.0) -> float:
    """Return a finite ``float`` read from ``value``, else ``fallback``.

    ``NaN`` and infinities are never returned from the input; they count as
    unresolved and yield ``fallback``.
    """

    resolved = _resolve_number_or_none(value)
    return fallback if resolved is None else resolved


# ---------------------------------------------------------------------------
# Instant
# ---------------------------------------------------------------------------


def _as_utc(value: datetime) -> datetime:
    # Naive values from the backend are UTC.
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


def _instant_passthrough(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=UTC)
    return None


def _parse_instant_text(s: str) -> datetime | None:
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(s)
    except (TypeError, ValueError, IndexError, OverflowError):
        pass
    for fmt in _LEGACY_DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    return None


def _instant_from_text(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    s = value.strip()
    if not s:
        return None
    parsed = _parse_instant_text(s)
    return _as_utc(parsed) if parsed is not None else None


def _instant_from_epoch_ms(value: Any) -> datetime | None:
    millis = _finite_number(value)
    if millis is None:
        return None
    try:
        return datetime.fromtimestamp(millis / 1000.0, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def _instant_from_mapping(value: Any) -> datetime | None:
    if not isinstance(value, Mapping):
        return None
    for key in DATE_KEYS:
        candidate = value.get(key)
        if candidate is None:
            continue
        resolved = resolve_date(candidate)
        if resolved is not None:
            return resolved
    return None


def _instant_from_extended_number(value: Any) -> datetime | None:
    # Canonical extended JSON nests epoch millis: {"$date": {"$numberLong": "..."}}.
    if not isinstance(value, Mapping):
        return None
    if not any(isinstance(k, str) and k.startswith("$number") for k in value):
        return None
    millis = _number_from_wrapper(value)
    return _instant_from_epoch_ms(millis) if millis is not None else None


_DATE_STRATEGIES: tuple[Strategy[datetime], ...] = (
    _instant_passthrough,
    _instant_from_text,
    _instant_from_epoch_ms,
    _instant_from_mapping,
    _instant_from_extended_number,
)


def resolve_date(value: Any) -> datetime | None:
    """Return a timezone-aware instant read from ``value``, or ``None``.

    Strings are parsed as ISO-8601, RFC 2822 or ``MM/DD/YYYY``; numbers are
    epoch milliseconds; mappings are searched for ``date``, ``$date``,
    ``value`` and ``timestamp``. Values without a zone are taken as UTC.
    Instants that cannot be expressed in UTC (offsets at the edge of the
    ``datetime`` range) resolve to ``None``.
    """

    instant = _first_resolved(value, _DATE_STRATEGIES)
    if instant is None:
        return None
    try:
        instant.astimezone(UTC)
    except OverflowError:
        return None
    return instant


def format_instant(value: datetime) -> str:
    """Render ``value`` as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""

    utc = _as_utc(value).astimezone(UTC)
    return f"{utc:%Y-%m-%dT%H:%M:%S}.{utc.microsecond // 1000:03d}Z"


__all__ = [
    "DATE_KEYS",
    "ID_KEYS",
    "NAME_KEYS",
    "NUMBER_KEYS",
    "format_instant",
    "resolve_date",
    "resolve_id",
    "resolve_name",
    "resolve_number",
]
