"""Backend JSON -> canonical record normalizers.

One normalizer per entity. Each runs the collection unwrapper over the raw
response, reads every field from a fixed precedence list of source keys, and
drops entries without a resolvable primary identifier. Field precedence:
the first key present with a non-``null`` value is used and later keys are
not consulted; the scalar resolvers handle wrapped or mistyped values at that
key.

Failures never raise. A call records what it kept and dropped in a
:class:`NormalizationReport` and logs:

- one warning when a non-empty response produced no records and is not a
  recognized empty result (the "unexpected response shape" diagnostic);
- otherwise, one warning summarizing dropped entries, if any.

``normalize_metric_stats`` is the exception to "empty in, empty out": it
always returns at least one record, zero-valued when nothing was readable.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from functools import partial
from typing import Any

from .diagnostics import PayloadSink
from .logging_setup import get_logger
from .models import (
    CategoryNameOwner,
    CategoryTransactionEntry,
    Label,
    MetricStats,
    NormalizeContext,
    Transaction,
    TransactionInfo,
    TxStatus,
)
from .resolvers import (
    format_instant,
    resolve_date,
    resolve_id,
    resolve_name,
    resolve_number,
)
from .unwrap import Accept, is_blank, is_empty_result, unwrap_entries, unwrap_entry

_logger = get_logger("flashfinance.normalizers")

# ---------------------------------------------------------------------------
# Source field precedence
# ---------------------------------------------------------------------------

_TX_ID_KEYS = ("tx_id", "txId", "id", "_id", "transaction_id")
_OWNER_KEYS = ("owner_id", "ownerId", "user_id", "userId")
_TX_DATE_KEYS = ("date", "tx_date", "posted_date", "created_at")
_MERCHANT_KEYS = ("merchant_text", "merchant", "tx_merchant", "tx_name", "description")
_AMOUNT_KEYS = ("amount", "tx_amount", "total")

_CATEGORY_ID_KEYS = ("category_id", "categoryId", "_id", "id")
_CATEGORY_NAME_KEYS = ("name", "category_name", "label")

_ENTRY_DATE_KEYS = ("tx_date", "date", "posted_date", "created_at")
_ENTRY_CATEGORY_KEYS = ("category_name", "categoryName", "category")

_METRIC_FIELDS: dict[str, tuple[str, ...]] = {
    "total_amount": ("total_amount", "totalAmount", "total"),
    "transaction_count": ("transaction_count", "transactionCount", "count"),
    "average_per_day": ("average_per_day", "averagePerDay", "avg_per_day"),
    "days": ("days", "day_count", "period_days"),
}

_INFO_DATE_KEYS = ("date", "tx_date", "transaction_date", "posted_date")
_INFO_MERCHANT_KEYS = ("merchant_text", "tx_merchant", "merchant", "description", "name")

_LABEL_CATEGORY_KEYS = ("category_id", "categoryId", "category")
_LABEL_USER_KEYS = ("user_id", "userId", "owner_id")
_LABEL_CREATED_KEYS = ("created_at", "createdAt", "date")

# Container keys per endpoint family.
TRANSACTION_COLLECTION_KEYS = ("results", "data", "transactions", "items", "values")
CATEGORY_COLLECTION_KEYS = ("results", "data", "categories", "items", "values")
ENTRY_COLLECTION_KEYS = ("results", "data", "transactions", "entries", "items", "values")
METRIC_COLLECTION_KEYS = ("results", "data", "metrics", "stats", "items", "values")
LABEL_COLLECTION_KEYS = ("results", "data", "labels", "items", "values")

_PREVIEW_CHARS = 500


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NormalizationIssue:
    kind: str
    detail: str


@dataclass(slots=True)
class NormalizationReport:
    """What one normalizer call kept and dropped.

    Callers may pass their own instance to inspect the outcome; otherwise
    each call builds a private one.
    """

    label: str
    kept: int = 0
    dropped: int = 0
    issues: list[NormalizationIssue] = field(default_factory=list)

    def record_drop(self, entry: Any) -> None:
        self.dropped += 1
        self.issues.append(
            NormalizationIssue("unresolvable_entry", f"no identifier in {_preview(entry)}")
        )

    @property
    def unrecognized_shape(self) -> bool:
        return any(i.kind == "unrecognized_shape" for i in self.issues)


def _preview(value: Any) -> str:
    try:
        text = json.dumps(value, default=str, ensure_ascii=False)
    except RecursionError:
        text = f"<deeply nested {type(value).__name__}>"
    except (TypeError, ValueError):
        text = repr(value)
    if len(text) > _PREVIEW_CHARS:
        return text[:_PREVIEW_CHARS] + "..."
    return text


def _finish(
    report: NormalizationReport, raw: Any, records: Sequence[Any], keys: Sequence[str]
) -> None:
    report.kept = len(records)
    if not records:
        if is_blank(raw) or is_empty_result(raw, keys):
            return
        report.issues.append(NormalizationIssue("unrecognized_shape", _preview(raw)))
        _logger.warning("%s: unexpected response shape: %s", report.label, _preview(raw))
    elif report.dropped:
        _logger.warning(
            "%s: dropped %d of %d entries without a resolvable identifier",
            report.label,
            report.dropped,
            report.dropped + report.kept,
        )


def _normalize_batch[T](
    label: str,
    raw: Any,
    accept: Accept[T],
    *,
    keys: Sequence[str],
    report: NormalizationReport | None,
) -> list[T]:
    report = report if report is not None else NormalizationReport(label)
    records = unwrap_entries(raw, keys=keys, accept=accept, on_drop=report.record_drop)
    _finish(report, raw, records, keys)
    return records


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def _pick(record: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _default_owner(context: NormalizeContext | None) -> str | None:
    if context is None:
        return None
    return context.owner_id or None


def _date_text(value: Any) -> str:
    # Strings are kept as sent; other encodings become ISO-8601.
    if isinstance(value, str):
        return value
    instant = resolve_date(value)
    return format_instant(instant) if instant is not None else ""


def _iso_date_text(value: Any) -> str:
    if isinstance(value, str):
        text = value.strip()
        return text if resolve_date(text) is not None else ""
    instant = resolve_date(value)
    return format_instant(instant) if instant is not None else ""


def _status(value: Any) -> TxStatus:
    name = resolve_name(value)
    if name is None:
        return TxStatus.UNLABELED
    try:
        return TxStatus(name.strip().upper())
    except ValueError:
        return TxStatus.UNLABELED


# ---------------------------------------------------------------------------
# Record builders (``accept`` callables for the unwrapper)
# ---------------------------------------------------------------------------


def _transaction_from(
    record: Mapping[str, Any], context: NormalizeContext | None = None
) -> Transaction | None:
    tx_id = resolve_id(_pick(record, _TX_ID_KEYS))
    if tx_id is None:
        return None
    return Transaction(
        tx_id=tx_id,
        owner_id=resolve_id(_pick(record, _OWNER_KEYS)) or _default_owner(context),
        date=_date_text(_pick(record, _TX_DATE_KEYS)),
        merchant_text=resolve_name(_pick(record, _MERCHANT_KEYS)) or "",
        amount=resolve_number(_pick(record, _AMOUNT_KEYS)),
        status=_status(record.get("status")),
    )


def _category_from(
    record: Mapping[str, Any], context: NormalizeContext | None = None
) -> CategoryNameOwner | None:
    category_id = resolve_id(_pick(record, _CATEGORY_ID_KEYS))
    if category_id is None:
        return None
    return CategoryNameOwner(
        category_id=category_id,
        name=resolve_name(_pick(record, _CATEGORY_NAME_KEYS)) or "",
        owner_id=resolve_id(_pick(record, _OWNER_KEYS)) or _default_owner(context),
    )


def _category_entry_from(record: Mapping[str, Any]) -> CategoryTransactionEntry | None:
    tx_id = resolve_id(_pick(record, _TX_ID_KEYS))
    if tx_id is None:
        return None
    return CategoryTransactionEntry(
        tx_id=tx_id,
        amount=resolve_number(_pick(record, _AMOUNT_KEYS)),
        tx_date=_iso_date_text(_pick(record, _ENTRY_DATE_KEYS)),
        category_name=resolve_name(_pick(record, _ENTRY_CATEGORY_KEYS)),
    )


def _metric_stats_from(record: Mapping[str, Any]) -> MetricStats | None:
    picked = {name: _pick(record, keys) for name, keys in _METRIC_FIELDS.items()}
    if all(v is None for v in picked.values()):
        return None
    return MetricStats(**{name: resolve_number(v) for name, v in picked.items()})


def _tx_info_from(record: Mapping[str, Any]) -> TransactionInfo:
    nested = record.get("txInfo")
    if nested is not None:
        info = unwrap_entry(nested, _tx_info_from)
        if info is not None:
            return info
    return TransactionInfo(
        date=resolve_date(_pick(record, _INFO_DATE_KEYS)),
        merchant_text=resolve_name(_pick(record, _INFO_MERCHANT_KEYS)) or "",
        amount=resolve_number(_pick(record, _AMOUNT_KEYS)),
    )


def _label_from(record: Mapping[str, Any]) -> Label | None:
    tx_id = resolve_id(_pick(record, _TX_ID_KEYS))
    if tx_id is None:
        return None
    created = _pick(record, _LABEL_CREATED_KEYS)
    return Label(
        tx_id=tx_id,
        category_id=resolve_id(_pick(record, _LABEL_CATEGORY_KEYS)),
        user_id=resolve_id(_pick(record, _LABEL_USER_KEYS)),
        created_at=resolve_date(created) if created is not None else None,
    )


def _category_name_from(record: Mapping[str, Any]) -> str | None:
    return resolve_name(_pick(record, _CATEGORY_NAME_KEYS))


# ---------------------------------------------------------------------------
# Public normalizers
# ---------------------------------------------------------------------------


def normalize_transactions(
    raw: Any,
    context: NormalizeContext | None = None,
    *,
    report: NormalizationReport | None = None,
) -> list[Transaction]:
    """Normalize a transaction listing (import, list-all, unlabeled).

    Entries without a transaction id are dropped. ``context.owner_id`` fills
    in the owner when an entry has none.
    """

    return _normalize_batch(
        "transactions",
        raw,
        partial(_transaction_from, context=context),
        keys=TRANSACTION_COLLECTION_KEYS,
        report=report,
    )


def normalize_categories(
    raw: Any,
    context: NormalizeContext | None = None,
    *,
    report: NormalizationReport | None = None,
) -> list[CategoryNameOwner]:
    """Normalize a category name/owner listing; entries need a category id."""

    return _normalize_batch(
        "categories",
        raw,
        partial(_category_from, context=context),
        keys=CATEGORY_COLLECTION_KEYS,
        report=report,
    )


def normalize_category_transactions(
    raw: Any,
    context: NormalizeContext | None = None,
    *,
    report: NormalizationReport | None = None,
) -> list[CategoryTransactionEntry]:
    """Normalize the transactions listed under one category."""

    return _normalize_batch(
        "category_transactions",
        raw,
        _category_entry_from,
        keys=ENTRY_COLLECTION_KEYS,
        report=report,
    )


def normalize_metric_stats(
    raw: Any,
    context: NormalizeContext | None = None,
    *,
    report: NormalizationReport | None = None,
    sink: PayloadSink | None = None,
) -> list[MetricStats]:
    """Normalize category metric statistics; never returns an empty list.

    An entry counts when at least one statistic field is present. When none
    does, a single :meth:`MetricStats.zero` record is returned so callers can
    always read ``[0]``. ``sink`` receives the raw payload for debugging.
    """

    if sink is not None:
        try:
            sink("metrics", raw)
        except Exception:  # noqa: BLE001
            _logger.warning("metrics: payload sink failed", exc_info=True)

    stats = _normalize_batch(
        "metrics", raw, _metric_stats_from, keys=METRIC_COLLECTION_KEYS, report=report
    )
    return stats or [MetricStats.zero()]


def normalize_labels(
    raw: Any,
    context: NormalizeContext | None = None,
    *,
    report: NormalizationReport | None = None,
) -> list[Label]:
    """Normalize label documents; entries need a transaction id."""

    return _normalize_batch("labels", raw, _label_from, keys=LABEL_COLLECTION_KEYS, report=report)


def normalize_tx_info(raw: Any, context: NormalizeContext | None = None) -> TransactionInfo:
    """Normalize a single transaction-info response.

    The first readable record wins (arrays and ``txInfo`` nesting included).
    An unreadable response yields :meth:`TransactionInfo.empty` and a warning.
    """

    info = unwrap_entry(raw, _tx_info_from)
    if info is None:
        _logger.warning("tx_info: unexpected response shape: %s", _preview(raw))
        return TransactionInfo.empty()
    return info


def normalize_category_name(raw: Any) -> str | None:
    """Return the category name carried by a name-lookup response, or ``None``."""

    if isinstance(raw, str):
        return resolve_name(raw)
    names = unwrap_entries(raw, keys=CATEGORY_COLLECTION_KEYS, accept=_category_name_from)
    if not names:
        _logger.debug("category_name: no name in %s", _preview(raw))
        return None
    return names[0]


__all__ = [
    "CATEGORY_COLLECTION_KEYS",
    "ENTRY_COLLECTION_KEYS",
    "LABEL_COLLECTION_KEYS",
    "METRIC_COLLECTION_KEYS",
    "TRANSACTION_COLLECTION_KEYS",
    "NormalizationIssue",
    "NormalizationReport",
    "normalize_categories",
    "normalize_category_name",
    "normalize_category_transactions",
    "normalize_labels",
    "normalize_metric_stats",
    "normalize_transactions",
    "normalize_tx_info",
]
