"""Canonical records and request context for ``flashfinance``.

Canonical records are frozen ``dataclass`` instances built fresh by the
normalizers in :mod:`flashfinance.normalizers`. They hold no references to
one another; association between entities is by identifier value only.

Each record offers ``to_dict()`` which renders it back into its own JSON shape
(enums as their string value, instants as ISO-8601 text). Feeding that shape
back through the matching normalizer yields an equal record.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict

from .resolvers import format_instant

# ---------------------------------------------------------------------------
# Dynamic input
# ---------------------------------------------------------------------------

type JSONValue = None | bool | int | float | str | list[JSONValue] | dict[str, JSONValue]
"""An already-deserialized JSON tree as produced by ``json.loads``/``httpx``.

The normalizers accept ``Any`` at their boundary since callers may hand over
values from other deserializers (``Decimal`` numbers, ``datetime`` objects);
this alias documents the common case.
"""


class TxStatus(StrEnum):
    UNLABELED = "UNLABELED"
    LABELED = "LABELED"


def _iso(value: datetime | None) -> str | None:
    return format_instant(value) if value is not None else None


# ---------------------------------------------------------------------------
# Canonical records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Transaction:
    """A transaction as listed by the transaction endpoints.

    ``tx_id`` is always a non-empty identifier; ``amount`` is always finite
    (``0.0`` when the backend value could not be read) and ``status`` falls
    back to :attr:`TxStatus.UNLABELED`.
    """

    tx_id: str
    owner_id: str | None
    date: str
    merchant_text: str
    amount: float
    status: TxStatus = TxStatus.UNLABELED

    def to_dict(self) -> dict[str, Any]:
        return {
            "tx_id": self.tx_id,
            "owner_id": self.owner_id,
            "date": self.date,
            "merchant_text": self.merchant_text,
            "amount": self.amount,
            "status": self.status.value,
        }


@dataclass(frozen=True, slots=True)
class CategoryNameOwner:
    category_id: str
    name: str
    owner_id: str | None

    def to_dict(self) -> dict[str, Any]:
        return {"category_id": self.category_id, "name": self.name, "owner_id": self.owner_id}


@dataclass(frozen=True, slots=True)
class CategoryTransactionEntry:
    """A transaction projected into a category listing.

    ``tx_date`` is ISO-8601 text or ``""`` when the backend date could not be
    parsed.
    """

    tx_id: str
    amount: float
    tx_date: str
    category_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "tx_id": self.tx_id,
            "amount": self.amount,
            "tx_date": self.tx_date,
            "category_name": self.category_name,
        }


@dataclass(frozen=True, slots=True)
class MetricStats:
    """Aggregate spending statistics for a category and period.

    Unlike the other records, an unreadable response still produces a value:
    :meth:`zero`.
    """

    total_amount: float = 0.0
    transaction_count: float = 0.0
    average_per_day: float = 0.0
    days: float = 0.0

    @classmethod
    def zero(cls) -> MetricStats:
        return cls()

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_amount": self.total_amount,
            "transaction_count": self.transaction_count,
            "average_per_day": self.average_per_day,
            "days": self.days,
        }


@dataclass(frozen=True, slots=True)
class TransactionInfo:
    date: datetime | None
    merchant_text: str
    amount: float

    @classmethod
    def empty(cls) -> TransactionInfo:
        return cls(date=None, merchant_text="", amount=0.0)

    def to_dict(self) -> dict[str, Any]:
        return {"date": _iso(self.date), "merchant_text": self.merchant_text, "amount": self.amount}


@dataclass(frozen=True, slots=True)
class Label:
    """A committed label linking a transaction to a category for a user."""

    tx_id: str
    category_id: str | None
    user_id: str | None
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "tx_id": self.tx_id,
            "category_id": self.category_id,
            "user_id": self.user_id,
            "created_at": _iso(self.created_at),
        }


# ---------------------------------------------------------------------------
# Request context
# ---------------------------------------------------------------------------


class NormalizeContext(BaseModel):
    """Caller-validated identifiers supplied alongside a raw response.

    ``owner_id`` fills in the owner of transactions and categories whose
    payload omits it (endpoints scoped to one owner often drop the field).
    """

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    owner_id: str | None = None
    session: str | None = None


__all__ = [
    "CategoryNameOwner",
    "CategoryTransactionEntry",
    "JSONValue",
    "Label",
    "MetricStats",
    "NormalizeContext",
    "Transaction",
    "TransactionInfo",
    "TxStatus",
]
