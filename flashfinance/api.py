"""Endpoint facades: typed requests in, canonical records out.

Each facade method sends one request DTO through :class:`ApiClient` and hands
the raw body to the matching normalizer. Transport errors propagate as
:class:`~flashfinance.client.ApiError`, except inside the composed lookup
(:meth:`CategoryApi.get_category_names`) where each failure is mapped to a
per-item fallback.
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import partial
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .client import ApiClient
from .config import Settings, load_settings
from .diagnostics import LastPayload
from .lookups import resolve_category_names
from .models import (
    CategoryNameOwner,
    CategoryTransactionEntry,
    Label,
    MetricStats,
    NormalizeContext,
    Transaction,
    TransactionInfo,
)
from .normalizers import (
    normalize_categories,
    normalize_category_name,
    normalize_category_transactions,
    normalize_labels,
    normalize_metric_stats,
    normalize_transactions,
    normalize_tx_info,
)
from .resolvers import resolve_id

# ---------------------------------------------------------------------------
# Request DTOs
# ---------------------------------------------------------------------------


class _Request(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)


class ImportTransactionsRequest(_Request):
    owner_id: str = Field(min_length=1)
    file_content: str = Field(serialization_alias="fileContent")


class OwnerRequest(_Request):
    owner_id: str = Field(min_length=1)


class TxRequest(_Request):
    owner_id: str = Field(min_length=1)
    tx_id: str = Field(min_length=1)


class MarkLabeledRequest(_Request):
    tx_id: str = Field(min_length=1)
    requester_id: str = Field(min_length=1)


class CategoryRequest(_Request):
    owner_id: str = Field(min_length=1)
    category_id: str = Field(min_length=1)


class MetricStatsRequest(_Request):
    owner_id: str = Field(min_length=1)
    category_id: str = Field(min_length=1)
    start: str | None = None
    end: str | None = None


class UserRequest(_Request):
    user_id: str = Field(min_length=1)


class UserTxRequest(_Request):
    user_id: str = Field(min_length=1)
    tx_id: str = Field(min_length=1)


def _body(request: BaseModel) -> dict[str, Any]:
    return request.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Facades
# ---------------------------------------------------------------------------


class TransactionApi:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    def import_transactions(self, owner_id: str, file_content: str) -> list[Transaction]:
        """POST /Transaction/importTransactions: parse a CSV into unlabeled transactions."""

        request = ImportTransactionsRequest(owner_id=owner_id, file_content=file_content)
        raw = self._client.post("/Transaction/importTransactions", _body(request))
        return normalize_transactions(raw, NormalizeContext(owner_id=request.owner_id))

    def list_all(self) -> list[Transaction]:
        """POST /Transaction/list_all: every transaction in the system."""

        return normalize_transactions(self._client.post("/Transaction/list_all", {}))

    def get_unlabeled_transactions(self, owner_id: str) -> list[Transaction]:
        """POST /Transaction/get_unlabeled_transactions for one owner."""

        request = OwnerRequest(owner_id=owner_id)
        raw = self._client.post("/Transaction/get_unlabeled_transactions", _body(request))
        return normalize_transactions(raw, NormalizeContext(owner_id=request.owner_id))

    def get_tx_info(self, owner_id: str, tx_id: str) -> TransactionInfo:
        """POST /Transaction/getTxInfo: date, merchant and amount of one transaction."""

        request = TxRequest(owner_id=owner_id, tx_id=tx_id)
        raw = self._client.post("/Transaction/getTxInfo", _body(request))
        return normalize_tx_info(raw, NormalizeContext(owner_id=request.owner_id))

    def mark_labeled(self, tx_id: str, requester_id: str) -> str | None:
        """POST /Transaction/mark_labeled; returns the acknowledged transaction id."""

        request = MarkLabeledRequest(tx_id=tx_id, requester_id=requester_id)
        return resolve_id(self._client.post("/Transaction/mark_labeled", _body(request)))


class CategoryApi:
    def __init__(self, client: ApiClient, *, settings: Settings | None = None) -> None:
        self._client = client
        self._settings = settings or load_settings()
        # Raw body of the latest metrics response, for debugging tools.
        self.last_metrics_payload = LastPayload()

    def get_category_names_and_owners(self) -> list[CategoryNameOwner]:
        """POST /Category/getCategoryNamesAndOwners."""

        return normalize_categories(self._client.post("/Category/getCategoryNamesAndOwners", {}))

    def get_category_name(self, owner_id: str, category_id: str) -> str | None:
        """POST /Category/getCategoryNameById; ``None`` when the body has no name."""

        request = CategoryRequest(owner_id=owner_id, category_id=category_id)
        return normalize_category_name(
            self._client.post("/Category/getCategoryNameById", _body(request))
        )

    def get_category_names(self, owner_id: str, category_ids: Sequence[str]) -> dict[str, str]:
        """Resolve display names for many categories concurrently.

        A lookup that fails (transport error or nameless body) maps its
        category id to itself rather than failing the batch.
        """

        return resolve_category_names(
            category_ids,
            partial(self.get_category_name, owner_id),
            concurrency=self._settings.lookup_concurrency,
        )

    def list_category_transactions(
        self, owner_id: str, category_id: str
    ) -> list[CategoryTransactionEntry]:
        """POST /Category/listTransactions: transactions labeled with one category."""

        request = CategoryRequest(owner_id=owner_id, category_id=category_id)
        raw = self._client.post("/Category/listTransactions", _body(request))
        return normalize_category_transactions(raw, NormalizeContext(owner_id=request.owner_id))

    def get_metric_stats(
        self,
        owner_id: str,
        category_id: str,
        *,
        start: str | None = None,
        end: str | None = None,
    ) -> MetricStats:
        """POST /Category/getMetricStats; zero-valued stats when unreadable."""

        request = MetricStatsRequest(
            owner_id=owner_id, category_id=category_id, start=start, end=end
        )
        raw = self._client.post("/Category/getMetricStats", _body(request))
        stats = normalize_metric_stats(
            raw,
            NormalizeContext(owner_id=request.owner_id),
            sink=self.last_metrics_payload,
        )
        return stats[0]


class LabelApi:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    def get_label(self, user_id: str, tx_id: str) -> list[Label]:
        """POST /Label/getLabel: the label document for one user and transaction."""

        request = UserTxRequest(user_id=user_id, tx_id=tx_id)
        return normalize_labels(self._client.post("/Label/getLabel", _body(request)))

    def all(self, user_id: str) -> list[Label]:
        """POST /Label/all: every label of one user."""

        request = UserRequest(user_id=user_id)
        return normalize_labels(self._client.post("/Label/all", _body(request)))


class FlashFinanceApi:
    """All facades over one shared :class:`ApiClient`."""

    def __init__(self, client: ApiClient | None = None, *, settings: Settings | None = None):
        settings = settings or load_settings()
        self.client = client or ApiClient(settings=settings)
        self.transactions = TransactionApi(self.client)
        self.categories = CategoryApi(self.client, settings=settings)
        self.labels = LabelApi(self.client)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> FlashFinanceApi:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = [
    "CategoryApi",
    "FlashFinanceApi",
    "LabelApi",
    "TransactionApi",
]
