"""Public interface for the ``flashfinance`` package.

Symbol re-exports only: resolvers, unwrapping, normalizers, canonical records
and the HTTP facades.
"""

from .api import CategoryApi, FlashFinanceApi, LabelApi, TransactionApi
from .client import ApiClient, ApiError
from .diagnostics import LastPayload, PayloadSink
from .lookups import map_with_fallback, resolve_category_names
from .models import (
    CategoryNameOwner,
    CategoryTransactionEntry,
    JSONValue,
    Label,
    MetricStats,
    NormalizeContext,
    Transaction,
    TransactionInfo,
    TxStatus,
)
from .normalizers import (
    NormalizationIssue,
    NormalizationReport,
    normalize_categories,
    normalize_category_name,
    normalize_category_transactions,
    normalize_labels,
    normalize_metric_stats,
    normalize_transactions,
    normalize_tx_info,
)
from .resolvers import format_instant, resolve_date, resolve_id, resolve_name, resolve_number
from .unwrap import unwrap_entries, unwrap_entry

__all__ = [
    # Resolvers / unwrapping
    "resolve_id",
    "resolve_name",
    "resolve_number",
    "resolve_date",
    "format_instant",
    "unwrap_entries",
    "unwrap_entry",
    # Normalizers
    "normalize_transactions",
    "normalize_categories",
    "normalize_category_transactions",
    "normalize_metric_stats",
    "normalize_tx_info",
    "normalize_labels",
    "normalize_category_name",
    "NormalizationIssue",
    "NormalizationReport",
    # Models / types
    "JSONValue",
    "Transaction",
    "TxStatus",
    "CategoryNameOwner",
    "CategoryTransactionEntry",
    "MetricStats",
    "TransactionInfo",
    "Label",
    "NormalizeContext",
    # Diagnostics / lookups
    "LastPayload",
    "PayloadSink",
    "map_with_fallback",
    "resolve_category_names",
    # HTTP collaborators
    "ApiClient",
    "ApiError",
    "TransactionApi",
    "CategoryApi",
    "LabelApi",
    "FlashFinanceApi",
]
