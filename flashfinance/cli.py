"""Developer CLI for the ``flashfinance`` package.

Runs a normalizer over a captured backend response so drifted payloads can be
inspected offline:

    flashfinance normalize transactions response.json --owner-id u1
    cat metrics.json | flashfinance normalize metrics -

Environment variables are loaded from a local ``.env`` using
``python-dotenv`` before logging is configured. Normalization logic lives in
:mod:`flashfinance.normalizers`.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv

from .logging_setup import configure_logging
from .models import NormalizeContext
from .normalizers import (
    normalize_categories,
    normalize_category_transactions,
    normalize_labels,
    normalize_metric_stats,
    normalize_transactions,
    normalize_tx_info,
)


class Kind(StrEnum):
    TRANSACTIONS = "transactions"
    CATEGORIES = "categories"
    CATEGORY_TRANSACTIONS = "category-transactions"
    METRICS = "metrics"
    TX_INFO = "tx-info"
    LABELS = "labels"


_NORMALIZERS: dict[Kind, Callable[[Any, NormalizeContext], Any]] = {
    Kind.TRANSACTIONS: normalize_transactions,
    Kind.CATEGORIES: normalize_categories,
    Kind.CATEGORY_TRANSACTIONS: normalize_category_transactions,
    Kind.METRICS: normalize_metric_stats,
    Kind.TX_INFO: normalize_tx_info,
    Kind.LABELS: normalize_labels,
}


def _read_payload(path: str) -> Any:
    if path == "-":
        return json.loads(sys.stdin.read())
    return json.loads(Path(path).read_text(encoding="utf-8"))


def cmd_normalize(kind: Kind, path: str, *, owner_id: str | None = None) -> int:
    """Normalize the JSON document at ``path`` and print records as JSON.

    Writes a JSON array (one object per record; a single object for
    ``tx-info``) to stdout. Errors go to stderr with a non-zero return.
    """

    try:
        raw = _read_payload(path)
    except FileNotFoundError:
        print(f"Error: File not found: {path}", file=sys.stderr)
        return 1
    except PermissionError:
        print(f"Error: Permission denied: {path}", file=sys.stderr)
        return 1
    except UnicodeDecodeError as e:
        print(f"Error: {path} is not UTF-8 text: {e}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in {path}: {e}", file=sys.stderr)
        return 1

    context = NormalizeContext(owner_id=owner_id)
    result = _NORMALIZERS[kind](raw, context)
    if isinstance(result, list):
        out: Any = [record.to_dict() for record in result]
    else:
        out = result.to_dict()
    print(json.dumps(out, indent=2, ensure_ascii=False))
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Normalize FlashFinance backend responses into canonical records.",
)


@app.callback()
def _root(
    log_level: str | None = typer.Option(
        None, help="Logging level (falls back to FLASHFINANCE_LOG_LEVEL, then INFO)."
    ),
    json_logs: bool = typer.Option(
        False, "--json-logs", help="Write diagnostics to stderr as JSON lines."
    ),
) -> None:
    """Load ``.env`` from the working directory and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level, json_lines=json_logs)


@app.command("normalize")
def normalize_cmd(
    kind: Annotated[Kind, typer.Argument(help="Which endpoint family the payload came from.")],
    path: Annotated[str, typer.Argument(help="Path to a JSON file, or '-' for stdin.")],
    owner_id: str | None = typer.Option(
        None, help="Owner id applied to records whose payload omits it."
    ),
) -> None:
    """Print the canonical records found in a raw response."""

    code = cmd_normalize(kind, path, owner_id=owner_id)
    if code:
        raise typer.Exit(code)


if __name__ == "__main__":  # pragma: no cover
    app()
