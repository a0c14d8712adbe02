"""Composed lookups: many independent sub-requests, one result per item.

Some views need one backend call per item (e.g. the display name of each of
N category ids). Those calls are independent, so they run on a bounded
``ThreadPoolExecutor``. A failing call never fails its siblings: its result
is replaced by a per-item fallback and the error is logged.

- ``map_with_fallback(items, lookup, fallback=..., concurrency=...)`` keeps
  input order and returns exactly one value per input item.
- ``resolve_category_names(...)`` applies it to category display names, with
  the raw category id as the fallback name.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait

from .logging_setup import get_logger

_logger = get_logger("flashfinance.lookups")


def map_with_fallback[InT, OutT](
    items: Iterable[InT],
    lookup: Callable[[InT], OutT],
    *,
    fallback: Callable[[InT], OutT],
    concurrency: int,
    label: str = "lookup",
) -> list[OutT]:
    """Map ``items`` through ``lookup`` with at most ``concurrency`` calls in flight.

    Each lookup that raises is replaced by ``fallback(item)`` and logged at
    error level. The returned list has one element per input item, in input
    order.
    """

    if not isinstance(concurrency, int) or isinstance(concurrency, bool) or concurrency < 1:
        raise ValueError("concurrency must be a positive integer")

    it = enumerate(items)
    results: dict[int, OutT] = {}
    pending: dict[Future, tuple[int, InT]] = {}

    def _submit(pool: ThreadPoolExecutor) -> bool:
        try:
            idx, item = next(it)
        except StopIteration:
            return False
        pending[pool.submit(lookup, item)] = (idx, item)
        return True

    with ThreadPoolExecutor(max_workers=concurrency) as pool:
        # Prime the window
        for _ in range(concurrency):
            if not _submit(pool):
                break

        while pending:
            done, _active = wait(set(pending), return_when=FIRST_COMPLETED)
            for fut in done:
                idx, item = pending.pop(fut)
                try:
                    results[idx] = fut.result()
                except Exception as e:  # noqa: BLE001
                    _logger.error("%s failed for %r: %s", label, item, e)
                    results[idx] = fallback(item)
            # Top up: one new submission per completion.
            for _ in range(len(done)):
                if not _submit(pool):
                    break

    return [results[i] for i in range(len(results))]


def resolve_category_names(
    category_ids: Sequence[str],
    fetch_name: Callable[[str], str | None],
    *,
    concurrency: int = 8,
) -> dict[str, str]:
    """Return ``{category_id: display_name}`` for ``category_ids``.

    ``fetch_name`` performs one lookup (typically an HTTP call). When it
    raises or returns no usable name, the category id itself is used as the
    name. Duplicate ids are looked up once.
    """

    unique = list(dict.fromkeys(category_ids))
    if not unique:
        return {}

    def _lookup(category_id: str) -> str:
        name = fetch_name(category_id)
        if name is None or not name.strip():
            _logger.warning("category name lookup returned nothing for %r", category_id)
            return category_id
        return name

    names = map_with_fallback(
        unique,
        _lookup,
        fallback=lambda category_id: category_id,
        concurrency=max(1, min(concurrency, len(unique))),
        label="category name lookup",
    )
    return dict(zip(unique, names, strict=True))


__all__ = ["map_with_fallback", "resolve_category_names"]
