import logging
import threading
import time

import pytest

from flashfinance import map_with_fallback, resolve_category_names


def test_map_with_fallback_preserves_order():
    def slow_square(n: int) -> int:
        time.sleep(0.01 * (5 - n))
        return n * n

    out = map_with_fallback(range(5), slow_square, fallback=lambda n: -1, concurrency=3)
    assert out == [0, 1, 4, 9, 16]


def test_map_with_fallback_isolates_failures(caplog):
    caplog.set_level(logging.ERROR, logger="flashfinance")

    def lookup(n: int) -> str:
        if n % 2:
            raise RuntimeError(f"boom {n}")
        return f"ok-{n}"

    out = map_with_fallback([0, 1, 2, 3], lookup, fallback=lambda n: f"fb-{n}", concurrency=2)

    assert out == ["ok-0", "fb-1", "ok-2", "fb-3"]
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 2


def test_map_with_fallback_respects_concurrency_cap():
    lock = threading.Lock()
    active = 0
    peak = 0

    def lookup(n: int) -> int:
        nonlocal active, peak
        with lock:
            active += 1
            peak = max(peak, active)
        time.sleep(0.02)
        with lock:
            active -= 1
        return n

    assert map_with_fallback(range(8), lookup, fallback=lambda n: n, concurrency=2) == list(
        range(8)
    )
    assert peak <= 2


@pytest.mark.parametrize("concurrency", [0, -1, True, 1.5])
def test_map_with_fallback_rejects_bad_concurrency(concurrency):
    with pytest.raises(ValueError):
        map_with_fallback([1], lambda n: n, fallback=lambda n: n, concurrency=concurrency)


def test_map_with_fallback_empty_input():
    assert map_with_fallback([], lambda n: n, fallback=lambda n: n, concurrency=4) == []


def test_resolve_category_names_falls_back_to_raw_id():
    calls: list[str] = []

    def fetch(category_id: str) -> str | None:
        calls.append(category_id)
        if category_id == "c-err":
            raise ConnectionError("backend down")
        if category_id == "c-none":
            return None
        return category_id.upper()

    names = resolve_category_names(["c1", "c-err", "c-none", "c1"], fetch, concurrency=4)

    assert names == {"c1": "C1", "c-err": "c-err", "c-none": "c-none"}
    assert sorted(calls) == ["c-err", "c-none", "c1"]


def test_resolve_category_names_empty():
    assert resolve_category_names([], lambda _id: "x") == {}
