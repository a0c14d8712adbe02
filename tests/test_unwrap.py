from flashfinance.unwrap import is_blank, is_empty_result, unwrap_entries, unwrap_entry


def test_unwrap_entries_none_and_empty():
    assert unwrap_entries(None) == []
    assert unwrap_entries([]) == []
    assert unwrap_entries({"results": []}) == []


def test_unwrap_entries_flat_list_is_idempotent():
    xs = [{"tx_id": "a"}, {"tx_id": "b", "amount": 1}]
    once = unwrap_entries(xs)
    assert once == xs
    assert unwrap_entries(once) == once


def test_unwrap_entries_container_keys_in_order():
    value = {"data": [{"n": 2}], "results": [{"n": 1}]}
    assert unwrap_entries(value) == [{"n": 1}]
    assert unwrap_entries({"transactions": [{"n": 3}]}) == [{"n": 3}]
    assert unwrap_entries({"metrics": {"n": 4}}) == [{"n": 4}]


def test_unwrap_entries_skips_null_container_keys():
    assert unwrap_entries({"results": None, "items": [{"n": 1}]}) == [{"n": 1}]


def test_unwrap_entries_nested_container_and_entry_wrappers():
    value = {"results": {"data": [{"tx": {"n": 1}}, {"transaction": {"n": 2}}]}}
    assert unwrap_entries(value) == [{"n": 1}, {"n": 2}]


def test_unwrap_entries_custom_keys():
    assert unwrap_entries({"labels": [{"n": 1}]}, keys=("labels",)) == [{"n": 1}]
    # Not a container key here, so the mapping itself is the single entry.
    assert unwrap_entries({"labels": [{"n": 1}]}) == [{"labels": [{"n": 1}]}]


def test_unwrap_entries_single_value_and_scalars():
    assert unwrap_entries({"n": 1}) == [{"n": 1}]
    assert unwrap_entries("oops") == []
    assert unwrap_entries([1, "x", {"n": 1}]) == [{"n": 1}]


def test_unwrap_entries_reports_dropped_elements():
    dropped = []
    out = unwrap_entries([1, {"n": 1}, None], on_drop=dropped.append)
    assert out == [{"n": 1}]
    assert dropped == [1, None]


def test_unwrap_entry_array_short_circuits():
    seen = []

    def accept(record):
        seen.append(record)
        return record if "ok" in record else None

    assert unwrap_entry([{"no": 1}, {"ok": 1}, {"ok": 2}], accept) == {"ok": 1}
    assert {"ok": 2} not in seen


def test_unwrap_entry_wrapper_keys_then_self():
    assert unwrap_entry({"item": {"n": 1}}) == {"n": 1}
    assert unwrap_entry({"value": {"data": {"n": 2}}}) == {"n": 2}
    # A wrapper that yields nothing falls back to the mapping itself.
    record = {"tx_id": "t1", "data": "opaque"}
    assert unwrap_entry(record) == record


def test_unwrap_entry_accept_gates_nested_candidates():
    def has_id(record):
        return record if "tx_id" in record else None

    record = {"tx_id": "outer", "data": {"note": "not a transaction"}}
    assert unwrap_entry(record, has_id) == record


def test_unwrap_entry_primitives_are_not_entries():
    assert unwrap_entry(None) is None
    assert unwrap_entry(3) is None
    assert unwrap_entry("x") is None


def test_blank_and_empty_result_detection():
    assert is_blank(None) and is_blank("") and is_blank([]) and is_blank({})
    assert not is_blank({"a": 1})
    assert is_empty_result([])
    assert is_empty_result({"ok": True})
    assert is_empty_result({"results": []})
    assert is_empty_result({"data": None})
    assert not is_empty_result({"results": [{"x": 1}]})
    assert not is_empty_result({"unexpected": 1})


def test_ok_flag_is_empty_only_without_collection_data():
    assert is_empty_result({"ok": True, "results": []})
    assert not is_empty_result({"ok": True, "results": [{"foo": 1}]})
    assert not is_empty_result({"ok": True, "data": {"foo": 1}})
