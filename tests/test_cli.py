import json
from pathlib import Path

from typer.testing import CliRunner

from flashfinance.cli import Kind, app, cmd_normalize

runner = CliRunner()


def _write(tmp_path: Path, payload) -> Path:
    path = tmp_path / "response.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_normalize_transactions_prints_records(tmp_path: Path):
    path = _write(
        tmp_path, {"results": [{"tx": {"_id": {"$oid": "t1"}, "tx_amount": "-4.5"}}]}
    )

    result = runner.invoke(app, ["normalize", "transactions", str(path), "--owner-id", "u1"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == [
        {
            "tx_id": "t1",
            "owner_id": "u1",
            "date": "",
            "merchant_text": "",
            "amount": -4.5,
            "status": "UNLABELED",
        }
    ]


def test_normalize_tx_info_prints_single_object(tmp_path: Path):
    path = _write(tmp_path, {"txInfo": {"merchant": "Shop", "amount": 3}})

    result = runner.invoke(app, ["normalize", "tx-info", str(path)])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"date": None, "merchant_text": "Shop", "amount": 3.0}


def test_normalize_reads_stdin():
    result = runner.invoke(app, ["normalize", "metrics", "-"], input='{"days": 7}')

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == [
        {"total_amount": 0.0, "transaction_count": 0.0, "average_per_day": 0.0, "days": 7.0}
    ]


def test_normalize_missing_file_exits_nonzero(tmp_path: Path):
    result = runner.invoke(app, ["normalize", "labels", str(tmp_path / "nope.json")])
    assert result.exit_code == 1


def test_cmd_normalize_rejects_invalid_json(tmp_path: Path, capsys):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")

    assert cmd_normalize(Kind.CATEGORIES, str(path)) == 1
    assert "Invalid JSON" in capsys.readouterr().err


def test_cmd_normalize_rejects_non_utf8_input(tmp_path: Path, capsys):
    path = tmp_path / "latin1.json"
    path.write_bytes('{"name": "café"}'.encode("latin-1"))

    assert cmd_normalize(Kind.CATEGORIES, str(path)) == 1
    assert "not UTF-8" in capsys.readouterr().err
