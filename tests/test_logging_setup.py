import io
import json
import logging

from flashfinance.logging_setup import LOGGER_NAME, configure_logging, get_logger, resolve_level


def test_resolve_level_precedence(monkeypatch):
    assert resolve_level(logging.DEBUG) == logging.DEBUG
    assert resolve_level(" warning ") == logging.WARNING
    assert resolve_level("15") == 15
    assert resolve_level() == logging.INFO

    monkeypatch.setenv("FLASHFINANCE_LOG_LEVEL", "error")
    assert resolve_level() == logging.ERROR
    assert resolve_level("bogus") == logging.ERROR


def test_get_logger_places_short_names_under_package():
    assert get_logger("client") is logging.getLogger("flashfinance.client")
    assert get_logger("flashfinance.lookups").name == "flashfinance.lookups"
    assert get_logger(LOGGER_NAME).name == LOGGER_NAME


def test_configure_logging_text_and_idempotent():
    stream = io.StringIO()
    logger = configure_logging("INFO", stream=stream)
    configure_logging("DEBUG", stream=io.StringIO())

    get_logger("normalizers").debug("dropped %d", 2)

    installed = [h for h in logger.handlers if not isinstance(h, logging.NullHandler)]
    assert len(installed) == 1
    assert logger.propagate is False
    assert "DEBUG flashfinance.normalizers: dropped 2" in stream.getvalue()


def test_configure_logging_json_lines():
    stream = io.StringIO()
    configure_logging("WARNING", json_lines=True, stream=stream)

    get_logger("normalizers").warning("transactions: unexpected response shape: %s", "{}")
    get_logger("normalizers").info("not emitted")

    (line,) = stream.getvalue().splitlines()
    entry = json.loads(line)
    assert entry["level"] == "WARNING"
    assert entry["logger"] == "flashfinance.normalizers"
    assert entry["message"] == "transactions: unexpected response shape: {}"
