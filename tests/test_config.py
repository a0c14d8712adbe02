import pytest

from flashfinance.config import Settings, load_settings


def test_defaults_without_environment():
    assert load_settings() == Settings()


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("FLASHFINANCE_API_BASE", " https://api.example.com/v1/ ")
    monkeypatch.setenv("FLASHFINANCE_HTTP_TIMEOUT", "2.5")
    monkeypatch.setenv("FLASHFINANCE_LOOKUP_CONCURRENCY", "3")

    settings = load_settings()

    assert settings.api_base == "https://api.example.com/v1"
    assert settings.http_timeout == 2.5
    assert settings.lookup_concurrency == 3


@pytest.mark.parametrize(("raw", "expected"), [("0", 1), ("500", 32), ("many", 8)])
def test_lookup_concurrency_is_clamped(monkeypatch, raw, expected):
    monkeypatch.setenv("FLASHFINANCE_LOOKUP_CONCURRENCY", raw)
    assert load_settings().lookup_concurrency == expected


@pytest.mark.parametrize("raw", ["-1", "0", "soon"])
def test_invalid_timeout_uses_default(monkeypatch, raw):
    monkeypatch.setenv("FLASHFINANCE_HTTP_TIMEOUT", raw)
    assert load_settings().http_timeout == 10.0
