import io
import json
from decimal import Decimal
from urllib.error import HTTPError, URLError

import pytest

from marketwatch.errors import UpstreamFetchError
from marketwatch.providers import alpha_vantage_provider as av
from marketwatch.providers.alpha_vantage_provider import AlphaVantageQuoteProvider, parse_global_quote


class _FakeResponse:
    def __init__(self, body: bytes) -> None:
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def _global_quote(price: str, change: str) -> dict:
    return {"Global Quote": {"01. symbol": "AAPL", "05. price": price, "10. change percent": change}}


def test_parse_global_quote_ok():
    q = parse_global_quote("AAPL", _global_quote("189.9800", "1.2345%"))

    assert q.symbol == "AAPL"
    assert q.price == Decimal("189.9800")
    assert q.change_percent == Decimal("1.2345")


def test_parse_negative_change():
    q = parse_global_quote("AAPL", _global_quote("10", "-0.5000%"))
    assert q.change_percent == Decimal("-0.5000")


def test_missing_global_quote_is_no_data():
    assert parse_global_quote("AAPL", {}) is None
    assert parse_global_quote("AAPL", {"Global Quote": {}}) is None


def test_throttle_note_is_no_data():
    payload = {"Note": "Thank you for using Alpha Vantage! Our standard API call frequency is 5 calls per minute."}
    assert parse_global_quote("AAPL", payload) is None


@pytest.mark.parametrize(
    "payload",
    [
        _global_quote("abc", "1%"),
        _global_quote("10", "n/a%"),
        {"Global Quote": {"05. price": "10"}},
        ["not", "an", "object"],
    ],
)
def test_malformed_quote_raises_upstream_error(payload):
    with pytest.raises(UpstreamFetchError):
        parse_global_quote("AAPL", payload)


def test_fetch_without_api_key_makes_no_request(monkeypatch):
    def _boom(*args, **kwargs):
        raise AssertionError("no request expected")

    monkeypatch.setattr(av, "urlopen", _boom)
    provider = AlphaVantageQuoteProvider(api_key=None)

    assert provider.fetch(symbol="AAPL") is None


def test_fetch_builds_global_quote_request(monkeypatch):
    seen = {}

    def _fake_urlopen(req, timeout):
        seen["url"] = req.full_url
        seen["timeout"] = timeout
        return _FakeResponse(json.dumps(_global_quote("100.5", "2.0%")).encode("utf-8"))

    monkeypatch.setattr(av, "urlopen", _fake_urlopen)
    provider = AlphaVantageQuoteProvider(api_key="k123", base_url="https://example.test/query", timeout_sec=3.0)

    q = provider.fetch(symbol="AAPL")

    assert q.price == Decimal("100.5")
    assert seen["url"].startswith("https://example.test/query?")
    assert "function=GLOBAL_QUOTE" in seen["url"]
    assert "symbol=AAPL" in seen["url"]
    assert "apikey=k123" in seen["url"]
    assert seen["timeout"] == 3.0


def test_fetch_maps_http_error(monkeypatch):
    def _fake_urlopen(req, timeout):
        raise HTTPError(req.full_url, 503, "Service Unavailable", hdrs=None, fp=io.BytesIO(b""))

    monkeypatch.setattr(av, "urlopen", _fake_urlopen)

    with pytest.raises(UpstreamFetchError) as ei:
        AlphaVantageQuoteProvider(api_key="k").fetch(symbol="AAPL")
    assert ei.value.reason == "HTTP 503"
    assert ei.value.symbol == "AAPL"


def test_fetch_maps_network_error(monkeypatch):
    def _fake_urlopen(req, timeout):
        raise URLError("connection refused")

    monkeypatch.setattr(av, "urlopen", _fake_urlopen)

    with pytest.raises(UpstreamFetchError) as ei:
        AlphaVantageQuoteProvider(api_key="k").fetch(symbol="AAPL")
    assert "network error" in ei.value.reason


def test_fetch_maps_invalid_json(monkeypatch):
    monkeypatch.setattr(av, "urlopen", lambda req, timeout: _FakeResponse(b"<html>oops</html>"))

    with pytest.raises(UpstreamFetchError):
        AlphaVantageQuoteProvider(api_key="k").fetch(symbol="AAPL")
