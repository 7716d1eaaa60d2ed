from decimal import Decimal

from marketwatch.errors import UpstreamFetchError
from marketwatch.services.quote_fetcher import QuoteFetched, QuoteSkipped, fetch_quotes


def test_outcomes_follow_input_order(make_provider, limiter):
    provider = make_provider({"AAPL": "190", "MSFT": None, "TSLA": UpstreamFetchError("TSLA", "HTTP 500")})

    out = list(fetch_quotes(["AAPL", "MSFT", "TSLA"], provider=provider, limiter=limiter))

    assert [o.symbol for o in out] == ["AAPL", "MSFT", "TSLA"]
    assert isinstance(out[0], QuoteFetched)
    assert out[0].quote.price == Decimal("190")
    assert out[1] == QuoteSkipped(symbol="MSFT", reason="no data")
    assert out[2] == QuoteSkipped(symbol="TSLA", reason="HTTP 500")


def test_unexpected_provider_error_does_not_stop_batch(make_provider, limiter):
    provider = make_provider({"AAPL": RuntimeError("boom"), "MSFT": "410"})

    out = list(fetch_quotes(["AAPL", "MSFT"], provider=provider, limiter=limiter))

    assert isinstance(out[0], QuoteSkipped)
    assert "boom" in out[0].reason
    assert isinstance(out[1], QuoteFetched)


def test_requests_are_paced(make_provider, limiter, clock):
    provider = make_provider({"A": "1", "B": "2", "C": "3"})

    list(fetch_quotes(["A", "B", "C"], provider=provider, limiter=limiter))

    t = provider.call_times
    assert t[1] - t[0] >= 12.0
    assert t[2] - t[1] >= 12.0


def test_empty_input_makes_no_requests(make_provider, limiter, clock):
    provider = make_provider({})

    assert list(fetch_quotes([], provider=provider, limiter=limiter)) == []
    assert provider.calls == []
    assert clock.sleeps == []


def test_fetching_is_lazy(make_provider, limiter):
    provider = make_provider({"A": "1", "B": "2"})

    it = fetch_quotes(["A", "B"], provider=provider, limiter=limiter)
    next(it)

    assert provider.calls == ["A"]


def test_batch_ends_one_interval_after_last_request(make_provider, limiter, clock):
    provider = make_provider({"A": "1", "B": None})

    list(fetch_quotes(["A", "B"], provider=provider, limiter=limiter))

    assert clock.now == provider.call_times[-1] + 12.0
