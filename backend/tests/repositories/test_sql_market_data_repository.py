import datetime as dt
from decimal import Decimal

import pytest

from marketwatch.domain.price_point import HistoricalPricePoint
from marketwatch.domain.quote import Quote


T0 = dt.datetime(2026, 3, 2, 14, 30, tzinfo=dt.timezone.utc)


def _quote(symbol: str, price: str, at: dt.datetime = T0, change: str | None = "1.5") -> Quote:
    return Quote(
        symbol=symbol,
        price=Decimal(price),
        change_percent=None if change is None else Decimal(change),
        updated_at=at,
    )


def test_upsert_inserts_then_replaces(market_repo):
    market_repo.upsert_quote(_quote("AAPL", "100"))
    market_repo.upsert_quote(_quote("aapl", "101.25", at=T0 + dt.timedelta(minutes=5), change="-0.75"))

    quotes = market_repo.list_quotes()
    assert len(quotes) == 1
    q = quotes[0]
    assert q.symbol == "AAPL"
    assert q.price == Decimal("101.25")
    assert q.change_percent == Decimal("-0.75")
    assert q.updated_at == T0 + dt.timedelta(minutes=5)


def test_upsert_same_value_twice_is_idempotent(market_repo):
    market_repo.upsert_quote(_quote("MSFT", "410"))
    market_repo.upsert_quote(_quote("MSFT", "410"))

    assert len(market_repo.list_quotes(symbols=["MSFT"])) == 1


def test_get_quote_missing(market_repo):
    assert market_repo.get_quote(symbol="NOPE") is None


def test_current_prices_only_returns_known_symbols(market_repo):
    market_repo.upsert_quote(_quote("AAPL", "100"))
    market_repo.upsert_quote(_quote("MSFT", "400"))

    prices = market_repo.current_prices(symbols=["aapl", "TSLA"])
    assert prices == {"AAPL": Decimal("100")}
    assert market_repo.current_prices(symbols=[]) == {}


def test_list_quotes_filtered_and_sorted(market_repo):
    for sym in ("TSLA", "AAPL", "MSFT"):
        market_repo.upsert_quote(_quote(sym, "1"))

    assert [q.symbol for q in market_repo.list_quotes()] == ["AAPL", "MSFT", "TSLA"]
    assert [q.symbol for q in market_repo.list_quotes(symbols=["tsla", "aapl"])] == ["AAPL", "TSLA"]
    assert market_repo.list_quotes(symbols=[]) == []


def test_history_is_append_only_newest_first(market_repo):
    for i, price in enumerate(("100", "101", "101")):
        market_repo.add_history_point(
            HistoricalPricePoint.from_price(symbol="AAPL", price=Decimal(price), recorded_at=T0 + dt.timedelta(hours=i))
        )
    market_repo.add_history_point(HistoricalPricePoint.from_price(symbol="MSFT", price=Decimal("5"), recorded_at=T0))

    points = market_repo.list_history(symbol="aapl")
    assert [p.price for p in points] == [Decimal("101"), Decimal("101"), Decimal("100")]
    assert points[0].recorded_at == T0 + dt.timedelta(hours=2)

    assert len(market_repo.list_history(symbol="AAPL", limit=2)) == 2


def test_history_limit_must_be_positive(market_repo):
    with pytest.raises(ValueError):
        market_repo.list_history(symbol="AAPL", limit=0)
