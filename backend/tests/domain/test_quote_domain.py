import datetime as dt
from decimal import Decimal

import pytest

from marketwatch.domain.price_point import HistoricalPricePoint
from marketwatch.domain.quote import FetchedQuote, Quote, normalize_symbol


NOW = dt.datetime(2026, 3, 2, 14, 30, tzinfo=dt.timezone.utc)


def test_normalize_symbol():
    assert normalize_symbol(" aapl ") == "AAPL"


def test_quote_from_fetched_normalizes_symbol_and_keeps_values():
    fetched = FetchedQuote(symbol="msft", price=Decimal("410.12"), change_percent=Decimal("-1.25"))
    q = Quote.from_fetched(fetched, updated_at=NOW)

    assert q.symbol == "MSFT"
    assert q.price == Decimal("410.12")
    assert q.change_percent == Decimal("-1.25")
    assert q.updated_at == NOW


def test_quote_requires_timezone_aware_timestamp():
    with pytest.raises(ValueError):
        Quote(symbol="AAPL", price=Decimal("1"), change_percent=None, updated_at=dt.datetime(2026, 3, 2))


def test_quote_rejects_float_price():
    with pytest.raises(ValueError):
        Quote(symbol="AAPL", price=1.5, change_percent=None, updated_at=NOW)


def test_fetched_quote_rejects_negative_price():
    with pytest.raises(ValueError):
        FetchedQuote(symbol="AAPL", price=Decimal("-0.01"), change_percent=Decimal("0"))


def test_fetched_quote_rejects_empty_symbol():
    with pytest.raises(ValueError):
        FetchedQuote(symbol="  ", price=Decimal("1"), change_percent=Decimal("0"))


def test_history_point_from_price_copies_close():
    p = HistoricalPricePoint.from_price(symbol="aapl", price=Decimal("190.5"), recorded_at=NOW)

    assert p.symbol == "AAPL"
    assert p.price == Decimal("190.5")
    assert p.close_price == Decimal("190.5")
    assert p.open_price is None and p.high_price is None and p.low_price is None
    assert p.volume is None
