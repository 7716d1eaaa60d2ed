import datetime as dt
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from marketwatch.domain.quote import FetchedQuote
from marketwatch.errors import PersistenceError
from marketwatch.services.price_writer import write_quote


NOW = dt.datetime(2026, 3, 2, 14, 30, tzinfo=dt.timezone.utc)


def _fetched(symbol: str, price: str) -> FetchedQuote:
    return FetchedQuote(symbol=symbol, price=Decimal(price), change_percent=Decimal("1.0"))


def test_first_observation_uses_new_price_as_old(market_repo):
    w = write_quote(fetched=_fetched("AAPL", "100"), previous_price=None, market_repo=market_repo, now=NOW)

    assert w.old_price == Decimal("100")
    assert w.history_recorded is True
    assert market_repo.get_quote(symbol="AAPL").price == Decimal("100")

    [p] = market_repo.list_history(symbol="AAPL")
    assert p.price == Decimal("100")
    assert p.close_price == Decimal("100")
    assert p.recorded_at == NOW


def test_previous_price_is_carried(market_repo):
    w = write_quote(
        fetched=_fetched("AAPL", "110"),
        previous_price=Decimal("100"),
        market_repo=market_repo,
        now=NOW,
    )
    assert w.old_price == Decimal("100")
    assert w.quote.price == Decimal("110")


class _FailingUpsertRepo:
    def __init__(self) -> None:
        self.history = []

    def upsert_quote(self, quote):
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    def add_history_point(self, point):
        self.history.append(point)


class _FailingHistoryRepo:
    def __init__(self) -> None:
        self.quotes = []

    def upsert_quote(self, quote):
        self.quotes.append(quote)

    def add_history_point(self, point):
        raise OperationalError("INSERT", {}, Exception("disk full"))


def test_upsert_failure_raises_and_skips_history():
    repo = _FailingUpsertRepo()

    with pytest.raises(PersistenceError) as ei:
        write_quote(fetched=_fetched("AAPL", "100"), previous_price=None, market_repo=repo, now=NOW)

    assert ei.value.table == "market_data"
    assert ei.value.symbol == "AAPL"
    assert repo.history == []


def test_history_failure_keeps_quote():
    repo = _FailingHistoryRepo()

    w = write_quote(fetched=_fetched("AAPL", "100"), previous_price=None, market_repo=repo, now=NOW)

    assert w.history_recorded is False
    assert len(repo.quotes) == 1
