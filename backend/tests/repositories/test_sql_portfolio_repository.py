import datetime as dt
from decimal import Decimal
from uuid import uuid4

import pytest

from marketwatch.domain.portfolio import Portfolio
from marketwatch.domain.transaction import Transaction, TransactionType


def _tx(portfolio_id, symbol: str, day: int, type: TransactionType = TransactionType.BUY) -> Transaction:
    return Transaction.create(
        portfolio_id=portfolio_id,
        symbol=symbol,
        quantity=Decimal("1"),
        price=Decimal("10"),
        type=type,
        transaction_date=dt.datetime(2026, 1, day, tzinfo=dt.timezone.utc),
    )


def test_add_get_and_list_for_owner(portfolio_repo):
    p1 = Portfolio.create(owner_id="u1", name="Main", created_at=dt.datetime(2026, 1, 1, tzinfo=dt.timezone.utc))
    p2 = Portfolio.create(owner_id="u1", name="Side", created_at=dt.datetime(2026, 1, 2, tzinfo=dt.timezone.utc))
    p3 = Portfolio.create(owner_id="u2", name="Other")
    for p in (p1, p2, p3):
        portfolio_repo.add(p)

    assert portfolio_repo.get(p1.id).name == "Main"
    assert [p.id for p in portfolio_repo.list_for_owner(owner_id="u1")] == [p1.id, p2.id]

    with pytest.raises(KeyError):
        portfolio_repo.get(uuid4())


def test_add_transaction_requires_portfolio(portfolio_repo):
    with pytest.raises(KeyError):
        portfolio_repo.add_transaction(_tx(uuid4(), "AAPL", 1))


def test_duplicate_transaction_rejected(portfolio_repo):
    p = Portfolio.create(owner_id="u1", name="Main")
    portfolio_repo.add(p)
    tx = _tx(p.id, "AAPL", 1)
    portfolio_repo.add_transaction(tx)

    with pytest.raises(ValueError):
        portfolio_repo.add_transaction(tx)


def test_list_transactions_roundtrip(portfolio_repo):
    p = Portfolio.create(owner_id="u1", name="Main")
    portfolio_repo.add(p)
    portfolio_repo.add_transaction(_tx(p.id, "MSFT", 2, TransactionType.SELL))
    portfolio_repo.add_transaction(_tx(p.id, "aapl", 1))

    txs = portfolio_repo.list_transactions(portfolio_id=p.id)
    assert [t.symbol for t in txs] == ["AAPL", "MSFT"]
    assert txs[1].type == TransactionType.SELL
    assert txs[0].quantity == Decimal("1")


def test_distinct_symbols_first_seen_order(portfolio_repo):
    p1 = Portfolio.create(owner_id="u1", name="A")
    p2 = Portfolio.create(owner_id="u1", name="B")
    portfolio_repo.add(p1)
    portfolio_repo.add(p2)

    portfolio_repo.add_transaction(_tx(p1.id, "MSFT", 3))
    portfolio_repo.add_transaction(_tx(p2.id, "AAPL", 1))
    portfolio_repo.add_transaction(_tx(p1.id, "AAPL", 2))
    portfolio_repo.add_transaction(_tx(p2.id, "TSLA", 4))

    assert portfolio_repo.distinct_symbols(portfolio_ids=[p1.id, p2.id]) == ["AAPL", "MSFT", "TSLA"]
    assert portfolio_repo.distinct_symbols(portfolio_ids=[p1.id]) == ["AAPL", "MSFT"]
    assert portfolio_repo.distinct_symbols(portfolio_ids=[]) == []


def test_holders_of(portfolio_repo):
    a = Portfolio.create(owner_id="alice", name="A")
    b = Portfolio.create(owner_id="bob", name="B")
    a2 = Portfolio.create(owner_id="alice", name="A2")
    for p in (a, b, a2):
        portfolio_repo.add(p)

    portfolio_repo.add_transaction(_tx(a.id, "AAPL", 1))
    portfolio_repo.add_transaction(_tx(a2.id, "AAPL", 2))
    portfolio_repo.add_transaction(_tx(b.id, "AAPL", 3))
    portfolio_repo.add_transaction(_tx(b.id, "MSFT", 4))

    holders = portfolio_repo.holders_of(symbols=["aapl", "MSFT", "TSLA"])
    assert holders == {"AAPL": ["alice", "bob"], "MSFT": ["bob"]}
    assert portfolio_repo.holders_of(symbols=[]) == {}
