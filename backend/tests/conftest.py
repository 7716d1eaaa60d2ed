from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy.orm import sessionmaker

from marketwatch.db import create_schema, make_engine
from marketwatch.domain.quote import FetchedQuote
from marketwatch.repositories.sql_advisor_repository import SqlAdvisorRepository
from marketwatch.repositories.sql_alert_repository import SqlAlertRepository
from marketwatch.repositories.sql_audit_repository import SqlAuditRepository
from marketwatch.repositories.sql_identity_repository import SqlIdentityRepository
from marketwatch.repositories.sql_market_data_repository import SqlMarketDataRepository
from marketwatch.repositories.sql_message_repository import SqlMessageRepository
from marketwatch.repositories.sql_portfolio_repository import SqlPortfolioRepository
from marketwatch.repositories.sql_stock_symbol_repository import SqlStockSymbolRepository
from marketwatch.services.rate_limiter import FixedIntervalRateLimiter
from marketwatch.settings import Settings


class VirtualClock:
    """Monotonic clock that only moves when someone sleeps on it."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeQuoteProvider:
    """
    Scripted provider: each symbol maps to a price string, None (no data)
    or an exception instance to raise.
    """

    source = "Fake (test data)"

    def __init__(self, script: dict, *, clock: VirtualClock | None = None) -> None:
        self.script = script
        self.clock = clock
        self.calls: list[str] = []
        self.call_times: list[float] = []

    def fetch(self, *, symbol: str) -> FetchedQuote | None:
        self.calls.append(symbol)
        if self.clock is not None:
            self.call_times.append(self.clock())

        value = self.script.get(symbol)
        if isinstance(value, Exception):
            raise value
        if value is None:
            return None
        return FetchedQuote(symbol=symbol, price=Decimal(value), change_percent=Decimal("0.5"))


@pytest.fixture
def session_factory(tmp_path):
    engine = make_engine(f"sqlite:///{(tmp_path / 'marketwatch-test.db').as_posix()}")
    create_schema(engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    engine.dispose()


@pytest.fixture
def identity_repo(session_factory):
    return SqlIdentityRepository(session_factory)


@pytest.fixture
def portfolio_repo(session_factory):
    return SqlPortfolioRepository(session_factory)


@pytest.fixture
def market_repo(session_factory):
    return SqlMarketDataRepository(session_factory)


@pytest.fixture
def alert_repo(session_factory):
    return SqlAlertRepository(session_factory)


@pytest.fixture
def audit_repo(session_factory):
    return SqlAuditRepository(session_factory)


@pytest.fixture
def message_repo(session_factory):
    return SqlMessageRepository(session_factory)


@pytest.fixture
def advisor_repo(session_factory):
    return SqlAdvisorRepository(session_factory)


@pytest.fixture
def stock_symbol_repo(session_factory):
    return SqlStockSymbolRepository(session_factory)


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def limiter(clock):
    return FixedIntervalRateLimiter(interval_sec=12.0, clock=clock, sleep=clock.sleep)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        data_dir=tmp_path,
        database_url=f"sqlite:///{(tmp_path / 'marketwatch-test.db').as_posix()}",
        alpha_vantage_api_key="test-key",
    )


@pytest.fixture
def make_provider(clock):
    def _make(script: dict, *, timed: bool = True) -> FakeQuoteProvider:
        return FakeQuoteProvider(script, clock=clock if timed else None)

    return _make
