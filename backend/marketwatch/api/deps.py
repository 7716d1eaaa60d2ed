from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header

from marketwatch.errors import AuthenticationError
from marketwatch.providers.alpha_vantage_provider import AlphaVantageQuoteProvider
from marketwatch.repositories.identity_repository import IdentityRepository
from marketwatch.repositories.sql_advisor_repository import SqlAdvisorRepository
from marketwatch.repositories.sql_alert_repository import SqlAlertRepository
from marketwatch.repositories.sql_audit_repository import SqlAuditRepository
from marketwatch.repositories.sql_identity_repository import SqlIdentityRepository
from marketwatch.repositories.sql_market_data_repository import SqlMarketDataRepository
from marketwatch.repositories.sql_message_repository import SqlMessageRepository
from marketwatch.repositories.sql_portfolio_repository import SqlPortfolioRepository
from marketwatch.repositories.sql_stock_symbol_repository import SqlStockSymbolRepository
from marketwatch.services.rate_limiter import FixedIntervalRateLimiter
from marketwatch.services.refresh_market_data_service import MarketDataRefreshJob, parse_bearer
from marketwatch.settings import get_settings


@lru_cache
def get_identity_repo() -> SqlIdentityRepository:
    return SqlIdentityRepository()


@lru_cache
def get_portfolio_repo() -> SqlPortfolioRepository:
    return SqlPortfolioRepository()


@lru_cache
def get_market_repo() -> SqlMarketDataRepository:
    return SqlMarketDataRepository()


@lru_cache
def get_alert_repo() -> SqlAlertRepository:
    return SqlAlertRepository()


@lru_cache
def get_audit_repo() -> SqlAuditRepository:
    return SqlAuditRepository()


@lru_cache
def get_message_repo() -> SqlMessageRepository:
    return SqlMessageRepository()


@lru_cache
def get_advisor_repo() -> SqlAdvisorRepository:
    return SqlAdvisorRepository()


@lru_cache
def get_stock_symbol_repo() -> SqlStockSymbolRepository:
    return SqlStockSymbolRepository()


@lru_cache
def get_rate_limiter() -> FixedIntervalRateLimiter:
    # shared by every run in this process
    return FixedIntervalRateLimiter(interval_sec=get_settings().request_interval_sec)


@lru_cache
def get_refresh_job() -> MarketDataRefreshJob:
    settings = get_settings()
    return MarketDataRefreshJob(
        settings=settings,
        identity_repo=get_identity_repo(),
        portfolio_repo=get_portfolio_repo(),
        market_repo=get_market_repo(),
        alert_repo=get_alert_repo(),
        audit_repo=get_audit_repo(),
        provider=AlphaVantageQuoteProvider.from_settings(settings),
        limiter=get_rate_limiter(),
    )


def get_current_user_id(
    authorization: str | None = Header(default=None),
    identity: IdentityRepository = Depends(get_identity_repo),
) -> str:
    user_id = identity.resolve_user(parse_bearer(authorization))
    if user_id is None:
        raise AuthenticationError("Unauthorized")
    return user_id
