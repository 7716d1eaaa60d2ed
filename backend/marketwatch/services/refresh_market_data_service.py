from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Callable

from marketwatch.domain.audit import AuditAction, AuditEntry
from marketwatch.errors import AuthenticationError, PersistenceError
from marketwatch.providers.quote_provider import QuoteProvider
from marketwatch.repositories.alert_repository import AlertRepository
from marketwatch.repositories.audit_repository import AuditRepository
from marketwatch.repositories.identity_repository import IdentityRepository
from marketwatch.repositories.market_data_repository import MarketDataRepository
from marketwatch.repositories.portfolio_repository import PortfolioRepository
from marketwatch.services.alert_evaluator import evaluate_price_alert
from marketwatch.services.price_writer import write_quote
from marketwatch.services.quote_fetcher import QuoteFetched, fetch_quotes
from marketwatch.services.rate_limiter import FixedIntervalRateLimiter
from marketwatch.settings import Settings


log = logging.getLogger(__name__)

RESOURCE_TYPE = "market_data"

NOTE_ALL_UPDATED = "All symbols updated successfully"
NOTE_PARTIAL = "Some symbols could not be updated due to API availability"
NOTE_NO_SYMBOLS = "No symbols to update"


class SymbolStatus(str, Enum):
    UPDATED = "updated"
    SKIPPED = "skipped"      # provider had no usable data / request failed
    FAILED = "failed"        # store write failed


@dataclass(frozen=True, slots=True)
class SymbolOutcome:
    symbol: str
    status: SymbolStatus
    reason: str | None = None
    price: Decimal | None = None


@dataclass
class RefreshReport:
    user_id: str
    symbols: list[str]
    source: str
    outcomes: list[SymbolOutcome] = field(default_factory=list)
    notifications_created: int = 0

    @property
    def updated(self) -> int:
        return sum(1 for o in self.outcomes if o.status == SymbolStatus.UPDATED)

    @property
    def not_updated(self) -> list[str]:
        return [o.symbol for o in self.outcomes if o.status != SymbolStatus.UPDATED]

    @property
    def note(self) -> str:
        if not self.symbols:
            return NOTE_NO_SYMBOLS
        if self.updated < len(self.symbols):
            return NOTE_PARTIAL
        return NOTE_ALL_UPDATED


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def parse_bearer(authorization: str | None) -> str:
    if not authorization or not authorization.strip():
        raise AuthenticationError("No authorization header")
    value = authorization.strip()
    scheme, _, rest = value.partition(" ")
    if scheme.lower() == "bearer":
        value = rest.strip()
    if not value:
        raise AuthenticationError("Unauthorized")
    return value


class MarketDataRefreshJob:
    """
    Refresh current quotes for every symbol the caller trades, keep a price
    history, raise threshold alerts and leave one audit entry per run.
    """

    def __init__(
        self,
        *,
        settings: Settings,
        identity_repo: IdentityRepository,
        portfolio_repo: PortfolioRepository,
        market_repo: MarketDataRepository,
        alert_repo: AlertRepository,
        audit_repo: AuditRepository,
        provider: QuoteProvider,
        limiter: FixedIntervalRateLimiter | None = None,
        now: Callable[[], dt.datetime] = _utc_now,
    ) -> None:
        self._settings = settings
        self._identity = identity_repo
        self._portfolios = portfolio_repo
        self._market = market_repo
        self._alerts = alert_repo
        self._audit = audit_repo
        self._provider = provider
        self._limiter = limiter or FixedIntervalRateLimiter(interval_sec=settings.request_interval_sec)
        self._now = now

    # -------- entry points --------

    def authenticate(self, authorization: str | None) -> str:
        token = parse_bearer(authorization)
        user_id = self._identity.resolve_user(token, now=self._now())
        if user_id is None:
            raise AuthenticationError("Unauthorized")
        return user_id

    def refresh(self, authorization: str | None) -> RefreshReport:
        user_id = self.authenticate(authorization)
        return self.run(user_id)

    def run(self, user_id: str) -> RefreshReport:
        log.info("Refreshing market data for user: %s", user_id)
        try:
            report = self._run(user_id)
        except Exception as e:
            log.exception("Error in refresh-market-data for user %s", user_id)
            self._audit_failure(user_id, e)
            raise

        self._audit.add(AuditEntry.create(
            user_id=user_id,
            action=AuditAction.REFRESH_MARKET_DATA,
            resource_type=RESOURCE_TYPE,
            status_code=200,
            details={
                "symbols": report.symbols,
                "count": report.updated,
                "skipped": report.not_updated,
                "notifications": report.notifications_created,
            },
            created_at=self._now(),
        ))
        log.info(
            "Market data refresh done for %s: %d/%d updated, %d alert(s)",
            user_id, report.updated, len(report.symbols), report.notifications_created,
        )
        return report

    # -------- steps --------

    def _run(self, user_id: str) -> RefreshReport:
        portfolios = self._portfolios.list_for_owner(owner_id=user_id)
        symbols = self._portfolios.distinct_symbols(portfolio_ids=[p.id for p in portfolios]) if portfolios else []

        report = RefreshReport(user_id=user_id, symbols=symbols, source=self._provider.source)
        if not symbols:
            log.info("No symbols to update for user %s", user_id)
            return report

        log.info("Updating prices for symbols: %s", ", ".join(symbols))

        current_prices = self._market.current_prices(symbols=symbols)
        holders = self._portfolios.holders_of(symbols=symbols)

        for outcome in fetch_quotes(symbols, provider=self._provider, limiter=self._limiter):
            if not isinstance(outcome, QuoteFetched):
                report.outcomes.append(SymbolOutcome(outcome.symbol, SymbolStatus.SKIPPED, outcome.reason))
                continue

            report.outcomes.append(self._persist(outcome, current_prices, holders.get(outcome.symbol) or [user_id], report))

        return report

    def _persist(
        self,
        outcome: QuoteFetched,
        current_prices: dict[str, Decimal],
        holder_ids: list[str],
        report: RefreshReport,
    ) -> SymbolOutcome:
        now = self._now()
        try:
            written = write_quote(
                fetched=outcome.quote,
                previous_price=current_prices.get(outcome.symbol),
                market_repo=self._market,
                now=now,
            )
        except PersistenceError as e:
            log.error("%s", e)
            return SymbolOutcome(outcome.symbol, SymbolStatus.FAILED, e.reason)

        for holder_id in holder_ids:
            try:
                created = evaluate_price_alert(
                    user_id=holder_id,
                    symbol=written.quote.symbol,
                    old_price=written.old_price,
                    new_price=written.quote.price,
                    alert_repo=self._alerts,
                    now=now,
                )
            except PersistenceError as e:
                log.error("%s (user %s)", e, holder_id)
                continue
            if created is not None:
                report.notifications_created += 1

        return SymbolOutcome(outcome.symbol, SymbolStatus.UPDATED, price=written.quote.price)

    def _audit_failure(self, user_id: str, error: Exception) -> None:
        try:
            self._audit.add(AuditEntry.create(
                user_id=user_id,
                action=AuditAction.REFRESH_MARKET_DATA,
                resource_type=RESOURCE_TYPE,
                status_code=500,
                details={"error": str(error)},
                created_at=self._now(),
            ))
        except Exception:
            log.exception("Could not write failure audit entry for user %s", user_id)
