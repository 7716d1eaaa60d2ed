from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from marketwatch.domain.price_point import HistoricalPricePoint
from marketwatch.domain.quote import FetchedQuote, Quote
from marketwatch.errors import PersistenceError
from marketwatch.repositories.market_data_repository import MarketDataRepository


log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PriceWrite:
    quote: Quote
    old_price: Decimal
    history_recorded: bool


def write_quote(
    *,
    fetched: FetchedQuote,
    previous_price: Decimal | None,
    market_repo: MarketDataRepository,
    now: dt.datetime,
) -> PriceWrite:
    """
    Persist one fetched quote as the current price plus one history point.

    - first observation (no previous price): old = new
    - quote upsert failure -> PersistenceError (nothing else written)
    - history insert failure is logged; the quote stays updated
    """
    quote = Quote.from_fetched(fetched, updated_at=now)
    old_price = previous_price if previous_price is not None else quote.price

    try:
        market_repo.upsert_quote(quote)
    except SQLAlchemyError as e:
        raise PersistenceError(quote.symbol, "market_data", str(e)) from e

    history_recorded = True
    try:
        market_repo.add_history_point(
            HistoricalPricePoint.from_price(symbol=quote.symbol, price=quote.price, recorded_at=now)
        )
    except SQLAlchemyError as e:
        history_recorded = False
        log.error("%s", PersistenceError(quote.symbol, "historical_prices", str(e)))

    return PriceWrite(quote=quote, old_price=old_price, history_recorded=history_recorded)
