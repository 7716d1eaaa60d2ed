from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Union

from marketwatch.domain.quote import FetchedQuote
from marketwatch.errors import UpstreamFetchError
from marketwatch.providers.quote_provider import QuoteProvider
from marketwatch.services.rate_limiter import FixedIntervalRateLimiter


log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class QuoteFetched:
    quote: FetchedQuote

    @property
    def symbol(self) -> str:
        return self.quote.symbol


@dataclass(frozen=True, slots=True)
class QuoteSkipped:
    symbol: str
    reason: str


FetchOutcome = Union[QuoteFetched, QuoteSkipped]


def fetch_quotes(
    symbols: Iterable[str],
    *,
    provider: QuoteProvider,
    limiter: FixedIntervalRateLimiter,
) -> Iterator[FetchOutcome]:
    """
    Lazily fetch one quote per symbol, in input order, one request at a time.

    Never raises for a single symbol: failures come back as QuoteSkipped
    and the batch continues. Symbols are not deduplicated here.
    Once the last symbol is done the limiter is drained, so the batch
    only returns when the next request would be allowed.
    """
    requested = False
    for symbol in symbols:
        limiter.acquire()
        requested = True
        try:
            quote = provider.fetch(symbol=symbol)
        except UpstreamFetchError as e:
            log.warning("Error fetching %s: %s", symbol, e.reason)
            yield QuoteSkipped(symbol=symbol, reason=e.reason)
            continue
        except Exception as e:
            log.exception("Unexpected error fetching %s", symbol)
            yield QuoteSkipped(symbol=symbol, reason=f"unexpected error: {e}")
            continue

        if quote is None:
            # keep the stored price for this symbol
            log.warning("No data available for %s", symbol)
            yield QuoteSkipped(symbol=symbol, reason="no data")
            continue

        log.info("%s: $%s (%s%%)", symbol, quote.price, quote.change_percent)
        yield QuoteFetched(quote=quote)

    if requested:
        waited = limiter.drain()
        if waited:
            log.info("Waited %.1fs after the last request", waited)
