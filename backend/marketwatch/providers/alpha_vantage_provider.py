from __future__ import annotations

import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from marketwatch.domain.quote import FetchedQuote
from marketwatch.errors import UpstreamFetchError
from marketwatch.settings import DEFAULT_QUOTE_BASE_URL, Settings


log = logging.getLogger(__name__)

_QUOTE_KEY = "Global Quote"
_PRICE_KEY = "05. price"
_CHANGE_KEY = "10. change percent"


class AlphaVantageQuoteProvider:
    source = "Alpha Vantage (Real-time data)"

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str = DEFAULT_QUOTE_BASE_URL,
        timeout_sec: float = 10.0,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout_sec

    @classmethod
    def from_settings(cls, settings: Settings) -> "AlphaVantageQuoteProvider":
        return cls(
            api_key=settings.alpha_vantage_api_key,
            base_url=settings.quote_base_url,
            timeout_sec=settings.request_timeout_sec,
        )

    def fetch(self, *, symbol: str) -> FetchedQuote | None:
        if not self._api_key:
            # no key configured: every symbol degrades to "no data"
            log.warning("ALPHA_VANTAGE_API_KEY is not set; no data for %s", symbol)
            return None

        params = urlencode({"function": "GLOBAL_QUOTE", "symbol": symbol, "apikey": self._api_key})
        url = f"{self._base_url}?{params}"
        log.info("Fetching data for %s...", symbol)

        try:
            req = Request(url, headers={"Accept": "application/json", "User-Agent": "marketwatch/0.1"})
            with urlopen(req, timeout=self._timeout) as resp:
                payload = json.loads(resp.read().decode("utf-8"))
        except HTTPError as e:
            raise UpstreamFetchError(symbol, f"HTTP {e.code}") from e
        except URLError as e:
            raise UpstreamFetchError(symbol, f"network error: {e.reason}") from e
        except TimeoutError as e:
            raise UpstreamFetchError(symbol, "timed out") from e
        except ValueError as e:
            # JSONDecodeError / UnicodeDecodeError
            raise UpstreamFetchError(symbol, f"invalid response body: {e}") from e
        except OSError as e:
            raise UpstreamFetchError(symbol, f"network error: {e}") from e

        return parse_global_quote(symbol, payload)


def parse_global_quote(symbol: str, payload: Any) -> FetchedQuote | None:
    """
    Map a GLOBAL_QUOTE body to a FetchedQuote.
    Missing "Global Quote" object or price field -> None (no data).
    Present but unparsable numbers -> UpstreamFetchError.
    """
    if not isinstance(payload, dict):
        raise UpstreamFetchError(symbol, "response body is not a JSON object")

    quote = payload.get(_QUOTE_KEY)
    if not isinstance(quote, dict) or not quote.get(_PRICE_KEY):
        # throttled responses carry a "Note" / "Information" message instead
        hint = payload.get("Note") or payload.get("Information")
        if hint:
            log.warning("No data available for %s: %s", symbol, hint)
        return None

    try:
        price = Decimal(str(quote[_PRICE_KEY]).strip())
    except InvalidOperation as e:
        raise UpstreamFetchError(symbol, f"invalid price {quote[_PRICE_KEY]!r}") from e

    raw_change = quote.get(_CHANGE_KEY)
    if raw_change is None:
        raise UpstreamFetchError(symbol, "missing change percent")
    try:
        change_percent = Decimal(str(raw_change).strip().rstrip("%").strip())
    except InvalidOperation as e:
        raise UpstreamFetchError(symbol, f"invalid change percent {raw_change!r}") from e

    if not price.is_finite() or not change_percent.is_finite():
        raise UpstreamFetchError(symbol, "non-finite quote values")

    try:
        return FetchedQuote(symbol=symbol, price=price, change_percent=change_percent)
    except ValueError as e:
        raise UpstreamFetchError(symbol, str(e)) from e
