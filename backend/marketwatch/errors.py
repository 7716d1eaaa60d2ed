from __future__ import annotations


class MarketWatchError(Exception):
    """Base class for errors raised by the market-data refresh job."""


class AuthenticationError(MarketWatchError):
    """Missing or invalid bearer credential. Fatal to the whole invocation."""


class UpstreamFetchError(MarketWatchError):
    """A quote request failed for one symbol (network, HTTP status, body)."""

    def __init__(self, symbol: str, reason: str) -> None:
        super().__init__(f"{symbol}: {reason}")
        self.symbol = symbol
        self.reason = reason


class PersistenceError(MarketWatchError):
    """A store write failed for one symbol on one table."""

    def __init__(self, symbol: str, table: str, reason: str) -> None:
        super().__init__(f"{table} write failed for {symbol}: {reason}")
        self.symbol = symbol
        self.table = table
        self.reason = reason
