from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal


def normalize_symbol(symbol: str) -> str:
    return symbol.strip().upper()


@dataclass(frozen=True, slots=True)
class FetchedQuote:
    """A quote as returned by the provider, before it is persisted."""
    symbol: str
    price: Decimal
    change_percent: Decimal

    def __post_init__(self) -> None:
        if not self.symbol or not self.symbol.strip():
            raise ValueError("quote.symbol must be non-empty")
        if not isinstance(self.price, Decimal):
            raise ValueError("quote.price must be a Decimal")
        if not isinstance(self.change_percent, Decimal):
            raise ValueError("quote.change_percent must be a Decimal")
        if self.price < 0:
            raise ValueError("quote.price must be >= 0")


@dataclass(frozen=True, slots=True)
class Quote:
    """Current price for a symbol. One row per symbol."""
    symbol: str
    price: Decimal
    change_percent: Decimal | None
    updated_at: dt.datetime    # UTC timestamp

    @classmethod
    def from_fetched(cls, fetched: FetchedQuote, *, updated_at: dt.datetime) -> "Quote":
        return cls(
            symbol=normalize_symbol(fetched.symbol),
            price=fetched.price,
            change_percent=fetched.change_percent,
            updated_at=updated_at,
        )

    def __post_init__(self) -> None:
        if not self.symbol or not self.symbol.strip():
            raise ValueError("quote.symbol must be non-empty")
        if not isinstance(self.price, Decimal):
            raise ValueError("quote.price must be a Decimal")
        if self.price < 0:
            raise ValueError("quote.price must be >= 0")
        if not isinstance(self.updated_at, dt.datetime):
            raise ValueError("quote.updated_at must be a datetime")
        if self.updated_at.tzinfo is None:
            raise ValueError("quote.updated_at must be timezone-aware (UTC)")
