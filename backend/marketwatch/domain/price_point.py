from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class HistoricalPricePoint:
    symbol: str
    price: Decimal
    close_price: Decimal | None
    recorded_at: dt.datetime   # UTC timestamp
    open_price: Decimal | None = None
    high_price: Decimal | None = None
    low_price: Decimal | None = None
    volume: int | None = None

    @classmethod
    def from_price(cls, *, symbol: str, price: Decimal, recorded_at: dt.datetime) -> "HistoricalPricePoint":
        # the quote feed has no OHLC: close duplicates price for charting
        return cls(
            symbol=symbol.strip().upper(),
            price=price,
            close_price=price,
            recorded_at=recorded_at,
        )

    def __post_init__(self) -> None:
        if not self.symbol or not self.symbol.strip():
            raise ValueError("price_point.symbol must be non-empty")
        if not isinstance(self.price, Decimal):
            raise ValueError("price_point.price must be a Decimal")
        if not isinstance(self.recorded_at, dt.datetime):
            raise ValueError("price_point.recorded_at must be a datetime")
        if self.recorded_at.tzinfo is None:
            raise ValueError("price_point.recorded_at must be timezone-aware (UTC)")
