from __future__ import annotations

import datetime as dt
from pydantic import BaseModel


class QuoteOut(BaseModel):
    symbol: str
    price: str
    change_percent: str | None
    updated_at: dt.datetime


class PricePointOut(BaseModel):
    symbol: str
    price: str
    open_price: str | None = None
    high_price: str | None = None
    low_price: str | None = None
    close_price: str | None = None
    volume: int | None = None
    recorded_at: dt.datetime
