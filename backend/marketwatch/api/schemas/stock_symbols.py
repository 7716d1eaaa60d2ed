from typing import Optional

from pydantic import BaseModel, Field


class StockSymbolIn(BaseModel):
    name: str = Field(min_length=1)
    exchange: Optional[str] = None
    sector: Optional[str] = None
    industry: Optional[str] = None
    market_cap: Optional[int] = None
    is_popular: bool = False


class StockSymbolOut(BaseModel):
    symbol: str
    name: str
    exchange: Optional[str]
    sector: Optional[str]
    industry: Optional[str]
    market_cap: Optional[int]
    is_popular: bool
