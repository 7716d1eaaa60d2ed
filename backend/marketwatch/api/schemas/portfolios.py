import datetime as dt
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class PortfolioCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None


class PortfolioOut(BaseModel):
    id: UUID
    name: str
    description: Optional[str]
    created_at: dt.datetime


class TransactionCreate(BaseModel):
    symbol: str = Field(min_length=1)
    quantity: str
    price: str
    type: str
    transaction_date: Optional[dt.datetime] = None
    notes: Optional[str] = None


class TransactionOut(BaseModel):
    id: UUID
    portfolio_id: UUID
    symbol: str
    quantity: str
    price: str
    type: str
    transaction_date: dt.datetime
    notes: Optional[str]


class HoldingOut(BaseModel):
    symbol: str
    quantity: str
    avg_price: str
    current_price: str
    priced: bool
    cost_basis: str
    market_value: str
    pnl: str


class HoldingsSummaryOut(BaseModel):
    total_value: str
    total_cost: str
    total_pnl: str
    total_pnl_percent: str


class HoldingsOut(BaseModel):
    portfolio_id: UUID
    holdings: list[HoldingOut]
    summary: HoldingsSummaryOut
