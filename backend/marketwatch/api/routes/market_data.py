from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from marketwatch.api.deps import get_current_user_id, get_market_repo
from marketwatch.api.schemas.market_data import PricePointOut, QuoteOut
from marketwatch.domain.price_point import HistoricalPricePoint
from marketwatch.domain.quote import Quote
from marketwatch.repositories.market_data_repository import MarketDataRepository


router = APIRouter(prefix="/market-data", tags=["market-data"])


def _quote_out(q: Quote) -> QuoteOut:
    return QuoteOut(
        symbol=q.symbol,
        price=str(q.price),
        change_percent=None if q.change_percent is None else str(q.change_percent),
        updated_at=q.updated_at,
    )


def _point_out(p: HistoricalPricePoint) -> PricePointOut:
    def s(v) -> str | None:
        return None if v is None else str(v)

    return PricePointOut(
        symbol=p.symbol,
        price=str(p.price),
        open_price=s(p.open_price),
        high_price=s(p.high_price),
        low_price=s(p.low_price),
        close_price=s(p.close_price),
        volume=p.volume,
        recorded_at=p.recorded_at,
    )


@router.get("", response_model=list[QuoteOut])
def list_quotes(
    symbol: list[str] | None = Query(default=None),
    _user_id: str = Depends(get_current_user_id),
    repo: MarketDataRepository = Depends(get_market_repo),
):
    return [_quote_out(q) for q in repo.list_quotes(symbols=symbol)]


@router.get("/{symbol}/history", response_model=list[PricePointOut])
def price_history(
    symbol: str,
    limit: int = Query(default=100, ge=1, le=5000),
    _user_id: str = Depends(get_current_user_id),
    repo: MarketDataRepository = Depends(get_market_repo),
):
    if not symbol.strip():
        raise HTTPException(status_code=422, detail="symbol cannot be empty")
    return [_point_out(p) for p in repo.list_history(symbol=symbol, limit=limit)]
