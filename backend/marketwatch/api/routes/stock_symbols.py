from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from marketwatch.api.deps import get_current_user_id, get_identity_repo, get_stock_symbol_repo
from marketwatch.api.schemas.stock_symbols import StockSymbolIn, StockSymbolOut
from marketwatch.domain.identity import AppRole
from marketwatch.domain.stock_symbol import StockSymbol
from marketwatch.repositories.identity_repository import IdentityRepository
from marketwatch.repositories.stock_symbol_repository import StockSymbolRepository


router = APIRouter(prefix="/stock-symbols", tags=["market-data"])


def _out(s: StockSymbol) -> StockSymbolOut:
    return StockSymbolOut(
        symbol=s.symbol,
        name=s.name,
        exchange=s.exchange,
        sector=s.sector,
        industry=s.industry,
        market_cap=s.market_cap,
        is_popular=s.is_popular,
    )


@router.get("", response_model=list[StockSymbolOut])
def search_symbols(
    q: str | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=500),
    _user_id: str = Depends(get_current_user_id),
    repo: StockSymbolRepository = Depends(get_stock_symbol_repo),
):
    return [_out(s) for s in repo.search(query=q, limit=limit)]


@router.put("/{symbol}", response_model=StockSymbolOut)
def upsert_symbol(
    symbol: str,
    payload: StockSymbolIn,
    user_id: str = Depends(get_current_user_id),
    identity: IdentityRepository = Depends(get_identity_repo),
    repo: StockSymbolRepository = Depends(get_stock_symbol_repo),
):
    if not identity.has_role(user_id, AppRole.ADMIN):
        raise HTTPException(status_code=403, detail="admin role required")

    try:
        stock = StockSymbol.create(symbol=symbol, **payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return _out(repo.upsert(stock))


@router.delete("/{symbol}", status_code=204)
def delete_symbol(
    symbol: str,
    user_id: str = Depends(get_current_user_id),
    identity: IdentityRepository = Depends(get_identity_repo),
    repo: StockSymbolRepository = Depends(get_stock_symbol_repo),
):
    if not identity.has_role(user_id, AppRole.ADMIN):
        raise HTTPException(status_code=403, detail="admin role required")
    if not repo.delete(symbol):
        raise HTTPException(status_code=404, detail="symbol not found")
