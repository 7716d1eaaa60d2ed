from __future__ import annotations

from decimal import Decimal, InvalidOperation
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from marketwatch.api.deps import get_current_user_id, get_market_repo, get_portfolio_repo
from marketwatch.api.schemas.portfolios import (
    HoldingOut, HoldingsOut, HoldingsSummaryOut,
    PortfolioCreate, PortfolioOut,
    TransactionCreate, TransactionOut,
)
from marketwatch.domain.portfolio import Portfolio
from marketwatch.domain.transaction import Transaction, TransactionType
from marketwatch.engine.holdings import compute_holdings, summarize_holdings
from marketwatch.repositories.market_data_repository import MarketDataRepository
from marketwatch.repositories.portfolio_repository import PortfolioRepository


router = APIRouter(prefix="/portfolios", tags=["portfolios"])


def _owned_portfolio(repo: PortfolioRepository, portfolio_id: UUID, user_id: str) -> Portfolio:
    try:
        portfolio = repo.get(portfolio_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="portfolio not found")

    # someone else's portfolio looks the same as a missing one
    if portfolio.owner_id != user_id:
        raise HTTPException(status_code=404, detail="portfolio not found")
    return portfolio


def _portfolio_to_out(p: Portfolio) -> PortfolioOut:
    return PortfolioOut(id=p.id, name=p.name, description=p.description, created_at=p.created_at)


def _tx_to_out(t: Transaction) -> TransactionOut:
    return TransactionOut(
        id=t.id,
        portfolio_id=t.portfolio_id,
        symbol=t.symbol,
        quantity=str(t.quantity),
        price=str(t.price),
        type=t.type.value,
        transaction_date=t.transaction_date,
        notes=t.notes,
    )


@router.get("", response_model=list[PortfolioOut])
def list_portfolios(
    user_id: str = Depends(get_current_user_id),
    repo: PortfolioRepository = Depends(get_portfolio_repo),
):
    return [_portfolio_to_out(p) for p in repo.list_for_owner(owner_id=user_id)]


@router.post("", response_model=PortfolioOut, status_code=201)
def create_portfolio(
    payload: PortfolioCreate,
    user_id: str = Depends(get_current_user_id),
    repo: PortfolioRepository = Depends(get_portfolio_repo),
):
    try:
        p = Portfolio.create(owner_id=user_id, name=payload.name, description=payload.description)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    repo.add(p)
    return _portfolio_to_out(p)


@router.post("/{portfolio_id}/transactions", response_model=TransactionOut, status_code=201)
def create_transaction(
    portfolio_id: UUID,
    payload: TransactionCreate,
    user_id: str = Depends(get_current_user_id),
    repo: PortfolioRepository = Depends(get_portfolio_repo),
):
    p = _owned_portfolio(repo, portfolio_id, user_id)

    # parse decimals
    try:
        tx_type = TransactionType(payload.type.strip().upper())
        qty = Decimal(payload.quantity.strip())
        price = Decimal(payload.price.strip())
    except (ValueError, InvalidOperation) as e:
        raise HTTPException(status_code=422, detail=f"invalid transaction field: {e}")
    if not (qty.is_finite() and price.is_finite()):
        raise HTTPException(status_code=422, detail="quantity and price must be finite numbers")

    try:
        tx = Transaction.create(
            portfolio_id=p.id,
            symbol=payload.symbol,
            quantity=qty,
            price=price,
            type=tx_type,
            transaction_date=payload.transaction_date,
            notes=payload.notes,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    repo.add_transaction(tx)
    return _tx_to_out(tx)


@router.get("/{portfolio_id}/transactions", response_model=list[TransactionOut])
def list_transactions(
    portfolio_id: UUID,
    user_id: str = Depends(get_current_user_id),
    repo: PortfolioRepository = Depends(get_portfolio_repo),
):
    _owned_portfolio(repo, portfolio_id, user_id)
    return [_tx_to_out(t) for t in repo.list_transactions(portfolio_id=portfolio_id)]


@router.get("/{portfolio_id}/holdings", response_model=HoldingsOut)
def portfolio_holdings(
    portfolio_id: UUID,
    user_id: str = Depends(get_current_user_id),
    portfolio_repo: PortfolioRepository = Depends(get_portfolio_repo),
    market_repo: MarketDataRepository = Depends(get_market_repo),
):
    _owned_portfolio(portfolio_repo, portfolio_id, user_id)

    txs = portfolio_repo.list_transactions(portfolio_id=portfolio_id)
    prices = market_repo.current_prices(symbols={t.symbol for t in txs})
    holdings = compute_holdings(transactions=txs, prices=prices)
    summary = summarize_holdings(holdings)

    return HoldingsOut(
        portfolio_id=portfolio_id,
        holdings=[
            HoldingOut(
                symbol=h.symbol,
                quantity=str(h.quantity),
                avg_price=str(h.avg_price),
                current_price=str(h.current_price),
                priced=h.priced,
                cost_basis=str(h.cost_basis),
                market_value=str(h.market_value),
                pnl=str(h.pnl),
            )
            for h in holdings
        ],
        summary=HoldingsSummaryOut(
            total_value=str(summary.total_value),
            total_cost=str(summary.total_cost),
            total_pnl=str(summary.total_pnl),
            total_pnl_percent=str(summary.total_pnl_percent),
        ),
    )
