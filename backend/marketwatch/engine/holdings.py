from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping

from marketwatch.domain.transaction import Transaction, TransactionType


_ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class Holding:
    symbol: str
    quantity: Decimal
    avg_price: Decimal
    current_price: Decimal
    priced: bool            # False when no quote exists and avg_price stands in

    @property
    def cost_basis(self) -> Decimal:
        return self.quantity * self.avg_price

    @property
    def market_value(self) -> Decimal:
        return self.quantity * self.current_price

    @property
    def pnl(self) -> Decimal:
        return self.market_value - self.cost_basis


@dataclass(frozen=True, slots=True)
class HoldingsSummary:
    total_value: Decimal
    total_cost: Decimal
    total_pnl: Decimal
    total_pnl_percent: Decimal


def compute_holdings(
    *,
    transactions: Iterable[Transaction],
    prices: Mapping[str, Decimal],
) -> list[Holding]:
    """
    Aggregate a ledger into open positions, sorted by symbol.

    BUY adds quantity and quantity*price to cost, SELL removes both.
    Positions with quantity <= 0 are dropped.
    """
    qty: dict[str, Decimal] = {}
    cost: dict[str, Decimal] = {}

    for t in transactions:
        sym = t.symbol.upper()
        qty.setdefault(sym, _ZERO)
        cost.setdefault(sym, _ZERO)

        if t.type == TransactionType.BUY:
            qty[sym] += t.quantity
            cost[sym] += t.quantity * t.price
        else:
            qty[sym] -= t.quantity
            cost[sym] -= t.quantity * t.price

    out: list[Holding] = []
    for sym in sorted(qty):
        q = qty[sym]
        if q <= 0:
            continue
        avg = cost[sym] / q
        current = prices.get(sym)
        out.append(Holding(
            symbol=sym,
            quantity=q,
            avg_price=avg,
            current_price=current if current is not None else avg,
            priced=current is not None,
        ))
    return out


def summarize_holdings(holdings: Iterable[Holding]) -> HoldingsSummary:
    items = list(holdings)
    total_value = sum((h.market_value for h in items), _ZERO)
    total_cost = sum((h.cost_basis for h in items), _ZERO)
    total_pnl = total_value - total_cost
    pnl_percent = (total_pnl / total_cost * Decimal("100")) if total_cost > 0 else _ZERO
    return HoldingsSummary(
        total_value=total_value,
        total_cost=total_cost,
        total_pnl=total_pnl,
        total_pnl_percent=pnl_percent,
    )
