from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4


class TransactionType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True, slots=True)
class Transaction:
    id: UUID
    portfolio_id: UUID
    symbol: str
    quantity: Decimal
    price: Decimal
    type: TransactionType
    transaction_date: dt.datetime
    notes: str | None

    @classmethod
    def create(
        cls,
        *,
        portfolio_id: UUID,
        symbol: str,
        quantity: Decimal,
        price: Decimal,
        type: TransactionType,
        transaction_date: dt.datetime | None = None,
        notes: str | None = None,
        id: UUID | None = None,
    ) -> "Transaction":
        return cls(
            id=id or uuid4(),
            portfolio_id=portfolio_id,
            symbol=symbol.strip().upper(),
            quantity=quantity,
            price=price,
            type=type,
            transaction_date=transaction_date or dt.datetime.now(dt.timezone.utc),
            notes=notes.strip() if isinstance(notes, str) and notes.strip() else None,
        )

    def __post_init__(self) -> None:
        if not isinstance(self.portfolio_id, UUID):
            raise ValueError("transaction.portfolio_id must be UUID")
        if not self.symbol:
            raise ValueError("transaction.symbol must be non-empty")
        if not isinstance(self.type, TransactionType):
            raise ValueError("transaction.type invalid")
        if self.quantity <= 0:
            raise ValueError("transaction.quantity must be > 0")
        if self.price <= 0:
            raise ValueError("transaction.price must be > 0")
