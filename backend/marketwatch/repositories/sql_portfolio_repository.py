from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Iterable
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Numeric, String, Text, select
from sqlalchemy.orm import Mapped, mapped_column

from marketwatch.db_base import Base
from marketwatch.domain.portfolio import Portfolio
from marketwatch.domain.quote import normalize_symbol
from marketwatch.domain.transaction import Transaction, TransactionType
from marketwatch.repositories.portfolio_repository import PortfolioRepository
from marketwatch.repositories.sql_helpers import SessionFactory, as_utc, resolve_session_factory


class PortfolioRow(Base):
    __tablename__ = "portfolios"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    owner_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class TransactionRow(Base):
    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    portfolio_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("portfolios.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    symbol: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(15, 4), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    type: Mapped[str] = mapped_column(String(4), nullable=False)
    transaction_date: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class SqlPortfolioRepository(PortfolioRepository):

    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session = resolve_session_factory(session_factory)

    # -------- portfolios --------

    def add(self, portfolio: Portfolio) -> None:
        with self._session() as s:
            if s.get(PortfolioRow, str(portfolio.id)) is not None:
                raise ValueError(f"portfolio id '{portfolio.id}' already exists")

            s.add(PortfolioRow(
                id=str(portfolio.id),
                owner_id=portfolio.owner_id,
                name=portfolio.name,
                description=portfolio.description,
                created_at=portfolio.created_at,
            ))
            s.commit()

    def get(self, portfolio_id: UUID) -> Portfolio:
        with self._session() as s:
            row = s.get(PortfolioRow, str(portfolio_id))
            if row is None:
                raise KeyError(f"unknown portfolio_id '{portfolio_id}'")
            return self._portfolio_to_domain(row)

    def list_for_owner(self, *, owner_id: str) -> list[Portfolio]:
        stmt = (
            select(PortfolioRow)
            .where(PortfolioRow.owner_id == owner_id)
            .order_by(PortfolioRow.created_at, PortfolioRow.id)
        )
        with self._session() as s:
            return [self._portfolio_to_domain(r) for r in s.execute(stmt).scalars().all()]

    # -------- transactions --------

    def add_transaction(self, tx: Transaction) -> None:
        with self._session() as s:
            if s.get(PortfolioRow, str(tx.portfolio_id)) is None:
                raise KeyError(f"unknown portfolio_id '{tx.portfolio_id}'")
            if s.get(TransactionRow, str(tx.id)) is not None:
                raise ValueError(f"transaction {tx.id} already exists")

            s.add(TransactionRow(
                id=str(tx.id),
                portfolio_id=str(tx.portfolio_id),
                symbol=normalize_symbol(tx.symbol),
                quantity=tx.quantity,
                price=tx.price,
                type=tx.type.value,
                transaction_date=tx.transaction_date,
                notes=tx.notes,
            ))
            s.commit()

    def list_transactions(self, *, portfolio_id: UUID) -> list[Transaction]:
        stmt = (
            select(TransactionRow)
            .where(TransactionRow.portfolio_id == str(portfolio_id))
            .order_by(TransactionRow.transaction_date, TransactionRow.id)
        )
        with self._session() as s:
            return [self._tx_to_domain(r) for r in s.execute(stmt).scalars().all()]

    def distinct_symbols(self, *, portfolio_ids: Iterable[UUID]) -> list[str]:
        ids = [str(p) for p in portfolio_ids]
        if not ids:
            return []

        stmt = (
            select(TransactionRow.symbol)
            .where(TransactionRow.portfolio_id.in_(ids))
            .order_by(TransactionRow.transaction_date, TransactionRow.id)
        )
        with self._session() as s:
            symbols = [normalize_symbol(sym) for sym in s.execute(stmt).scalars().all()]

        # dedupe, keep first-seen order
        return list(dict.fromkeys(symbols))

    def holders_of(self, *, symbols: Iterable[str]) -> dict[str, list[str]]:
        wanted = sorted({normalize_symbol(x) for x in symbols})
        if not wanted:
            return {}

        stmt = (
            select(TransactionRow.symbol, PortfolioRow.owner_id)
            .join(PortfolioRow, PortfolioRow.id == TransactionRow.portfolio_id)
            .where(TransactionRow.symbol.in_(wanted))
            .distinct()
            .order_by(TransactionRow.symbol, PortfolioRow.owner_id)
        )
        out: dict[str, list[str]] = {}
        with self._session() as s:
            for sym, owner_id in s.execute(stmt).all():
                out.setdefault(sym, []).append(owner_id)
        return out

    # -------- mapping --------

    @staticmethod
    def _portfolio_to_domain(r: PortfolioRow) -> Portfolio:
        return Portfolio(
            id=UUID(r.id),
            owner_id=r.owner_id,
            name=r.name,
            description=r.description,
            created_at=as_utc(r.created_at),
        )

    @staticmethod
    def _tx_to_domain(r: TransactionRow) -> Transaction:
        return Transaction(
            id=UUID(r.id),
            portfolio_id=UUID(r.portfolio_id),
            symbol=r.symbol,
            quantity=Decimal(r.quantity),
            price=Decimal(r.price),
            type=TransactionType(r.type),
            transaction_date=as_utc(r.transaction_date),
            notes=r.notes,
        )
