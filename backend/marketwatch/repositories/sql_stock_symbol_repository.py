from __future__ import annotations

import datetime as dt
from uuid import uuid4

from sqlalchemy import BigInteger, Boolean, DateTime, String, func, or_, select
from sqlalchemy.orm import Mapped, mapped_column

from marketwatch.db_base import Base
from marketwatch.domain.quote import normalize_symbol
from marketwatch.domain.stock_symbol import StockSymbol
from marketwatch.repositories.sql_helpers import SessionFactory, resolve_session_factory
from marketwatch.repositories.stock_symbol_repository import StockSymbolRepository


class StockSymbolRow(Base):
    __tablename__ = "stock_symbols"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    symbol: Mapped[str] = mapped_column(String(32), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    exchange: Mapped[str | None] = mapped_column(String(64), nullable=True)
    sector: Mapped[str | None] = mapped_column(String(128), nullable=True)
    industry: Mapped[str | None] = mapped_column(String(128), nullable=True)
    market_cap: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    is_popular: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class SqlStockSymbolRepository(StockSymbolRepository):
    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session = resolve_session_factory(session_factory)

    def upsert(self, stock: StockSymbol) -> StockSymbol:
        with self._session() as s:
            row = self._find(s, stock.symbol)
            if row is None:
                row = StockSymbolRow(id=str(uuid4()), symbol=normalize_symbol(stock.symbol))
                s.add(row)

            row.name = stock.name
            row.exchange = stock.exchange
            row.sector = stock.sector
            row.industry = stock.industry
            row.market_cap = stock.market_cap
            row.is_popular = stock.is_popular
            s.commit()
            s.refresh(row)
            return self._to_domain(row)

    def get(self, symbol: str) -> StockSymbol:
        with self._session() as s:
            row = self._find(s, symbol)
            if row is None:
                raise KeyError(f"unknown symbol '{symbol}'")
            return self._to_domain(row)

    def delete(self, symbol: str) -> bool:
        with self._session() as s:
            row = self._find(s, symbol)
            if row is None:
                return False
            s.delete(row)
            s.commit()
            return True

    def search(self, *, query: str | None = None, limit: int = 50) -> list[StockSymbol]:
        stmt = select(StockSymbolRow)
        q = (query or "").strip()
        if q:
            stmt = stmt.where(or_(
                StockSymbolRow.symbol.icontains(q, autoescape=True),
                StockSymbolRow.name.icontains(q, autoescape=True),
                StockSymbolRow.sector.icontains(q, autoescape=True),
            ))
        stmt = stmt.order_by(StockSymbolRow.is_popular.desc(), StockSymbolRow.symbol).limit(limit)

        with self._session() as s:
            return [self._to_domain(r) for r in s.execute(stmt).scalars().all()]

    @staticmethod
    def _find(s, symbol: str) -> StockSymbolRow | None:
        return s.execute(
            select(StockSymbolRow).where(StockSymbolRow.symbol == normalize_symbol(symbol))
        ).scalars().first()

    @staticmethod
    def _to_domain(r: StockSymbolRow) -> StockSymbol:
        return StockSymbol(
            symbol=r.symbol,
            name=r.name,
            exchange=r.exchange,
            sector=r.sector,
            industry=r.industry,
            market_cap=r.market_cap,
            is_popular=bool(r.is_popular),
        )
