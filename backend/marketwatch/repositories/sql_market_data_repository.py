from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Iterable
from uuid import uuid4

from sqlalchemy import BigInteger, DateTime, Integer, Numeric, String, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Mapped, Session, mapped_column

from marketwatch.db_base import Base
from marketwatch.domain.price_point import HistoricalPricePoint
from marketwatch.domain.quote import Quote, normalize_symbol
from marketwatch.repositories.market_data_repository import MarketDataRepository
from marketwatch.repositories.sql_helpers import SessionFactory, as_utc, resolve_session_factory


class QuoteRow(Base):
    __tablename__ = "market_data"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    symbol: Mapped[str] = mapped_column(String(32), unique=True, index=True, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(24, 10), nullable=False)
    change_percent: Mapped[Decimal | None] = mapped_column(Numeric(12, 4), nullable=True)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class HistoricalPriceRow(Base):
    __tablename__ = "historical_prices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    symbol: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(24, 10), nullable=False)
    volume: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    open_price: Mapped[Decimal | None] = mapped_column(Numeric(24, 10), nullable=True)
    high_price: Mapped[Decimal | None] = mapped_column(Numeric(24, 10), nullable=True)
    low_price: Mapped[Decimal | None] = mapped_column(Numeric(24, 10), nullable=True)
    close_price: Mapped[Decimal | None] = mapped_column(Numeric(24, 10), nullable=True)
    recorded_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)


class SqlMarketDataRepository(MarketDataRepository):
    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session = resolve_session_factory(session_factory)

    # -------- quotes --------

    def upsert_quote(self, quote: Quote) -> None:
        sym = normalize_symbol(quote.symbol)
        with self._session() as s:
            dialect = s.get_bind().dialect.name
            if dialect in ("postgresql", "sqlite"):
                self._upsert_on_conflict(s, dialect, sym, quote)
            else:
                self._upsert_select_then_write(s, sym, quote)
            s.commit()

    @staticmethod
    def _upsert_on_conflict(s: Session, dialect: str, sym: str, quote: Quote) -> None:
        insert = pg_insert if dialect == "postgresql" else sqlite_insert
        stmt = insert(QuoteRow).values(
            id=str(uuid4()),
            symbol=sym,
            price=quote.price,
            change_percent=quote.change_percent,
            updated_at=quote.updated_at,
        )
        # whole-row replace, keyed on symbol
        stmt = stmt.on_conflict_do_update(
            index_elements=["symbol"],
            set_={
                "price": stmt.excluded.price,
                "change_percent": stmt.excluded.change_percent,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        s.execute(stmt)

    @staticmethod
    def _upsert_select_then_write(s: Session, sym: str, quote: Quote) -> None:
        row = s.execute(select(QuoteRow).where(QuoteRow.symbol == sym)).scalars().first()
        if row is None:
            s.add(QuoteRow(
                id=str(uuid4()),
                symbol=sym,
                price=quote.price,
                change_percent=quote.change_percent,
                updated_at=quote.updated_at,
            ))
            return
        row.price = quote.price
        row.change_percent = quote.change_percent
        row.updated_at = quote.updated_at

    def get_quote(self, *, symbol: str) -> Quote | None:
        stmt = select(QuoteRow).where(QuoteRow.symbol == normalize_symbol(symbol))
        with self._session() as s:
            row = s.execute(stmt).scalars().first()
            return None if row is None else self._quote_to_domain(row)

    def list_quotes(self, *, symbols: Iterable[str] | None = None) -> list[Quote]:
        stmt = select(QuoteRow).order_by(QuoteRow.symbol)
        if symbols is not None:
            wanted = sorted({normalize_symbol(x) for x in symbols})
            if not wanted:
                return []
            stmt = stmt.where(QuoteRow.symbol.in_(wanted))

        with self._session() as s:
            rows = s.execute(stmt).scalars().all()
            return [self._quote_to_domain(r) for r in rows]

    def current_prices(self, *, symbols: Iterable[str]) -> dict[str, Decimal]:
        wanted = sorted({normalize_symbol(x) for x in symbols})
        if not wanted:
            return {}

        # single batched read for the whole symbol set
        stmt = select(QuoteRow.symbol, QuoteRow.price).where(QuoteRow.symbol.in_(wanted))
        with self._session() as s:
            return {sym: Decimal(price) for sym, price in s.execute(stmt).all()}

    # -------- history --------

    def add_history_point(self, point: HistoricalPricePoint) -> None:
        row = HistoricalPriceRow(
            symbol=normalize_symbol(point.symbol),
            price=point.price,
            volume=point.volume,
            open_price=point.open_price,
            high_price=point.high_price,
            low_price=point.low_price,
            close_price=point.close_price,
            recorded_at=point.recorded_at,
        )
        with self._session() as s:
            s.add(row)
            s.commit()

    def list_history(self, *, symbol: str, limit: int | None = None) -> list[HistoricalPricePoint]:
        stmt = (
            select(HistoricalPriceRow)
            .where(HistoricalPriceRow.symbol == normalize_symbol(symbol))
            .order_by(HistoricalPriceRow.recorded_at.desc(), HistoricalPriceRow.id.desc())
        )
        if limit is not None:
            if limit <= 0:
                raise ValueError("limit must be > 0")
            stmt = stmt.limit(limit)

        with self._session() as s:
            rows = s.execute(stmt).scalars().all()
            return [self._point_to_domain(r) for r in rows]

    # -------- mapping --------

    @staticmethod
    def _quote_to_domain(r: QuoteRow) -> Quote:
        return Quote(
            symbol=r.symbol,
            price=Decimal(r.price),
            change_percent=None if r.change_percent is None else Decimal(r.change_percent),
            updated_at=as_utc(r.updated_at),
        )

    @staticmethod
    def _point_to_domain(r: HistoricalPriceRow) -> HistoricalPricePoint:
        def dec(v: Decimal | None) -> Decimal | None:
            return None if v is None else Decimal(v)

        return HistoricalPricePoint(
            symbol=r.symbol,
            price=Decimal(r.price),
            close_price=dec(r.close_price),
            recorded_at=as_utc(r.recorded_at),
            open_price=dec(r.open_price),
            high_price=dec(r.high_price),
            low_price=dec(r.low_price),
            volume=r.volume,
        )
