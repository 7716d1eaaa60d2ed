from __future__ import annotations

import datetime as dt
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, or_, select
from sqlalchemy.orm import Mapped, mapped_column

from marketwatch.db_base import Base
from marketwatch.domain.advisor import AdvisorClientLink
from marketwatch.repositories.advisor_repository import AdvisorRepository
from marketwatch.repositories.sql_helpers import SessionFactory, as_utc, resolve_session_factory


class AdvisorClientRow(Base):
    __tablename__ = "advisor_clients"

    __table_args__ = (
        UniqueConstraint("advisor_id", "client_id", name="uq_advisor_clients_pair"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    advisor_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    client_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class SqlAdvisorRepository(AdvisorRepository):
    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session = resolve_session_factory(session_factory)

    def add(self, link: AdvisorClientLink) -> None:
        with self._session() as s:
            if self._find(s, link.advisor_id, link.client_id) is not None:
                raise ValueError(f"'{link.client_id}' is already a client of '{link.advisor_id}'")

            s.add(AdvisorClientRow(
                id=str(link.id),
                advisor_id=link.advisor_id,
                client_id=link.client_id,
                created_at=link.created_at,
            ))
            s.commit()

    def delete(self, link_id: UUID) -> bool:
        with self._session() as s:
            row = s.get(AdvisorClientRow, str(link_id))
            if row is None:
                return False
            s.delete(row)
            s.commit()
            return True

    def list_for_user(self, *, user_id: str) -> list[AdvisorClientLink]:
        stmt = (
            select(AdvisorClientRow)
            .where(or_(AdvisorClientRow.advisor_id == user_id, AdvisorClientRow.client_id == user_id))
            .order_by(AdvisorClientRow.created_at, AdvisorClientRow.id)
        )
        with self._session() as s:
            return [self._to_domain(r) for r in s.execute(stmt).scalars().all()]

    def is_client(self, *, advisor_id: str, client_id: str) -> bool:
        with self._session() as s:
            return self._find(s, advisor_id, client_id) is not None

    @staticmethod
    def _find(s, advisor_id: str, client_id: str) -> AdvisorClientRow | None:
        return s.execute(
            select(AdvisorClientRow)
            .where(AdvisorClientRow.advisor_id == advisor_id)
            .where(AdvisorClientRow.client_id == client_id)
        ).scalars().first()

    @staticmethod
    def _to_domain(r: AdvisorClientRow) -> AdvisorClientLink:
        return AdvisorClientLink(
            id=UUID(r.id),
            advisor_id=r.advisor_id,
            client_id=r.client_id,
            created_at=as_utc(r.created_at),
        )
