from __future__ import annotations

import datetime as dt
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, select
from sqlalchemy.orm import Mapped, mapped_column

from marketwatch.db_base import Base
from marketwatch.domain.audit import AuditAction, AuditEntry
from marketwatch.repositories.audit_repository import AuditRepository
from marketwatch.repositories.sql_helpers import SessionFactory, as_utc, resolve_session_factory


class AuditLogRow(Base):
    __tablename__ = "audit_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
    action: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    resource_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    details: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    status_code: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)


class SqlAuditRepository(AuditRepository):
    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session = resolve_session_factory(session_factory)

    def add(self, entry: AuditEntry) -> None:
        row = AuditLogRow(
            id=str(entry.id),
            user_id=entry.user_id,
            action=entry.action.value,
            resource_type=entry.resource_type,
            details=entry.details,
            status_code=entry.status_code,
            created_at=entry.created_at,
        )
        with self._session() as s:
            s.add(row)
            s.commit()

    def list(
        self,
        *,
        user_id: str | None = None,
        action: AuditAction | None = None,
        limit: int = 100,
    ) -> list[AuditEntry]:
        if limit <= 0:
            raise ValueError("limit must be > 0")

        stmt = select(AuditLogRow)
        if user_id is not None:
            stmt = stmt.where(AuditLogRow.user_id == user_id)
        if action is not None:
            stmt = stmt.where(AuditLogRow.action == action.value)
        stmt = stmt.order_by(AuditLogRow.created_at.desc()).limit(limit)

        with self._session() as s:
            return [self._to_domain(r) for r in s.execute(stmt).scalars().all()]

    @staticmethod
    def _to_domain(r: AuditLogRow) -> AuditEntry:
        return AuditEntry(
            id=UUID(r.id),
            user_id=r.user_id,
            action=AuditAction(r.action),
            resource_type=r.resource_type,
            status_code=r.status_code if r.status_code is not None else 200,
            created_at=as_utc(r.created_at),
            details=dict(r.details or {}),
        )
