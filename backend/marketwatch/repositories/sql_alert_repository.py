from __future__ import annotations

import datetime as dt
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, Numeric, String, Text, UniqueConstraint, func, select
from sqlalchemy.orm import Mapped, mapped_column

from marketwatch.db_base import Base
from marketwatch.domain.alert import AlertThreshold, Notification, NotificationType
from marketwatch.domain.quote import normalize_symbol
from marketwatch.repositories.alert_repository import AlertRepository
from marketwatch.repositories.sql_helpers import SessionFactory, as_utc, resolve_session_factory


class AlertThresholdRow(Base):
    __tablename__ = "alert_thresholds"

    __table_args__ = (
        UniqueConstraint("user_id", "symbol", name="uq_alert_thresholds_user_symbol"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    symbol: Mapped[str] = mapped_column(String(32), nullable=False)
    threshold_percent: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class NotificationRow(Base):
    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    symbol: Mapped[str] = mapped_column(String(32), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False, default=NotificationType.PRICE_ALERT.value)
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)


class SqlAlertRepository(AlertRepository):
    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session = resolve_session_factory(session_factory)

    # -------- thresholds --------

    def thresholds_for(self, *, user_id: str, symbol: str) -> list[AlertThreshold]:
        stmt = (
            select(AlertThresholdRow)
            .where(AlertThresholdRow.user_id == user_id)
            .where(AlertThresholdRow.symbol == normalize_symbol(symbol))
            .order_by(AlertThresholdRow.created_at, AlertThresholdRow.id)
        )
        with self._session() as s:
            return [self._threshold_to_domain(r) for r in s.execute(stmt).scalars().all()]

    def list_thresholds(self, *, user_id: str) -> list[AlertThreshold]:
        stmt = (
            select(AlertThresholdRow)
            .where(AlertThresholdRow.user_id == user_id)
            .order_by(AlertThresholdRow.symbol)
        )
        with self._session() as s:
            return [self._threshold_to_domain(r) for r in s.execute(stmt).scalars().all()]

    def set_threshold(self, threshold: AlertThreshold) -> AlertThreshold:
        sym = normalize_symbol(threshold.symbol)
        with self._session() as s:
            row = s.execute(
                select(AlertThresholdRow)
                .where(AlertThresholdRow.user_id == threshold.user_id)
                .where(AlertThresholdRow.symbol == sym)
            ).scalars().first()

            if row is None:
                row = AlertThresholdRow(
                    id=str(uuid4()),
                    user_id=threshold.user_id,
                    symbol=sym,
                    threshold_percent=threshold.threshold_percent,
                )
                s.add(row)
            else:
                row.threshold_percent = threshold.threshold_percent

            s.commit()
            s.refresh(row)
            return self._threshold_to_domain(row)

    def delete_threshold(self, *, user_id: str, symbol: str) -> bool:
        with self._session() as s:
            row = s.execute(
                select(AlertThresholdRow)
                .where(AlertThresholdRow.user_id == user_id)
                .where(AlertThresholdRow.symbol == normalize_symbol(symbol))
            ).scalars().first()
            if row is None:
                return False
            s.delete(row)
            s.commit()
            return True

    # -------- notifications --------

    def add_notification(self, notification: Notification) -> None:
        row = NotificationRow(
            id=str(notification.id),
            user_id=notification.user_id,
            symbol=normalize_symbol(notification.symbol),
            message=notification.message,
            type=notification.type.value,
            read=notification.read,
            created_at=notification.created_at,
        )
        with self._session() as s:
            s.add(row)
            s.commit()

    def list_notifications(self, *, user_id: str, unread_only: bool = False) -> list[Notification]:
        stmt = select(NotificationRow).where(NotificationRow.user_id == user_id)
        if unread_only:
            stmt = stmt.where(NotificationRow.read.is_(False))
        stmt = stmt.order_by(NotificationRow.created_at.desc())

        with self._session() as s:
            return [self._notification_to_domain(r) for r in s.execute(stmt).scalars().all()]

    def mark_read(self, *, user_id: str, notification_id: UUID) -> bool:
        with self._session() as s:
            row = s.get(NotificationRow, str(notification_id))
            # other users' notifications look missing
            if row is None or row.user_id != user_id:
                return False
            row.read = True
            s.commit()
            return True

    # -------- mapping --------

    @staticmethod
    def _threshold_to_domain(r: AlertThresholdRow) -> AlertThreshold:
        return AlertThreshold(
            user_id=r.user_id,
            symbol=r.symbol,
            threshold_percent=Decimal(r.threshold_percent),
        )

    @staticmethod
    def _notification_to_domain(r: NotificationRow) -> Notification:
        return Notification(
            id=UUID(r.id),
            user_id=r.user_id,
            symbol=r.symbol,
            message=r.message,
            type=NotificationType(r.type),
            read=bool(r.read),
            created_at=as_utc(r.created_at),
        )
