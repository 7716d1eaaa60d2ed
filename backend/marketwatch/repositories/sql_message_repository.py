from __future__ import annotations

import datetime as dt
from uuid import UUID

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, and_, or_, select
from sqlalchemy.orm import Mapped, mapped_column

from marketwatch.db_base import Base
from marketwatch.domain.message import Message, MessageBox
from marketwatch.repositories.message_repository import MessageRepository
from marketwatch.repositories.sql_helpers import SessionFactory, as_utc, resolve_session_factory


class MessageRow(Base):
    __tablename__ = "messages"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    sender_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    receiver_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    portfolio_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("portfolios.id", ondelete="SET NULL"),
        nullable=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)
    updated_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class SqlMessageRepository(MessageRepository):
    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session = resolve_session_factory(session_factory)

    def add(self, message: Message) -> None:
        with self._session() as s:
            if s.get(MessageRow, str(message.id)) is not None:
                raise ValueError(f"message {message.id} already exists")

            s.add(MessageRow(
                id=str(message.id),
                sender_id=message.sender_id,
                receiver_id=message.receiver_id,
                portfolio_id=str(message.portfolio_id) if message.portfolio_id else None,
                content=message.content,
                read=message.read,
                created_at=message.created_at,
            ))
            s.commit()

    def list_for_user(
        self,
        *,
        user_id: str,
        box: MessageBox = MessageBox.ALL,
        with_user: str | None = None,
    ) -> list[Message]:
        sent = MessageRow.sender_id == user_id
        received = MessageRow.receiver_id == user_id
        if with_user is not None:
            sent = and_(sent, MessageRow.receiver_id == with_user)
            received = and_(received, MessageRow.sender_id == with_user)

        if box == MessageBox.SENT:
            cond = sent
        elif box == MessageBox.RECEIVED:
            cond = received
        else:
            cond = or_(sent, received)

        stmt = select(MessageRow).where(cond).order_by(MessageRow.created_at, MessageRow.id)
        with self._session() as s:
            return [self._to_domain(r) for r in s.execute(stmt).scalars().all()]

    def mark_read(self, *, receiver_id: str, message_id: UUID) -> bool:
        with self._session() as s:
            row = s.get(MessageRow, str(message_id))
            # only the receiver may flip the flag; senders see it as missing
            if row is None or row.receiver_id != receiver_id:
                return False
            row.read = True
            row.updated_at = dt.datetime.now(dt.timezone.utc)
            s.commit()
            return True

    @staticmethod
    def _to_domain(r: MessageRow) -> Message:
        return Message(
            id=UUID(r.id),
            sender_id=r.sender_id,
            receiver_id=r.receiver_id,
            content=r.content,
            read=bool(r.read),
            created_at=as_utc(r.created_at),
            portfolio_id=UUID(r.portfolio_id) if r.portfolio_id else None,
        )
