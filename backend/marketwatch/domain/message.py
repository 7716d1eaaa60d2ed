from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from enum import Enum
from uuid import UUID, uuid4


class MessageBox(str, Enum):
    ALL = "all"
    SENT = "sent"
    RECEIVED = "received"


@dataclass(frozen=True, slots=True)
class Message:
    id: UUID
    sender_id: str
    receiver_id: str
    content: str
    read: bool
    created_at: dt.datetime
    portfolio_id: UUID | None = None

    @classmethod
    def create(
        cls,
        *,
        sender_id: str,
        receiver_id: str,
        content: str,
        portfolio_id: UUID | None = None,
        created_at: dt.datetime | None = None,
    ) -> "Message":
        return cls(
            id=uuid4(),
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content.strip(),
            read=False,
            created_at=created_at or dt.datetime.now(dt.timezone.utc),
            portfolio_id=portfolio_id,
        )

    def __post_init__(self) -> None:
        if not self.sender_id:
            raise ValueError("message.sender_id must be non-empty")
        if not self.receiver_id:
            raise ValueError("message.receiver_id must be non-empty")
        if self.sender_id == self.receiver_id:
            raise ValueError("message.receiver_id must differ from sender_id")
        if not self.content or not self.content.strip():
            raise ValueError("message.content must be non-empty")
