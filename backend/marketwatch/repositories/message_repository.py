from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from marketwatch.domain.message import Message, MessageBox


class MessageRepository(ABC):
    @abstractmethod
    def add(self, message: Message) -> None: ...

    @abstractmethod
    def list_for_user(
        self,
        *,
        user_id: str,
        box: MessageBox = MessageBox.ALL,
        with_user: str | None = None,
    ) -> list[Message]:
        """Messages the user sent and/or received, oldest first."""

    @abstractmethod
    def mark_read(self, *, receiver_id: str, message_id: UUID) -> bool: ...
