from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from marketwatch.domain.advisor import AdvisorClientLink


class AdvisorRepository(ABC):
    @abstractmethod
    def add(self, link: AdvisorClientLink) -> None: ...

    @abstractmethod
    def delete(self, link_id: UUID) -> bool: ...

    @abstractmethod
    def list_for_user(self, *, user_id: str) -> list[AdvisorClientLink]:
        """Links where the user is either the advisor or the client."""

    @abstractmethod
    def is_client(self, *, advisor_id: str, client_id: str) -> bool: ...
