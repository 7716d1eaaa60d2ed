from __future__ import annotations

from abc import ABC, abstractmethod

from marketwatch.domain.audit import AuditAction, AuditEntry


class AuditRepository(ABC):
    @abstractmethod
    def add(self, entry: AuditEntry) -> None: ...

    @abstractmethod
    def list(
        self,
        *,
        user_id: str | None = None,
        action: AuditAction | None = None,
        limit: int = 100,
    ) -> list[AuditEntry]: ...
