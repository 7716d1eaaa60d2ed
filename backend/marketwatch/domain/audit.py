from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from uuid import UUID, uuid4


class AuditAction(str, Enum):
    REFRESH_MARKET_DATA = "REFRESH_MARKET_DATA"


@dataclass(frozen=True)
class AuditEntry:
    id: UUID
    user_id: str | None
    action: AuditAction
    resource_type: str | None
    status_code: int
    created_at: dt.datetime
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        *,
        user_id: str | None,
        action: AuditAction,
        resource_type: str | None,
        status_code: int,
        details: dict[str, Any] | None = None,
        created_at: dt.datetime | None = None,
    ) -> "AuditEntry":
        return cls(
            id=uuid4(),
            user_id=user_id,
            action=action,
            resource_type=resource_type,
            status_code=status_code,
            created_at=created_at or dt.datetime.now(dt.timezone.utc),
            details=dict(details or {}),
        )

    def __post_init__(self) -> None:
        if not isinstance(self.action, AuditAction):
            raise ValueError("audit.action invalid")
        if not 100 <= self.status_code <= 599:
            raise ValueError("audit.status_code must be an HTTP status")
