from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from uuid import UUID, uuid4


@dataclass(frozen=True, slots=True)
class AdvisorClientLink:
    id: UUID
    advisor_id: str
    client_id: str
    created_at: dt.datetime

    @classmethod
    def create(cls, *, advisor_id: str, client_id: str, created_at: dt.datetime | None = None) -> "AdvisorClientLink":
        return cls(
            id=uuid4(),
            advisor_id=advisor_id,
            client_id=client_id,
            created_at=created_at or dt.datetime.now(dt.timezone.utc),
        )

    def __post_init__(self) -> None:
        if not self.advisor_id or not self.client_id:
            raise ValueError("advisor link needs both advisor_id and client_id")
        if self.advisor_id == self.client_id:
            raise ValueError("an advisor cannot be their own client")
