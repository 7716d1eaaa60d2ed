from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Optional
from uuid import UUID, uuid4


@dataclass(frozen=True)
class Portfolio:
    id: UUID
    owner_id: str
    name: str
    description: Optional[str]
    created_at: dt.datetime

    @classmethod
    def create(
        cls,
        *,
        owner_id: str,
        name: str,
        description: Optional[str] = None,
        id: Optional[UUID] = None,
        created_at: Optional[dt.datetime] = None,
    ) -> "Portfolio":
        return cls(
            id=id or uuid4(),
            owner_id=owner_id,
            name=name.strip(),
            description=description.strip() if isinstance(description, str) and description.strip() else None,
            created_at=created_at or dt.datetime.now(dt.timezone.utc),
        )

    def __post_init__(self) -> None:
        if not self.owner_id:
            raise ValueError("Portfolio owner_id cannot be empty")
        if not self.name or not self.name.strip():
            raise ValueError("Portfolio name cannot be empty")
