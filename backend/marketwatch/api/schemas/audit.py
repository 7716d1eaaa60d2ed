from __future__ import annotations

import datetime as dt
from typing import Any
from uuid import UUID

from pydantic import BaseModel


class AuditEntryOut(BaseModel):
    id: UUID
    user_id: str | None
    action: str
    resource_type: str | None
    details: dict[str, Any]
    status_code: int
    created_at: dt.datetime
