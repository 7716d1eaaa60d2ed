from __future__ import annotations

import datetime as dt
from uuid import UUID

from pydantic import BaseModel, Field


class AdvisorClientCreate(BaseModel):
    advisor_id: str = Field(min_length=1)
    client_id: str = Field(min_length=1)


class AdvisorClientOut(BaseModel):
    id: UUID
    advisor_id: str
    client_id: str
    created_at: dt.datetime
