from __future__ import annotations

import datetime as dt
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class MessageCreate(BaseModel):
    receiver_id: str = Field(min_length=1)
    content: str = Field(min_length=1)
    portfolio_id: Optional[UUID] = None


class MessageOut(BaseModel):
    id: UUID
    sender_id: str
    receiver_id: str
    portfolio_id: Optional[UUID]
    content: str
    read: bool
    created_at: dt.datetime
