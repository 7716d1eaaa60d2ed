from __future__ import annotations

import datetime as dt
from uuid import UUID

from pydantic import BaseModel


class AlertThresholdIn(BaseModel):
    threshold_percent: str


class AlertThresholdOut(BaseModel):
    symbol: str
    threshold_percent: str


class NotificationOut(BaseModel):
    id: UUID
    symbol: str
    message: str
    type: str
    read: bool
    created_at: dt.datetime
