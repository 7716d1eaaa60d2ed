from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4


class NotificationType(str, Enum):
    PRICE_ALERT = "price_alert"


@dataclass(frozen=True, slots=True)
class AlertThreshold:
    user_id: str
    symbol: str
    threshold_percent: Decimal

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValueError("alert_threshold.user_id must be non-empty")
        if not self.symbol or not self.symbol.strip():
            raise ValueError("alert_threshold.symbol must be non-empty")
        if not isinstance(self.threshold_percent, Decimal):
            raise ValueError("alert_threshold.threshold_percent must be a Decimal")
        if self.threshold_percent < 0:
            raise ValueError("alert_threshold.threshold_percent must be >= 0")


@dataclass(frozen=True, slots=True)
class Notification:
    id: UUID
    user_id: str
    symbol: str
    message: str
    type: NotificationType
    read: bool
    created_at: dt.datetime

    @classmethod
    def price_alert(cls, *, user_id: str, symbol: str, message: str, created_at: dt.datetime) -> "Notification":
        return cls(
            id=uuid4(),
            user_id=user_id,
            symbol=symbol,
            message=message,
            type=NotificationType.PRICE_ALERT,
            read=False,
            created_at=created_at,
        )

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValueError("notification.user_id must be non-empty")
        if not self.message or not self.message.strip():
            raise ValueError("notification.message must be non-empty")
        if not isinstance(self.type, NotificationType):
            raise ValueError("notification.type invalid")
