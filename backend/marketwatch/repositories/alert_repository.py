from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from marketwatch.domain.alert import AlertThreshold, Notification


class AlertRepository(ABC):
    # -------- thresholds (owned by users) --------

    @abstractmethod
    def thresholds_for(self, *, user_id: str, symbol: str) -> list[AlertThreshold]: ...

    @abstractmethod
    def list_thresholds(self, *, user_id: str) -> list[AlertThreshold]: ...

    @abstractmethod
    def set_threshold(self, threshold: AlertThreshold) -> AlertThreshold: ...

    @abstractmethod
    def delete_threshold(self, *, user_id: str, symbol: str) -> bool: ...

    # -------- notifications --------

    @abstractmethod
    def add_notification(self, notification: Notification) -> None: ...

    @abstractmethod
    def list_notifications(self, *, user_id: str, unread_only: bool = False) -> list[Notification]: ...

    @abstractmethod
    def mark_read(self, *, user_id: str, notification_id: UUID) -> bool: ...
