from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from marketwatch.api.deps import get_alert_repo, get_current_user_id
from marketwatch.api.schemas.alerts import NotificationOut
from marketwatch.repositories.alert_repository import AlertRepository


router = APIRouter(prefix="/notifications", tags=["alerts"])


@router.get("", response_model=list[NotificationOut])
def list_notifications(
    unread_only: bool = False,
    user_id: str = Depends(get_current_user_id),
    repo: AlertRepository = Depends(get_alert_repo),
):
    return [
        NotificationOut(
            id=n.id,
            symbol=n.symbol,
            message=n.message,
            type=n.type.value,
            read=n.read,
            created_at=n.created_at,
        )
        for n in repo.list_notifications(user_id=user_id, unread_only=unread_only)
    ]


@router.post("/{notification_id}/read", status_code=204)
def mark_notification_read(
    notification_id: UUID,
    user_id: str = Depends(get_current_user_id),
    repo: AlertRepository = Depends(get_alert_repo),
):
    if not repo.mark_read(user_id=user_id, notification_id=notification_id):
        raise HTTPException(status_code=404, detail="notification not found")
