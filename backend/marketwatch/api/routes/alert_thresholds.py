from __future__ import annotations

from decimal import Decimal, InvalidOperation

from fastapi import APIRouter, Depends, HTTPException

from marketwatch.api.deps import get_alert_repo, get_current_user_id
from marketwatch.api.schemas.alerts import AlertThresholdIn, AlertThresholdOut
from marketwatch.domain.alert import AlertThreshold
from marketwatch.repositories.alert_repository import AlertRepository


router = APIRouter(prefix="/alert-thresholds", tags=["alerts"])


def _out(t: AlertThreshold) -> AlertThresholdOut:
    return AlertThresholdOut(symbol=t.symbol, threshold_percent=str(t.threshold_percent))


@router.get("", response_model=list[AlertThresholdOut])
def list_thresholds(
    user_id: str = Depends(get_current_user_id),
    repo: AlertRepository = Depends(get_alert_repo),
):
    return [_out(t) for t in repo.list_thresholds(user_id=user_id)]


@router.put("/{symbol}", response_model=AlertThresholdOut)
def set_threshold(
    symbol: str,
    payload: AlertThresholdIn,
    user_id: str = Depends(get_current_user_id),
    repo: AlertRepository = Depends(get_alert_repo),
):
    try:
        pct = Decimal(payload.threshold_percent.strip())
    except InvalidOperation:
        raise HTTPException(status_code=422, detail="Invalid threshold_percent")

    try:
        threshold = AlertThreshold(user_id=user_id, symbol=symbol.strip().upper(), threshold_percent=pct)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return _out(repo.set_threshold(threshold))


@router.delete("/{symbol}", status_code=204)
def delete_threshold(
    symbol: str,
    user_id: str = Depends(get_current_user_id),
    repo: AlertRepository = Depends(get_alert_repo),
):
    if not repo.delete_threshold(user_id=user_id, symbol=symbol):
        raise HTTPException(status_code=404, detail="threshold not found")
