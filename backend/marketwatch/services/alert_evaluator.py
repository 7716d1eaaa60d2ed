from __future__ import annotations

import datetime as dt
import logging
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from marketwatch.domain.alert import Notification
from marketwatch.errors import PersistenceError
from marketwatch.repositories.alert_repository import AlertRepository


log = logging.getLogger(__name__)

_HUNDRED = Decimal("100")


def percent_change(old_price: Decimal, new_price: Decimal) -> Decimal | None:
    """(new - old) / old * 100, or None when old is zero."""
    if old_price == 0:
        return None
    return (new_price - old_price) / old_price * _HUNDRED


def format_alert_message(*, symbol: str, change: Decimal, old_price: Decimal, new_price: Decimal) -> str:
    return f"{symbol} price changed by {change:.2f}%: ${old_price:.2f} → ${new_price:.2f}"


def evaluate_price_alert(
    *,
    user_id: str,
    symbol: str,
    old_price: Decimal,
    new_price: Decimal,
    alert_repo: AlertRepository,
    now: dt.datetime,
) -> Notification | None:
    """
    Create a price_alert notification for one user when |change| reaches
    their threshold for the symbol. At most one threshold row exists per
    (user, symbol); the first one wins.
    """
    change = percent_change(old_price, new_price)
    if change is None:
        log.info("Skipping alert evaluation for %s: previous price is zero", symbol)
        return None

    try:
        thresholds = alert_repo.thresholds_for(user_id=user_id, symbol=symbol)
        if not thresholds:
            return None

        threshold = thresholds[0]
        if abs(change) < threshold.threshold_percent:
            return None

        notification = Notification.price_alert(
            user_id=user_id,
            symbol=symbol,
            message=format_alert_message(symbol=symbol, change=change, old_price=old_price, new_price=new_price),
            created_at=now,
        )
        alert_repo.add_notification(notification)
    except SQLAlchemyError as e:
        raise PersistenceError(symbol, "notifications", str(e)) from e

    log.info("Alert triggered for %s: %s changed by %.2f%%", user_id, symbol, change)
    return notification
