import datetime as dt
from decimal import Decimal
from uuid import UUID

import pytest

from marketwatch.domain.alert import AlertThreshold, Notification, NotificationType
from marketwatch.domain.audit import AuditAction, AuditEntry


NOW = dt.datetime(2026, 3, 2, 14, 30, tzinfo=dt.timezone.utc)


def test_threshold_must_be_non_negative():
    AlertThreshold(user_id="u1", symbol="AAPL", threshold_percent=Decimal("0"))
    with pytest.raises(ValueError):
        AlertThreshold(user_id="u1", symbol="AAPL", threshold_percent=Decimal("-1"))


def test_threshold_requires_decimal():
    with pytest.raises(ValueError):
        AlertThreshold(user_id="u1", symbol="AAPL", threshold_percent=5)


def test_price_alert_notification_defaults():
    n = Notification.price_alert(user_id="u1", symbol="AAPL", message="AAPL moved", created_at=NOW)

    assert isinstance(n.id, UUID)
    assert n.type == NotificationType.PRICE_ALERT
    assert n.type.value == "price_alert"
    assert n.read is False
    assert n.created_at == NOW


def test_notification_requires_message():
    with pytest.raises(ValueError):
        Notification.price_alert(user_id="u1", symbol="AAPL", message="  ", created_at=NOW)


def test_audit_entry_create():
    e = AuditEntry.create(
        user_id="u1",
        action=AuditAction.REFRESH_MARKET_DATA,
        resource_type="market_data",
        status_code=200,
        details={"symbols": ["AAPL"], "count": 1},
    )

    assert isinstance(e.id, UUID)
    assert e.action.value == "REFRESH_MARKET_DATA"
    assert e.details == {"symbols": ["AAPL"], "count": 1}
    assert e.created_at.tzinfo is not None


def test_audit_entry_rejects_non_http_status():
    with pytest.raises(ValueError):
        AuditEntry.create(
            user_id="u1",
            action=AuditAction.REFRESH_MARKET_DATA,
            resource_type="market_data",
            status_code=42,
        )
