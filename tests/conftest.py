import pytest
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

from src.domain.order import Order, OrderStatus, PaymentMethod


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_notifier():
    notifier = MagicMock()
    notifier.publish = AsyncMock()
    return notifier


@pytest.fixture
def mock_alerts():
    alerts = MagicMock()
    alerts.send_alert = AsyncMock(return_value=True)
    return alerts


@pytest.fixture
def make_order():
    """Build an in-memory Order; keyword arguments override the defaults"""
    def _make(**overrides) -> Order:
        now = datetime.utcnow()
        values = dict(
            id="order_1",
            external_reference="ORD-1718000000000-ABCDEFGHI",
            user_id="user_1",
            tenant_id="tenant_1",
            subtotal=38000,
            service_fee=2000,
            total_amount=40000,
            status=OrderStatus.PENDING,
            payment_method=PaymentMethod.GATEWAY,
            created_at=now - timedelta(minutes=5),
            updated_at=now - timedelta(minutes=5),
        )
        values.update(overrides)
        return Order(**values)
    return _make

