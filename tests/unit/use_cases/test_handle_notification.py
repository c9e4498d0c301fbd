"""Unit tests for HandlePaymentNotification and SyncPaymentStatus"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from libs.result import Return, Error
from src.app.services.notification_service import AlertKind
from src.app.services.payment_gateway import GatewayTransactionStatus, PaymentGatewayError
from src.app.use_cases.orders.transition import OrderTransitioner
from src.app.use_cases.payments.apply_external_status import ApplyExternalStatus
from src.app.use_cases.payments.dtos import ExternalStatusOutcomeDTO
from src.app.use_cases.payments.handle_notification import HandlePaymentNotification
from src.app.use_cases.payments.sync_payment_status import SyncPaymentStatus
from src.domain.actor import Actor, Role
from src.domain.order import OrderStatus, PaymentMethod

REFERENCE = "ORD-1718000000000-ABCDEFGHI"


def applied_outcome():
    return ExternalStatusOutcomeDTO(
        order_id="order_1",
        order_reference=REFERENCE,
        previous_status=OrderStatus.PENDING,
        current_status=OrderStatus.PAID,
        applied=True,
        balance_credited=True,
    )


@pytest.fixture
def mock_gateway():
    gateway = MagicMock()
    gateway.verify_signature = MagicMock(return_value=True)
    return gateway


@pytest.fixture
def mock_apply_status():
    apply_status = MagicMock()
    apply_status.execute = AsyncMock(return_value=Return.ok(applied_outcome()))
    return apply_status


@pytest.fixture
def gateway_notification():
    return GatewayTransactionStatus(
        order_reference=REFERENCE,
        transaction_status="settlement",
        gross_amount="40000.00",
        status_code="200",
        payment_type="bank_transfer",
        signature_key="abc",
    )


@pytest.mark.asyncio
class TestHandlePaymentNotification:
    async def test_valid_notification_is_applied(
        self, mock_gateway, mock_apply_status, mock_alerts, gateway_notification
    ):
        handler = HandlePaymentNotification(mock_gateway, mock_apply_status, mock_alerts)

        result = await handler.execute(gateway_notification)

        assert result.is_ok()
        assert result.value.applied is True
        command = mock_apply_status.execute.call_args.args[0]
        assert command.order_reference == REFERENCE
        assert command.gross_amount == "40000.00"
        assert command.payment_type == "bank_transfer"
        mock_alerts.send_alert.assert_not_called()

    async def test_invalid_signature_rejected(
        self, mock_gateway, mock_apply_status, mock_alerts, gateway_notification
    ):
        """
        Given: The signature does not verify
        When: The notification is handled with rejection on
        Then: INVALID_SIGNATURE, alert raised, nothing applied
        """
        mock_gateway.verify_signature = MagicMock(return_value=False)
        handler = HandlePaymentNotification(mock_gateway, mock_apply_status, mock_alerts)

        result = await handler.execute(gateway_notification)

        assert result.is_err()
        assert result.error.code == "INVALID_SIGNATURE"
        mock_apply_status.execute.assert_not_called()
        assert mock_alerts.send_alert.call_args.args[0].kind == AlertKind.INVALID_SIGNATURE

    async def test_invalid_signature_processed_when_not_rejecting(
        self, mock_gateway, mock_apply_status, mock_alerts, gateway_notification
    ):
        mock_gateway.verify_signature = MagicMock(return_value=False)
        handler = HandlePaymentNotification(
            mock_gateway, mock_apply_status, mock_alerts, reject_invalid_signature=False
        )

        result = await handler.execute(gateway_notification)

        assert result.is_ok()
        mock_apply_status.execute.assert_called_once()
        mock_alerts.send_alert.assert_called_once()

    async def test_unknown_order_alerted(self, mock_gateway, mock_apply_status, mock_alerts, gateway_notification):
        mock_apply_status.execute = AsyncMock(
            return_value=Return.err(Error(code="ORDER_NOT_FOUND", message="No order"))
        )
        handler = HandlePaymentNotification(mock_gateway, mock_apply_status, mock_alerts)

        result = await handler.execute(gateway_notification)

        assert result.is_err()
        assert mock_alerts.send_alert.call_args.args[0].kind == AlertKind.UNKNOWN_ORDER

    async def test_failed_apply_is_alerted(
        self, mock_uow, mock_notifier, mock_alerts, mock_gateway, make_order, gateway_notification
    ):
        """
        Given: The database fails while the settlement is being applied
        When: The notification is handled
        Then: The failure is returned and operators get a NOTIFICATION_FAILED alert
        """
        # Arrange
        order_repo = MagicMock()
        order_repo.get_by_external_reference = AsyncMock(return_value=make_order())
        order_repo.transition_status = AsyncMock(side_effect=RuntimeError("database is locked"))
        postings = MagicMock()
        postings.credit_order = AsyncMock()
        apply_status = ApplyExternalStatus(
            mock_uow, order_repo, OrderTransitioner(order_repo, postings), mock_notifier, mock_alerts
        )
        handler = HandlePaymentNotification(mock_gateway, apply_status, mock_alerts)

        # Act
        result = await handler.execute(gateway_notification)

        # Assert
        assert result.is_err()
        assert result.error.code == "APPLY_EXTERNAL_STATUS_FAILED"
        mock_uow.rollback.assert_called()
        postings.credit_order.assert_not_called()
        alert = mock_alerts.send_alert.call_args.args[0]
        assert alert.kind == AlertKind.NOTIFICATION_FAILED
        assert alert.reference == REFERENCE
        assert alert.details["error"] == "APPLY_EXTERNAL_STATUS_FAILED"
        assert "database is locked" in alert.details["reason"]

    async def test_amount_mismatch_not_alerted_twice(
        self, mock_gateway, mock_apply_status, mock_alerts, gateway_notification
    ):
        mock_apply_status.execute = AsyncMock(
            return_value=Return.err(Error(code="AMOUNT_MISMATCH", message="Gateway amount does not match"))
        )
        handler = HandlePaymentNotification(mock_gateway, mock_apply_status, mock_alerts)

        result = await handler.execute(gateway_notification)

        assert result.is_err()
        mock_alerts.send_alert.assert_not_called()


@pytest.fixture
def mock_order_repo():
    return MagicMock()


@pytest.mark.asyncio
class TestSyncPaymentStatus:
    async def test_polled_status_is_applied(
        self, mock_order_repo, mock_gateway, mock_apply_status, make_order, gateway_notification
    ):
        """
        Given: A pending gateway order whose webhook never arrived
        When: The status is synced
        Then: The gateway is polled and the result applied
        """
        mock_order_repo.get_by_id = AsyncMock(return_value=make_order())
        mock_gateway.get_status = AsyncMock(return_value=gateway_notification)

        result = await SyncPaymentStatus(mock_order_repo, mock_gateway, mock_apply_status).execute("order_1")

        assert result.is_ok()
        assert result.value.applied is True
        mock_gateway.get_status.assert_called_once_with(REFERENCE)
        assert mock_apply_status.execute.call_args.args[0].transaction_status == "settlement"

    async def test_no_gateway_transaction_yet(self, mock_order_repo, mock_gateway, mock_apply_status, make_order):
        mock_order_repo.get_by_id = AsyncMock(return_value=make_order())
        mock_gateway.get_status = AsyncMock(return_value=None)

        result = await SyncPaymentStatus(mock_order_repo, mock_gateway, mock_apply_status).execute("order_1")

        assert result.is_ok()
        assert result.value.applied is False
        mock_apply_status.execute.assert_not_called()

    async def test_gateway_down(self, mock_order_repo, mock_gateway, mock_apply_status, make_order):
        mock_order_repo.get_by_id = AsyncMock(return_value=make_order())
        mock_gateway.get_status = AsyncMock(side_effect=PaymentGatewayError("503"))

        result = await SyncPaymentStatus(mock_order_repo, mock_gateway, mock_apply_status).execute("order_1")

        assert result.is_err()
        assert result.error.code == "PAYMENT_GATEWAY_UNAVAILABLE"

    async def test_cash_order_not_polled(self, mock_order_repo, mock_gateway, mock_apply_status, make_order):
        mock_order_repo.get_by_id = AsyncMock(return_value=make_order(payment_method=PaymentMethod.CASH))
        mock_gateway.get_status = AsyncMock()

        result = await SyncPaymentStatus(mock_order_repo, mock_gateway, mock_apply_status).execute("order_1")

        assert result.is_ok()
        assert result.value.note == "nothing to sync"
        mock_gateway.get_status.assert_not_called()

    async def test_other_customer_forbidden(self, mock_order_repo, mock_gateway, mock_apply_status, make_order):
        mock_order_repo.get_by_id = AsyncMock(return_value=make_order())

        result = await SyncPaymentStatus(mock_order_repo, mock_gateway, mock_apply_status).execute(
            "order_1", actor=Actor(user_id="user_9", role=Role.CUSTOMER)
        )

        assert result.is_err()
        assert result.error.code == "FORBIDDEN"
