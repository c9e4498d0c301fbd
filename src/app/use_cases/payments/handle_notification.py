"""HandlePaymentNotification Use Case

Entry point for gateway webhooks: authenticates the notification, then
hands it to ApplyExternalStatus.
"""

import logging

from libs.result import Result, Return, Error
from src.app.services.payment_gateway import PaymentGateway, GatewayTransactionStatus
from src.app.services.notification_service import NotificationService, OperatorAlert, AlertKind
from .apply_external_status import ApplyExternalStatus
from .dtos import ExternalStatusCommandDTO, ExternalStatusOutcomeDTO

logger = logging.getLogger(__name__)

# Errors ApplyExternalStatus has already raised an alert for
_ALERTED_BY_APPLY = frozenset({"AMOUNT_MISMATCH"})


class HandlePaymentNotification:
    """
    Use Case: Process one gateway notification

    Bad signatures are rejected with INVALID_SIGNATURE unless
    reject_invalid_signature is off, in which case they are alerted and
    processed anyway. Notifications for unknown orders are alerted; the
    caller still acknowledges them so the gateway stops retrying.
    """

    def __init__(
        self,
        gateway: PaymentGateway,
        apply_status: ApplyExternalStatus,
        notification_service: NotificationService,
        reject_invalid_signature: bool = True,
    ):
        self.gateway = gateway
        self.apply_status = apply_status
        self.notification_service = notification_service
        self.reject_invalid_signature = reject_invalid_signature

    async def execute(self, notification: GatewayTransactionStatus) -> Result[ExternalStatusOutcomeDTO]:
        reference = notification.order_reference
        logger.info(
            f"Gateway notification: order={reference} status={notification.transaction_status} "
            f"fraud={notification.fraud_status} amount={notification.gross_amount}"
        )

        if not self.gateway.verify_signature(notification):
            logger.warning(f"Invalid signature on gateway notification for {reference}")
            await self.notification_service.send_alert(
                OperatorAlert(
                    kind=AlertKind.INVALID_SIGNATURE,
                    message=f"Gateway notification for {reference} failed signature check",
                    reference=reference,
                    details={
                        "transaction_status": notification.transaction_status,
                        "rejected": self.reject_invalid_signature,
                    },
                )
            )
            if self.reject_invalid_signature:
                return Return.err(
                    Error(code="INVALID_SIGNATURE", message="Notification signature is invalid")
                )

        result = await self.apply_status.execute(
            ExternalStatusCommandDTO(
                order_reference=reference,
                transaction_status=notification.transaction_status,
                fraud_status=notification.fraud_status,
                gross_amount=notification.gross_amount,
                payment_type=notification.payment_type,
            )
        )

        if result.is_err():
            await self._alert_unresolved(notification, result.error)

        return result

    async def _alert_unresolved(self, notification: GatewayTransactionStatus, error: Error) -> None:
        """Alert operators about a notification acknowledged without resolving its order"""
        reference = notification.order_reference
        if error.code in _ALERTED_BY_APPLY:
            return
        if error.code == "ORDER_NOT_FOUND":
            kind = AlertKind.UNKNOWN_ORDER
            message = f"Gateway notification for unknown order {reference}"
        else:
            kind = AlertKind.NOTIFICATION_FAILED
            message = f"Gateway notification for {reference} could not be applied: {error.code}"
        await self.notification_service.send_alert(
            OperatorAlert(
                kind=kind,
                message=message,
                reference=reference,
                details={
                    "transaction_status": notification.transaction_status,
                    "error": error.code,
                    "reason": error.reason,
                },
            )
        )
