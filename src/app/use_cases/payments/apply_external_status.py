"""
Apply External Status Use Case

Maps gateway transaction states onto the order state machine. Gateways
deliver at least once, so every path here must be safe to repeat.

    capture + accept     -> paid
    capture + other      -> unchanged, flagged for review
    settlement           -> paid
    cancel/deny/expire   -> cancelled
    pending              -> unchanged
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.order_notifier import OrderNotifier
from src.app.services.notification_service import NotificationService, OperatorAlert, AlertKind
from src.app.repositories.order_repository import OrderRepository
from src.app.use_cases.orders.dtos import order_snapshot
from src.app.use_cases.orders.transition import OrderTransitioner
from src.domain.order import Order, OrderStatus
from .dtos import ExternalStatusCommandDTO, ExternalStatusOutcomeDTO

logger = logging.getLogger(__name__)

_CANCELLING_STATUSES = frozenset({"cancel", "deny", "expire"})


def map_gateway_status(transaction_status: str, fraud_status: Optional[str]) -> Optional[OrderStatus]:
    """
    Returns:
        Target order status, or None when the order must stay as it is
    """
    status = (transaction_status or "").lower()
    fraud = (fraud_status or "").lower()

    if status == "capture":
        if fraud == "accept":
            return OrderStatus.PAID
        return None
    if status == "settlement":
        return OrderStatus.PAID
    if status in _CANCELLING_STATUSES:
        return OrderStatus.CANCELLED
    return None


def _amount_matches(gross_amount: str, order: Order) -> bool:
    try:
        return Decimal(gross_amount) == Decimal(order.total_amount)
    except (InvalidOperation, TypeError):
        return False


class ApplyExternalStatus:
    """
    Use Case: Apply a gateway transaction state to an order

    Business Rules:
    1. Only pending orders move on a gateway notification
    2. A repeated notification finds the order already moved and is a no-op
    3. paid requires the reported gross amount to equal the order total;
       otherwise the order stays pending and operators are alerted
    4. A payment reported for an already cancelled order is alerted, never applied
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: OrderRepository,
        transitioner: OrderTransitioner,
        notifier: OrderNotifier,
        notification_service: NotificationService,
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.transitioner = transitioner
        self.notifier = notifier
        self.notification_service = notification_service

    async def execute(self, command: ExternalStatusCommandDTO) -> Result[ExternalStatusOutcomeDTO]:
        reference = command.order_reference
        target = map_gateway_status(command.transaction_status, command.fraud_status)

        try:
            order = await self.order_repo.get_by_external_reference(reference, for_update=True)
            if not order:
                await self.uow.rollback()
                logger.warning(f"Gateway notification for unknown order {reference}")
                return Return.err(
                    Error(
                        code="ORDER_NOT_FOUND",
                        message=f"No order with reference {reference}",
                    )
                )

            order_id = order.id
            current = OrderStatus(order.status)
            total_amount = order.total_amount

            if target is None:
                await self.uow.rollback()
                note = f"transaction_status={command.transaction_status}"
                if (command.transaction_status or "").lower() == "capture":
                    note = f"fraud {command.fraud_status or 'unknown'}, awaiting manual review"
                    await self._alert(
                        AlertKind.FRAUD_REVIEW,
                        f"Payment for order {order_id} flagged for fraud review",
                        reference,
                        {
                            "order_id": order_id,
                            "gross_amount": command.gross_amount,
                            "fraud_status": command.fraud_status,
                        },
                    )
                logger.info(f"Order {order_id} left {current.value}: {note}")
                return Return.ok(self._noop(order_id, reference, current, note))

            if current != OrderStatus.PENDING:
                await self.uow.rollback()
                if current == OrderStatus.CANCELLED and target == OrderStatus.PAID:
                    await self._alert(
                        AlertKind.PAID_AFTER_CANCEL,
                        f"Gateway reports payment for cancelled order {order_id}",
                        reference,
                        {"order_id": order_id, "gross_amount": command.gross_amount},
                    )
                logger.info(
                    f"Order {order_id} already {current.value}, ignoring gateway {command.transaction_status}"
                )
                return Return.ok(self._noop(order_id, reference, current, f"already {current.value}"))

            if target == OrderStatus.PAID and not _amount_matches(command.gross_amount, order):
                await self.uow.rollback()
                logger.error(
                    f"Amount mismatch for order {order_id}: gateway={command.gross_amount} "
                    f"order={total_amount}"
                )
                await self._alert(
                    AlertKind.AMOUNT_MISMATCH,
                    f"Gateway amount differs from total of order {order_id}",
                    reference,
                    {
                        "order_id": order_id,
                        "gross_amount": command.gross_amount,
                        "total_amount": total_amount,
                    },
                )
                return Return.err(
                    Error(
                        code="AMOUNT_MISMATCH",
                        message=f"Gateway amount does not match order {order_id}",
                        reason=f"gateway={command.gross_amount} order={total_amount}",
                    )
                )

            outcome = await self.transitioner.apply(
                order, target, gateway_payment_type=command.payment_type
            )
            if outcome.is_err():
                await self.uow.rollback()
                if outcome.error.code == "STATUS_CONFLICT":
                    return Return.ok(self._noop(order_id, reference, current, "changed concurrently"))
                return Return.err(outcome.error)

            await self.uow.commit()
            await self.notifier.publish(order_snapshot(order))

            return Return.ok(
                ExternalStatusOutcomeDTO(
                    order_id=order.id,
                    order_reference=reference,
                    previous_status=outcome.value.previous_status,
                    current_status=outcome.value.current_status,
                    applied=True,
                    balance_credited=outcome.value.balance_credited,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to apply gateway status for {reference}: {e}")
            return Return.err(
                Error(
                    code="APPLY_EXTERNAL_STATUS_FAILED",
                    message="Failed to apply payment status",
                    reason=str(e),
                )
            )

    def _noop(self, order_id: str, reference: str, current: OrderStatus, note: str) -> ExternalStatusOutcomeDTO:
        return ExternalStatusOutcomeDTO(
            order_id=order_id,
            order_reference=reference,
            previous_status=current,
            current_status=current,
            applied=False,
            note=note,
        )

    async def _alert(self, kind: AlertKind, message: str, reference: str, details: dict) -> None:
        await self.notification_service.send_alert(
            OperatorAlert(kind=kind, message=message, reference=reference, details=details)
        )
