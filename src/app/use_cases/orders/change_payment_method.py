"""ChangePaymentMethod Use Case"""

import logging
from typing import Optional

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.order_notifier import OrderNotifier
from src.app.repositories.order_repository import OrderRepository
from src.domain.actor import Actor
from src.domain.order import OrderStatus, PaymentMethod
from .dtos import OrderResponseDTO, order_to_dto, order_snapshot
from .errors import order_not_found, forbidden, order_not_pending

logger = logging.getLogger(__name__)


class ChangePaymentMethod:
    """
    Use Case: Switch a pending order between gateway and cash

    Gateway sessions are bound to a method/amount combination, so any stored
    session is dropped and the next resume requests a fresh one.
    """

    def __init__(self, uow: UnitOfWork, order_repo: OrderRepository, notifier: OrderNotifier):
        self.uow = uow
        self.order_repo = order_repo
        self.notifier = notifier

    async def execute(
        self, order_id: str, payment_method: PaymentMethod, actor: Optional[Actor] = None
    ) -> Result[OrderResponseDTO]:
        try:
            order = await self.order_repo.get_by_id(order_id, for_update=True)
            if not order:
                await self.uow.rollback()
                return Return.err(order_not_found(order_id))

            if actor and not actor.can_access_order(order.user_id, order.tenant_id):
                await self.uow.rollback()
                return Return.err(forbidden(order_id))

            current = OrderStatus(order.status)
            if current != OrderStatus.PENDING:
                await self.uow.rollback()
                return Return.err(order_not_pending(order_id, current.value))

            order.payment_method = payment_method
            order.payment_session_token = None
            order.payment_redirect_url = None
            order.payment_session_expires_at = None
            order = await self.order_repo.update(order)
            await self.uow.commit()
            await self.notifier.publish(order_snapshot(order))

            logger.info(f"Order {order_id} payment method set to {payment_method.value}")
            return Return.ok(order_to_dto(order))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Change payment method failed for order {order_id}: {e}")
            return Return.err(
                Error(
                    code="CHANGE_PAYMENT_METHOD_FAILED",
                    message="Failed to change payment method",
                    reason=str(e),
                )
            )
