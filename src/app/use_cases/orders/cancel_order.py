"""CancelOrder Use Case"""

import logging
from typing import Optional

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.order_notifier import OrderNotifier
from src.app.repositories.order_repository import OrderRepository
from src.domain.actor import Actor
from src.domain.order import OrderStatus
from .dtos import OrderResponseDTO, order_to_dto, order_snapshot
from .errors import order_not_found, forbidden, order_not_pending
from .transition import OrderTransitioner

logger = logging.getLogger(__name__)


class CancelOrder:
    """
    Use Case: Cancel a pending order

    Only pending orders can be cancelled; paid orders need a refund flow,
    which this service does not offer. Cancelling anything else returns
    ORDER_NOT_PENDING and leaves the order untouched.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: OrderRepository,
        transitioner: OrderTransitioner,
        notifier: OrderNotifier,
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.transitioner = transitioner
        self.notifier = notifier

    async def execute(self, order_id: str, actor: Optional[Actor] = None) -> Result[OrderResponseDTO]:
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
                logger.warning(f"Refused to cancel order {order_id} in status {current.value}")
                return Return.err(order_not_pending(order_id, current.value))

            outcome = await self.transitioner.apply(order, OrderStatus.CANCELLED)
            if outcome.is_err():
                await self.uow.rollback()
                return Return.err(outcome.error)

            await self.uow.commit()
            await self.notifier.publish(order_snapshot(order))
            return Return.ok(order_to_dto(order))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Cancel failed for order {order_id}: {e}")
            return Return.err(
                Error(
                    code="CANCEL_ORDER_FAILED",
                    message="Failed to cancel order",
                    reason=str(e),
                )
            )
