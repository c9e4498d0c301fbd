"""UpdateOrderStatus Use Case

Seller/admin driven status changes along the forward-only graph.
"""

import logging

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.order_notifier import OrderNotifier
from src.app.repositories.order_repository import OrderRepository
from src.domain.order import OrderStatus, can_transition, is_terminal
from .dtos import UpdateOrderStatusCommandDTO, StatusChangeResponseDTO, order_to_dto, order_snapshot
from .errors import order_not_found, forbidden
from .transition import OrderTransitioner

logger = logging.getLogger(__name__)


class UpdateOrderStatus:
    """
    Use Case: Manual order status transition

    Business Rules:
    1. Only the tenant's seller or an admin may change status
    2. Terminal orders (completed, cancelled) never change again
    3. Moves must follow the transition graph; pending -> completed is cash only
    4. First entry into paid/completed credits the tenant, through the same
       guard the gateway notification path uses
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

    async def execute(self, command: UpdateOrderStatusCommandDTO) -> Result[StatusChangeResponseDTO]:
        order_id = command.order_id
        try:
            order = await self.order_repo.get_by_id(order_id, for_update=True)
            if not order:
                await self.uow.rollback()
                return Return.err(order_not_found(order_id))

            if not command.actor.can_manage_tenant(order.tenant_id):
                await self.uow.rollback()
                return Return.err(forbidden(order_id))

            current = OrderStatus(order.status)
            if is_terminal(current):
                await self.uow.rollback()
                logger.warning(f"Refused status change on terminal order {order_id} ({current.value})")
                return Return.err(
                    Error(
                        code="ORDER_TERMINAL",
                        message=f"Order is already {current.value}",
                        reason=f"requested={command.status.value}",
                    )
                )

            if not can_transition(current, command.status, order.payment_method):
                await self.uow.rollback()
                logger.warning(f"Rejected transition {current.value} -> {command.status.value} for order {order_id}")
                return Return.err(
                    Error(
                        code="INVALID_TRANSITION",
                        message=f"Cannot move order from {current.value} to {command.status.value}",
                    )
                )

            outcome = await self.transitioner.apply(order, command.status)
            if outcome.is_err():
                await self.uow.rollback()
                return Return.err(outcome.error)

            await self.uow.commit()
            await self.notifier.publish(order_snapshot(order))

            return Return.ok(
                StatusChangeResponseDTO(
                    order=order_to_dto(order),
                    previous_status=outcome.value.previous_status,
                    balance_credited=outcome.value.balance_credited,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Status update failed for order {order_id}: {e}")
            return Return.err(
                Error(
                    code="UPDATE_ORDER_STATUS_FAILED",
                    message="Failed to update order status",
                    reason=str(e),
                )
            )
