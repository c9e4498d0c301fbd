"""Order status transitions

Shared by manual status updates and gateway notifications, so both paths
go through the same conditional update and the same credit-once rule.
"""

import logging
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from libs.result import Result, Return, Error
from src.app.repositories.order_repository import OrderRepository
from src.app.use_cases.balance.ledger_postings import LedgerPostings
from src.domain.order import Order, OrderStatus, SETTLED_STATUSES

logger = logging.getLogger(__name__)


class TransitionOutcome(BaseModel):
    previous_status: OrderStatus
    current_status: OrderStatus
    balance_credited: bool = False


class OrderTransitioner:
    """
    Applies one status change inside the caller's unit of work.

    The update only succeeds if the stored status still equals the status
    the caller read. The tenant is credited when the order first leaves
    pending for paid or completed. Callers commit.
    """

    def __init__(self, order_repo: OrderRepository, postings: LedgerPostings):
        self.order_repo = order_repo
        self.postings = postings

    async def apply(
        self,
        order: Order,
        new_status: OrderStatus,
        gateway_payment_type: Optional[str] = None,
    ) -> Result[TransitionOutcome]:
        previous = OrderStatus(order.status)
        paid_at = None
        if new_status in SETTLED_STATUSES and order.paid_at is None:
            paid_at = datetime.utcnow()

        moved = await self.order_repo.transition_status(
            order,
            new_status,
            paid_at=paid_at,
            gateway_payment_type=gateway_payment_type,
        )
        if not moved:
            logger.warning(
                f"Order {order.id} changed concurrently; {previous.value} -> {new_status.value} not applied"
            )
            return Return.err(
                Error(
                    code="STATUS_CONFLICT",
                    message="Order status was changed by another request",
                    reason=f"expected={previous.value}",
                )
            )

        credited = False
        if previous == OrderStatus.PENDING and new_status in SETTLED_STATUSES:
            credited = await self.postings.credit_order(order)

        logger.info(f"Order {order.id}: {previous.value} -> {new_status.value} (credited={credited})")
        return Return.ok(
            TransitionOutcome(
                previous_status=previous,
                current_status=new_status,
                balance_credited=credited,
            )
        )
