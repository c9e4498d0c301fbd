"""Checkout Use Case

Orchestrates order creation and payment session setup for a cart.
"""

import logging
from typing import List, Optional

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.order_notifier import OrderNotifier
from src.app.repositories.order_repository import OrderRepository
from src.domain.order import Order, OrderStatus, PaymentMethod
from src.domain.order_item import OrderItem
from .create_order import CreateOrder
from .dtos import CheckoutCommandDTO, CheckoutResponseDTO, order_to_dto, order_snapshot
from .resume_payment import ResumePayment

logger = logging.getLogger(__name__)


class Checkout:
    """
    Use Case: Checkout a cart at one tenant

    Business Rules:
    1. A user has at most one pending order per tenant. An existing one is
       resumed (resumed=True) unless replace_pending is set, in which case
       it is cancelled in the same transaction that creates the new order
    2. Gateway orders get a payment session after the order is committed;
       a gateway failure still returns the order, with no token
    3. Cash orders never contact the gateway and wait for seller confirmation
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: OrderRepository,
        create_order: CreateOrder,
        resume_payment: ResumePayment,
        notifier: OrderNotifier,
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.create_order = create_order
        self.resume_payment = resume_payment
        self.notifier = notifier

    async def execute(self, command: CheckoutCommandDTO) -> Result[CheckoutResponseDTO]:
        try:
            existing = await self.order_repo.get_pending_for(command.user_id, command.tenant_id)
        except Exception as e:
            logger.error(f"Pending order lookup failed for user {command.user_id}: {e}")
            return Return.err(Error(code="CHECKOUT_FAILED", message="Checkout failed", reason=str(e)))

        if existing and not command.replace_pending:
            logger.info(
                f"User {command.user_id} has pending order {existing.id} at tenant {command.tenant_id}, resuming"
            )
            return Return.ok(await self._with_session(existing, resumed=True))

        replaced = None
        if existing:
            try:
                moved = await self.order_repo.transition_status(existing, OrderStatus.CANCELLED)
            except Exception as e:
                await self.uow.rollback()
                logger.error(f"Failed to cancel pending order {existing.id}: {e}")
                return Return.err(Error(code="CHECKOUT_FAILED", message="Checkout failed", reason=str(e)))
            if not moved:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="STATUS_CONFLICT",
                        message="Pending order changed while replacing it, please retry",
                    )
                )
            replaced = existing
            logger.info(f"Replacing pending order {existing.id} for user {command.user_id}")

        # create_order commits the cancellation above together with the new order
        placed = await self.create_order.place(command)
        if placed.is_err():
            await self.uow.rollback()
            return Return.err(placed.error)
        order, items = placed.value

        if replaced:
            await self.notifier.publish(order_snapshot(replaced))
        await self.notifier.publish(order_snapshot(order))

        return Return.ok(await self._with_session(order, resumed=False, items=items))

    async def _with_session(
        self, order: Order, resumed: bool, items: Optional[List[OrderItem]] = None
    ) -> CheckoutResponseDTO:
        # Resuming may roll the session back, which expires every loaded entity
        order_dto = order_to_dto(order, items)
        token = None
        redirect_url = None

        if order_dto.payment_method == PaymentMethod.GATEWAY:
            session = await self.resume_payment.execute(order_dto.id)
            if session.is_ok():
                token = session.value.payment_session_token
                redirect_url = session.value.redirect_url
                order_dto.payment_session_token = token
                order_dto.payment_redirect_url = redirect_url
            else:
                logger.warning(
                    f"Order {order_dto.id} left without payment session: {session.error.code}"
                )

        return CheckoutResponseDTO(
            order=order_dto,
            payment_session_token=token,
            redirect_url=redirect_url,
            resumed=resumed,
        )
