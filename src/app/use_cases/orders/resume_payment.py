"""ResumePayment Use Case

Returns the order's live payment session, or requests and stores a new one.
"""

import logging
from typing import Optional

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.payment_gateway import PaymentGatewayError
from src.app.repositories.order_repository import OrderRepository
from src.domain.actor import Actor
from src.domain.order import OrderStatus, PaymentMethod
from .dtos import PaymentSessionResponseDTO
from .errors import order_not_found, forbidden, order_not_pending
from .payment_session import PaymentSessionIssuer

logger = logging.getLogger(__name__)


class ResumePayment:
    """
    Use Case: Resume payment for a pending gateway order

    Business Rules:
    1. Only pending orders paid through the gateway have sessions
    2. An unexpired stored token is returned as-is
    3. The order row is locked while a new session is requested, so
       concurrent calls end with one live session
    4. Gateway failure leaves the order unchanged and is reported as
       PAYMENT_GATEWAY_UNAVAILABLE
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: OrderRepository,
        issuer: PaymentSessionIssuer,
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.issuer = issuer

    async def execute(self, order_id: str, actor: Optional[Actor] = None) -> Result[PaymentSessionResponseDTO]:
        """
        Args:
            order_id: Order ID
            actor: Caller; None for internal calls that already authorized the order
        """
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

            if order.payment_method != PaymentMethod.GATEWAY:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="INVALID_PAYMENT_METHOD",
                        message="Order is not paid through the payment gateway",
                    )
                )

            if order.has_live_session():
                live = PaymentSessionResponseDTO(
                    order_id=order.id,
                    payment_session_token=order.payment_session_token,
                    redirect_url=order.payment_redirect_url,
                    expires_at=order.payment_session_expires_at,
                    reused=True,
                )
                await self.uow.rollback()
                return Return.ok(live)

            try:
                session = await self.issuer.issue(order)
            except PaymentGatewayError as e:
                await self.uow.rollback()
                logger.warning(f"Payment session request failed for order {order_id}: {e}")
                return Return.err(
                    Error(
                        code="PAYMENT_GATEWAY_UNAVAILABLE",
                        message="Payment gateway is unavailable, please retry",
                        reason=str(e),
                    )
                )

            await self.uow.commit()

            return Return.ok(
                PaymentSessionResponseDTO(
                    order_id=order.id,
                    payment_session_token=session.token,
                    redirect_url=session.redirect_url,
                    expires_at=order.payment_session_expires_at,
                    reused=False,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Resume payment failed for order {order_id}: {e}")
            return Return.err(
                Error(
                    code="RESUME_PAYMENT_FAILED",
                    message="Failed to resume payment",
                    reason=str(e),
                )
            )
