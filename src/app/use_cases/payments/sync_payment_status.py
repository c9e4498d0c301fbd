"""SyncPaymentStatus Use Case

Recovers orders whose webhook never arrived by polling the gateway.
"""

import logging
from typing import Optional

from libs.result import Result, Return, Error
from src.app.services.payment_gateway import PaymentGateway, PaymentGatewayError
from src.app.repositories.order_repository import OrderRepository
from src.app.use_cases.orders.errors import order_not_found, forbidden
from src.domain.actor import Actor
from src.domain.order import OrderStatus, PaymentMethod
from .apply_external_status import ApplyExternalStatus
from .dtos import ExternalStatusCommandDTO, ExternalStatusOutcomeDTO

logger = logging.getLogger(__name__)


class SyncPaymentStatus:
    def __init__(
        self,
        order_repo: OrderRepository,
        gateway: PaymentGateway,
        apply_status: ApplyExternalStatus,
    ):
        self.order_repo = order_repo
        self.gateway = gateway
        self.apply_status = apply_status

    async def execute(self, order_id: str, actor: Optional[Actor] = None) -> Result[ExternalStatusOutcomeDTO]:
        order = await self.order_repo.get_by_id(order_id)
        if not order:
            return Return.err(order_not_found(order_id))
        if actor and not actor.can_access_order(order.user_id, order.tenant_id):
            return Return.err(forbidden(order_id))

        current = OrderStatus(order.status)
        if current != OrderStatus.PENDING or order.payment_method != PaymentMethod.GATEWAY:
            return Return.ok(
                ExternalStatusOutcomeDTO(
                    order_id=order.id,
                    order_reference=order.external_reference,
                    previous_status=current,
                    current_status=current,
                    applied=False,
                    note="nothing to sync",
                )
            )

        try:
            status = await self.gateway.get_status(order.external_reference)
        except PaymentGatewayError as e:
            logger.error(f"Status poll failed for order {order.id}: {e}")
            return Return.err(
                Error(
                    code="PAYMENT_GATEWAY_UNAVAILABLE",
                    message="Payment gateway is unavailable, try again later",
                    reason=str(e),
                )
            )

        if status is None:
            logger.info(f"Gateway has no transaction for order {order.id} yet")
            return Return.ok(
                ExternalStatusOutcomeDTO(
                    order_id=order.id,
                    order_reference=order.external_reference,
                    previous_status=current,
                    current_status=current,
                    applied=False,
                    note="no gateway transaction yet",
                )
            )

        return await self.apply_status.execute(
            ExternalStatusCommandDTO(
                order_reference=order.external_reference,
                transaction_status=status.transaction_status,
                fraud_status=status.fraud_status,
                gross_amount=status.gross_amount,
                payment_type=status.payment_type,
            )
        )
