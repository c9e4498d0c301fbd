"""Payment session issuing

Requests a gateway session for a pending order and stores the token on it.
Does not commit.
"""

import logging
from datetime import datetime, timedelta

from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.order_item_repository import OrderItemRepository
from src.app.services.account_directory import AccountDirectory
from src.app.services.catalog_store import CollaboratorError
from src.app.services.payment_gateway import (
    PaymentGateway,
    PaymentSession,
    GatewayItem,
    CustomerDetails,
)
from src.domain.order import Order

logger = logging.getLogger(__name__)


class PaymentSessionIssuer:
    def __init__(
        self,
        order_repo: OrderRepository,
        item_repo: OrderItemRepository,
        gateway: PaymentGateway,
        directory: AccountDirectory,
        session_ttl_seconds: int = 86400,
    ):
        self.order_repo = order_repo
        self.item_repo = item_repo
        self.gateway = gateway
        self.directory = directory
        self.session_ttl_seconds = session_ttl_seconds

    async def issue(self, order: Order) -> PaymentSession:
        """
        Raises:
            PaymentGatewayError: session could not be created (order untouched)
        """
        items = await self.item_repo.get_by_order_id(order.id)
        gateway_items = [
            GatewayItem(
                id=item.product_id,
                name=item.product_name,
                price=item.unit_price,
                quantity=item.quantity,
            )
            for item in items
        ]

        customer = await self._customer(order.user_id)

        session = await self.gateway.create_session(
            order_reference=order.external_reference,
            gross_amount=order.total_amount,
            items=gateway_items,
            customer=customer,
        )

        order.payment_session_token = session.token
        order.payment_redirect_url = session.redirect_url
        order.payment_session_expires_at = datetime.utcnow() + timedelta(seconds=self.session_ttl_seconds)
        await self.order_repo.update(order)

        logger.info(f"Issued payment session for order {order.external_reference}")
        return session

    async def _customer(self, user_id: str) -> CustomerDetails:
        try:
            profile = await self.directory.get_profile(user_id)
        except CollaboratorError as e:
            logger.warning(f"Using default customer details for user {user_id}: {e}")
            return CustomerDetails()
        if not profile:
            return CustomerDetails()
        return CustomerDetails(
            first_name=profile.name or "Customer",
            phone=profile.phone or "",
            email=profile.email,
        )
