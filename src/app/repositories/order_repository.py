"""Order Repository Interface

Defines the contract for order persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence
from src.domain.order import Order, OrderStatus


class OrderRepository(ABC):
    """
    Repository interface for Order persistence

    Status changes go through transition_status, a conditional update
    guarded by the expected current status. This is what keeps concurrent
    webhooks and manual confirmations from double-applying a transition.
    """

    @abstractmethod
    async def create(self, order: Order) -> Order:
        """
        Create a new order

        Raises:
            IntegrityError: If the user already has a pending order at the tenant
        """
        pass

    @abstractmethod
    async def get_by_id(self, order_id: str, for_update: bool = False) -> Optional[Order]:
        """
        Retrieve order by ID

        Args:
            order_id: Order ID
            for_update: If True, lock the row with SELECT FOR UPDATE
        """
        pass

    @abstractmethod
    async def get_by_external_reference(
        self, external_reference: str, for_update: bool = False
    ) -> Optional[Order]:
        """Retrieve order by its gateway order reference"""
        pass

    @abstractmethod
    async def get_pending_for(self, user_id: str, tenant_id: str) -> Optional[Order]:
        """Retrieve the user's pending order at a tenant, if any"""
        pass

    @abstractmethod
    async def transition_status(
        self,
        order: Order,
        new_status: OrderStatus,
        paid_at: Optional[datetime] = None,
        gateway_payment_type: Optional[str] = None,
    ) -> bool:
        """
        Move order to new_status only if its stored status still equals order.status

        Returns:
            True if the row was updated (order is refreshed), False if another
            writer changed the status first
        """
        pass

    @abstractmethod
    async def update(self, order: Order) -> Order:
        """Persist non-status changes (session token, payment method)"""
        pass

    @abstractmethod
    async def list_by_user(
        self, user_id: str, statuses: Sequence[OrderStatus], limit: int = 50, offset: int = 0
    ) -> List[Order]:
        pass

    @abstractmethod
    async def list_by_tenant(
        self,
        tenant_id: str,
        status: Optional[OrderStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Order]:
        pass
