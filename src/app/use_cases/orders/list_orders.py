"""
List Orders Use Case

Customers list their own active or historical orders; sellers list their
tenant's orders; admins list any tenant's orders.
"""
from typing import Optional

from libs.result import Result, Return, Error
from src.app.repositories.order_repository import OrderRepository
from src.domain.actor import Actor, Role, UnknownRole
from src.domain.order import OrderStatus, ACTIVE_STATUSES, HISTORY_STATUSES
from .dtos import OrderListResponseDTO, order_to_dto


class ListOrders:
    def __init__(self, order_repo: OrderRepository):
        self.order_repo = order_repo

    async def execute(
        self,
        actor: Actor,
        history: bool = False,
        status: Optional[OrderStatus] = None,
        tenant_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Result[OrderListResponseDTO]:
        """
        Args:
            actor: Caller
            history: Customers only; completed/cancelled instead of active orders
            status: Sellers/admins only; filter on one status
            tenant_id: Admins only; tenant to list
        """
        if actor.role == Role.CUSTOMER:
            statuses = HISTORY_STATUSES if history else ACTIVE_STATUSES
            orders = await self.order_repo.list_by_user(actor.user_id, statuses, limit=limit, offset=offset)
        elif actor.role in (Role.SELLER, Role.ADMIN):
            target_tenant = actor.tenant_id if actor.role == Role.SELLER else tenant_id
            if not target_tenant:
                return Return.err(
                    Error(code="TENANT_REQUIRED", message="A tenant must be given to list its orders")
                )
            if not actor.can_manage_tenant(target_tenant):
                return Return.err(Error(code="FORBIDDEN", message="Not allowed to list this tenant's orders"))
            orders = await self.order_repo.list_by_tenant(target_tenant, status=status, limit=limit, offset=offset)
        else:
            raise UnknownRole(actor.role)

        return Return.ok(
            OrderListResponseDTO(
                orders=[order_to_dto(o) for o in orders],
                limit=limit,
                offset=offset,
            )
        )
