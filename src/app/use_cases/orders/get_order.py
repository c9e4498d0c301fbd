"""GetOrder Use Case

Read-only order detail with line items. Also the refetch path clients use
after a realtime reconnect.
"""

from libs.result import Result, Return
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.order_item_repository import OrderItemRepository
from src.domain.actor import Actor
from .dtos import OrderResponseDTO, order_to_dto
from .errors import order_not_found, forbidden


class GetOrder:
    def __init__(self, order_repo: OrderRepository, item_repo: OrderItemRepository):
        self.order_repo = order_repo
        self.item_repo = item_repo

    async def execute(self, order_id: str, actor: Actor) -> Result[OrderResponseDTO]:
        order = await self.order_repo.get_by_id(order_id)
        if not order:
            return Return.err(order_not_found(order_id))

        if not actor.can_access_order(order.user_id, order.tenant_id):
            return Return.err(forbidden(order_id))

        items = await self.item_repo.get_by_order_id(order.id)
        return Return.ok(order_to_dto(order, items))
