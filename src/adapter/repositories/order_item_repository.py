"""SQLAlchemy implementation of OrderItemRepository"""

from typing import List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.order_item_repository import OrderItemRepository
from src.domain.order_item import OrderItem


class SqlAlchemyOrderItemRepository(OrderItemRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_many(self, items: List[OrderItem]) -> List[OrderItem]:
        self.session.add_all(items)
        await self.session.flush()
        for item in items:
            await self.session.refresh(item)
        return items

    async def get_by_order_id(self, order_id: str) -> List[OrderItem]:
        stmt = select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
