"""Order Item Repository Interface"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.order_item import OrderItem


class OrderItemRepository(ABC):
    """Repository interface for OrderItem persistence"""

    @abstractmethod
    async def create_many(self, items: List[OrderItem]) -> List[OrderItem]:
        """
        Create all line items of an order

        Raises:
            IntegrityError: If any line violates a constraint
        """
        pass

    @abstractmethod
    async def get_by_order_id(self, order_id: str) -> List[OrderItem]:
        pass
