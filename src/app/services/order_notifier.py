"""Order Notifier Interface

Pushes order snapshots to realtime subscribers. Delivery is fire-and-forget:
clients also refetch on (re)connect, so a dropped message never hides a
status change.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Awaitable, Callable, Optional
from pydantic import BaseModel


class OrderSnapshot(BaseModel):
    id: str
    external_reference: str
    user_id: str
    tenant_id: str
    status: str
    payment_method: str
    total_amount: int
    paid_at: Optional[datetime] = None
    updated_at: datetime


OrderCallback = Callable[[OrderSnapshot], Awaitable[None]]


def order_channel(order_id: str) -> str:
    return f"order:{order_id}"


def tenant_channel(tenant_id: str) -> str:
    return f"tenant:{tenant_id}"


class Subscription(ABC):
    @abstractmethod
    def unsubscribe(self) -> None:
        """Stop delivery. Safe to call any number of times."""
        pass


class OrderNotifier(ABC):
    @abstractmethod
    def subscribe(self, channel: str, callback: OrderCallback) -> Subscription:
        pass

    @abstractmethod
    async def publish(self, snapshot: OrderSnapshot) -> None:
        """Queue delivery to the order's channel and its tenant's channel; never blocks on subscribers, never raises"""
        pass

    async def close(self) -> None:
        """Stop background delivery"""
        pass
