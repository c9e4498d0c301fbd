"""SQLAlchemy implementation of OrderRepository

Status changes are conditional UPDATEs guarded by the expected current
status, so two writers racing on the same order cannot both win.
"""

from datetime import datetime
from typing import List, Optional, Sequence
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy import update
from src.app.repositories.order_repository import OrderRepository
from src.domain.order import Order, OrderStatus


class SqlAlchemyOrderRepository(OrderRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, order: Order) -> Order:
        """
        Raises:
            IntegrityError: If the user already has a pending order at the
                tenant (partial unique index) or the reference collides
        """
        self.session.add(order)
        await self.session.flush()
        await self.session.refresh(order)
        return order

    async def get_by_id(self, order_id: str, for_update: bool = False) -> Optional[Order]:
        stmt = select(Order).where(Order.id == order_id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_external_reference(
        self, external_reference: str, for_update: bool = False
    ) -> Optional[Order]:
        stmt = select(Order).where(Order.external_reference == external_reference)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_pending_for(self, user_id: str, tenant_id: str) -> Optional[Order]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .where(Order.tenant_id == tenant_id)
            .where(Order.status == OrderStatus.PENDING)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def transition_status(
        self,
        order: Order,
        new_status: OrderStatus,
        paid_at: Optional[datetime] = None,
        gateway_payment_type: Optional[str] = None,
    ) -> bool:
        """
        UPDATE orders SET status = :new WHERE id = :id AND status = :expected

        Returns:
            True if this call moved the order; the instance is refreshed either way
        """
        values = {"status": new_status, "updated_at": datetime.utcnow()}
        if paid_at is not None:
            values["paid_at"] = paid_at
        if gateway_payment_type is not None:
            values["gateway_payment_type"] = gateway_payment_type

        stmt = (
            update(Order)
            .where(Order.id == order.id)
            .where(Order.status == OrderStatus(order.status))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.refresh(order)
        return result.rowcount == 1

    async def update(self, order: Order) -> Order:
        order.updated_at = datetime.utcnow()
        self.session.add(order)
        await self.session.flush()
        await self.session.refresh(order)
        return order

    async def list_by_user(
        self, user_id: str, statuses: Sequence[OrderStatus], limit: int = 50, offset: int = 0
    ) -> List[Order]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .where(Order.status.in_(list(statuses)))
            .order_by(Order.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_tenant(
        self,
        tenant_id: str,
        status: Optional[OrderStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Order]:
        stmt = select(Order).where(Order.tenant_id == tenant_id)

        if status:
            stmt = stmt.where(Order.status == status)

        stmt = stmt.order_by(Order.created_at.desc()).limit(limit).offset(offset)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())
