"""SQLAlchemy implementation of WithdrawalRepository"""

from datetime import datetime
from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy import func, update
from src.app.repositories.withdrawal_repository import WithdrawalRepository
from src.domain.withdrawal import WithdrawalRequest, WithdrawalStatus


class SqlAlchemyWithdrawalRepository(WithdrawalRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, request: WithdrawalRequest) -> WithdrawalRequest:
        self.session.add(request)
        await self.session.flush()
        await self.session.refresh(request)
        return request

    async def get_by_id(self, request_id: str, for_update: bool = False) -> Optional[WithdrawalRequest]:
        stmt = select(WithdrawalRequest).where(WithdrawalRequest.id == request_id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def sum_pending(self, tenant_id: str, exclude_id: Optional[str] = None) -> int:
        stmt = (
            select(func.coalesce(func.sum(WithdrawalRequest.amount), 0))
            .where(WithdrawalRequest.tenant_id == tenant_id)
            .where(WithdrawalRequest.status == WithdrawalStatus.PENDING)
        )

        if exclude_id:
            stmt = stmt.where(WithdrawalRequest.id != exclude_id)

        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def transition_status(
        self,
        request: WithdrawalRequest,
        new_status: WithdrawalStatus,
        admin_notes: Optional[str],
        processed_at: datetime,
    ) -> bool:
        stmt = (
            update(WithdrawalRequest)
            .where(WithdrawalRequest.id == request.id)
            .where(WithdrawalRequest.status == WithdrawalStatus.PENDING)
            .values(status=new_status, admin_notes=admin_notes, processed_at=processed_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.refresh(request)
        return result.rowcount == 1

    async def list_by_tenant(
        self,
        tenant_id: str,
        status: Optional[WithdrawalStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[WithdrawalRequest]:
        stmt = select(WithdrawalRequest).where(WithdrawalRequest.tenant_id == tenant_id)

        if status:
            stmt = stmt.where(WithdrawalRequest.status == status)

        stmt = stmt.order_by(WithdrawalRequest.created_at.desc()).limit(limit).offset(offset)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_status(
        self, status: Optional[WithdrawalStatus] = None, limit: int = 50, offset: int = 0
    ) -> List[WithdrawalRequest]:
        stmt = select(WithdrawalRequest)

        if status:
            stmt = stmt.where(WithdrawalRequest.status == status)

        stmt = stmt.order_by(WithdrawalRequest.created_at.asc()).limit(limit).offset(offset)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())
