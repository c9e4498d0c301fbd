"""SQLAlchemy implementation of TenantBalanceRepository

Provides persistence for TenantBalance entities with pessimistic locking
support so concurrent postings against one tenant serialize.
"""

from typing import List, Optional
from datetime import datetime
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.tenant_balance_repository import TenantBalanceRepository
from src.domain.tenant_balance import TenantBalance


class SqlAlchemyTenantBalanceRepository(TenantBalanceRepository):
    """
    SQLAlchemy implementation of TenantBalanceRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE (ignored by SQLite, which
      serializes writers on its own)
    - Balance updates flushed inside the caller's transaction
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_tenant_id(self, tenant_id: str, for_update: bool = False) -> Optional[TenantBalance]:
        """
        Retrieve balance by tenant ID with optional row-level locking

        Args:
            tenant_id: Tenant identifier
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            TenantBalance if found, None otherwise
        """
        stmt = select(TenantBalance).where(TenantBalance.tenant_id == tenant_id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, ledger_id: int) -> Optional[TenantBalance]:
        stmt = select(TenantBalance).where(TenantBalance.id == ledger_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, ledger: TenantBalance) -> TenantBalance:
        self.session.add(ledger)
        await self.session.flush()
        await self.session.refresh(ledger)
        return ledger

    async def update_balance(self, ledger_id: int, new_balance: int) -> None:
        """
        Update ledger balance and updated_at timestamp

        Note:
            Should be called within a transaction with the ledger already locked
        """
        ledger = await self.get_by_id(ledger_id)
        if ledger:
            ledger.balance = new_balance
            ledger.updated_at = datetime.utcnow()
            self.session.add(ledger)
            await self.session.flush()

    async def get_all(self) -> List[TenantBalance]:
        stmt = select(TenantBalance).order_by(TenantBalance.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
