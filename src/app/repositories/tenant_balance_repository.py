"""Tenant Balance Repository Interface

Defines the contract for tenant balance persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.tenant_balance import TenantBalance


class TenantBalanceRepository(ABC):
    """
    Repository interface for TenantBalance persistence

    Methods use pessimistic locking (SELECT FOR UPDATE) to ensure
    consistency during concurrent balance postings.
    """

    @abstractmethod
    async def get_by_tenant_id(self, tenant_id: str, for_update: bool = False) -> Optional[TenantBalance]:
        """
        Retrieve balance by tenant ID

        Args:
            tenant_id: Tenant identifier
            for_update: If True, lock the row with SELECT FOR UPDATE (pessimistic lock)
        """
        pass

    @abstractmethod
    async def create(self, ledger: TenantBalance) -> TenantBalance:
        pass

    @abstractmethod
    async def update_balance(self, ledger_id: int, new_balance: int) -> None:
        pass

    @abstractmethod
    async def get_all(self) -> List[TenantBalance]:
        pass
