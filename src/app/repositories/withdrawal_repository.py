"""Withdrawal Request Repository Interface"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from src.domain.withdrawal import WithdrawalRequest, WithdrawalStatus


class WithdrawalRepository(ABC):
    """Repository interface for WithdrawalRequest persistence"""

    @abstractmethod
    async def create(self, request: WithdrawalRequest) -> WithdrawalRequest:
        pass

    @abstractmethod
    async def get_by_id(self, request_id: str, for_update: bool = False) -> Optional[WithdrawalRequest]:
        pass

    @abstractmethod
    async def sum_pending(self, tenant_id: str, exclude_id: Optional[str] = None) -> int:
        """Total amount of the tenant's pending requests, optionally excluding one"""
        pass

    @abstractmethod
    async def transition_status(
        self,
        request: WithdrawalRequest,
        new_status: WithdrawalStatus,
        admin_notes: Optional[str],
        processed_at: datetime,
    ) -> bool:
        """
        Move a pending request to new_status

        Returns:
            True if updated, False if the request was no longer pending
        """
        pass

    @abstractmethod
    async def list_by_tenant(
        self,
        tenant_id: str,
        status: Optional[WithdrawalStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[WithdrawalRequest]:
        pass

    @abstractmethod
    async def list_by_status(
        self, status: Optional[WithdrawalStatus] = None, limit: int = 50, offset: int = 0
    ) -> List[WithdrawalRequest]:
        pass
