"""Balance Transaction Repository Interface

Defines the contract for balance transaction persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.balance_transaction import BalanceTransaction, TransactionType


class BalanceTransactionRepository(ABC):
    """
    Repository interface for BalanceTransaction persistence

    Transactions are immutable and append-only for audit trail.
    Exactly-once postings are enforced via unique idempotency_key.
    """

    @abstractmethod
    async def create(self, transaction: BalanceTransaction) -> BalanceTransaction:
        """
        Raises:
            IntegrityError: If idempotency_key already exists (duplicate posting)
        """
        pass

    @abstractmethod
    async def get_by_idempotency_key(self, idempotency_key: str) -> Optional[BalanceTransaction]:
        pass

    @abstractmethod
    async def get_transaction_sum_by_ledger(self, ledger_id: int) -> int:
        """Credits minus debits recorded for a ledger"""
        pass

    @abstractmethod
    async def get_sum_by_type(self, ledger_id: int, transaction_type: TransactionType) -> int:
        pass
