"""SQLAlchemy implementation of BalanceTransactionRepository

Append-only; the unique idempotency_key makes a repeated posting fail at
the database even if the application-level check is raced.
"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy import func, case
from src.app.repositories.balance_transaction_repository import BalanceTransactionRepository
from src.domain.balance_transaction import BalanceTransaction, TransactionType, DEBIT_TYPES


class SqlAlchemyBalanceTransactionRepository(BalanceTransactionRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: BalanceTransaction) -> BalanceTransaction:
        """
        Raises:
            IntegrityError: If idempotency_key already exists
        """
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def get_by_idempotency_key(self, idempotency_key: str) -> Optional[BalanceTransaction]:
        stmt = select(BalanceTransaction).where(
            BalanceTransaction.idempotency_key == idempotency_key
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_transaction_sum_by_ledger(self, ledger_id: int) -> int:
        signed_amount = case(
            (
                BalanceTransaction.transaction_type.in_(list(DEBIT_TYPES)),
                -BalanceTransaction.amount,
            ),
            else_=BalanceTransaction.amount,
        )
        stmt = select(func.coalesce(func.sum(signed_amount), 0)).where(
            BalanceTransaction.ledger_id == ledger_id
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def get_sum_by_type(self, ledger_id: int, transaction_type: TransactionType) -> int:
        stmt = select(func.coalesce(func.sum(BalanceTransaction.amount), 0)).where(
            BalanceTransaction.ledger_id == ledger_id,
            BalanceTransaction.transaction_type == transaction_type,
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
