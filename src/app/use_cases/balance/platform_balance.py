"""Platform balance use cases

Service fees are credited to the platform ledger by LedgerPostings when an
order settles. Admins read that balance and pay it out here.
"""

import logging
from typing import Optional

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.tenant_balance_repository import TenantBalanceRepository
from src.app.repositories.balance_transaction_repository import BalanceTransactionRepository
from src.domain.actor import Actor
from src.domain.balance_transaction import TransactionType
from src.domain.tenant_balance import PLATFORM_TENANT_ID
from .dtos import PlatformBalanceDTO, PlatformPayoutDTO
from .errors import forbidden, insufficient_balance
from .ledger_postings import LedgerPostings

logger = logging.getLogger(__name__)


class GetPlatformBalance:
    def __init__(self, ledger_repo: TenantBalanceRepository, transaction_repo: BalanceTransactionRepository):
        self.ledger_repo = ledger_repo
        self.transaction_repo = transaction_repo

    async def execute(self, actor: Optional[Actor] = None) -> Result[PlatformBalanceDTO]:
        if actor and not actor.can_settle_withdrawals():
            return Return.err(forbidden("Not allowed to view the platform balance"))

        ledger = await self.ledger_repo.get_by_tenant_id(PLATFORM_TENANT_ID)
        if not ledger:
            return Return.ok(PlatformBalanceDTO(balance=0, total_service_fee=0, total_paid_out=0))

        return Return.ok(
            PlatformBalanceDTO(
                balance=ledger.balance,
                total_service_fee=await self.transaction_repo.get_sum_by_type(
                    ledger.id, TransactionType.SERVICE_FEE
                ),
                total_paid_out=await self.transaction_repo.get_sum_by_type(
                    ledger.id, TransactionType.PLATFORM_PAYOUT
                ),
                last_updated=ledger.updated_at,
            )
        )


class WithdrawPlatformBalance:
    """
    Use Case: Admin pays out platform service fee income

    Business Rules:
    1. Admins only
    2. amount must be positive and covered by the platform balance
    3. The debit is recorded as a platform_payout transaction
    """

    def __init__(self, uow: UnitOfWork, ledger_repo: TenantBalanceRepository, postings: LedgerPostings):
        self.uow = uow
        self.ledger_repo = ledger_repo
        self.postings = postings

    async def execute(
        self, amount: int, notes: Optional[str] = None, actor: Optional[Actor] = None
    ) -> Result[PlatformPayoutDTO]:
        if actor and not actor.can_settle_withdrawals():
            return Return.err(forbidden("Not allowed to withdraw the platform balance"))
        if amount <= 0:
            return Return.err(Error(code="INVALID_AMOUNT", message="Amount must be positive"))

        try:
            ledger = await self.ledger_repo.get_by_tenant_id(PLATFORM_TENANT_ID, for_update=True)
            balance = ledger.balance if ledger else 0
            if not ledger or amount > balance:
                await self.uow.rollback()
                logger.warning(f"Platform payout of {amount} refused: balance={balance}")
                return Return.err(insufficient_balance(balance, amount))

            transaction = await self.postings.debit_platform(ledger, amount, notes)
            payout = PlatformPayoutDTO(
                transaction_id=transaction.id,
                amount=transaction.amount,
                balance_after=transaction.balance_after,
                notes=transaction.notes,
                created_at=transaction.created_at,
            )
            await self.uow.commit()

            return Return.ok(payout)

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Platform payout of {amount} failed: {e}")
            return Return.err(
                Error(
                    code="PLATFORM_PAYOUT_FAILED",
                    message="Failed to withdraw platform balance",
                    reason=str(e),
                )
            )
