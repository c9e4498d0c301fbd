"""ApproveWithdrawal Use Case"""

import logging
from datetime import datetime
from typing import Optional

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.tenant_balance_repository import TenantBalanceRepository
from src.app.repositories.withdrawal_repository import WithdrawalRepository
from src.domain.actor import Actor
from src.domain.withdrawal import WithdrawalStatus
from .dtos import WithdrawalResponseDTO, withdrawal_to_dto
from .errors import withdrawal_not_found, already_processed, forbidden, insufficient_balance
from .ledger_postings import LedgerPostings

logger = logging.getLogger(__name__)


class ApproveWithdrawal:
    """
    Use Case: Admin approves a pending withdrawal

    Business Rules:
    1. Only pending requests can be approved
    2. balance - (other pending requests) must still cover the amount, so
       approved plus pending never exceeds the balance
    3. The status change and the debit commit together; a second approval
       finds the request processed and leaves the balance alone
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ledger_repo: TenantBalanceRepository,
        withdrawal_repo: WithdrawalRepository,
        postings: LedgerPostings,
    ):
        self.uow = uow
        self.ledger_repo = ledger_repo
        self.withdrawal_repo = withdrawal_repo
        self.postings = postings

    async def execute(
        self,
        request_id: str,
        admin_notes: Optional[str] = None,
        actor: Optional[Actor] = None,
    ) -> Result[WithdrawalResponseDTO]:
        if actor and not actor.can_settle_withdrawals():
            return Return.err(forbidden())

        try:
            request = await self.withdrawal_repo.get_by_id(request_id, for_update=True)
            if not request:
                await self.uow.rollback()
                return Return.err(withdrawal_not_found(request_id))

            current = WithdrawalStatus(request.status)
            if current != WithdrawalStatus.PENDING:
                await self.uow.rollback()
                logger.warning(f"Withdrawal {request_id} already {current.value}, not approving")
                return Return.err(already_processed(request_id, current.value))

            ledger = await self.ledger_repo.get_by_tenant_id(request.tenant_id, for_update=True)
            balance = ledger.balance if ledger else 0
            other_pending = await self.withdrawal_repo.sum_pending(request.tenant_id, exclude_id=request.id)
            available = balance - other_pending

            amount = request.amount
            if not ledger or amount > available:
                await self.uow.rollback()
                logger.warning(
                    f"Withdrawal {request_id} not covered: balance={balance} "
                    f"other_pending={other_pending} amount={amount}"
                )
                return Return.err(insufficient_balance(available, amount))

            moved = await self.withdrawal_repo.transition_status(
                request, WithdrawalStatus.APPROVED, admin_notes, datetime.utcnow()
            )
            if not moved:
                await self.uow.rollback()
                return Return.err(already_processed(request_id, "unknown"))

            await self.postings.debit_withdrawal(request, ledger)
            await self.uow.commit()

            logger.info(f"Withdrawal {request_id} approved for tenant {request.tenant_id}")
            return Return.ok(withdrawal_to_dto(request))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Approving withdrawal {request_id} failed: {e}")
            return Return.err(
                Error(
                    code="APPROVE_WITHDRAWAL_FAILED",
                    message="Failed to approve withdrawal",
                    reason=str(e),
                )
            )
