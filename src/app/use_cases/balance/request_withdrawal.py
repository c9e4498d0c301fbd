"""RequestWithdrawal Use Case

Seller asks to pay out part of the tenant balance.
"""

import logging
from typing import Optional

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.tenant_balance_repository import TenantBalanceRepository
from src.app.repositories.withdrawal_repository import WithdrawalRepository
from src.domain.actor import Actor
from src.domain.tenant_balance import PLATFORM_TENANT_ID
from src.domain.withdrawal import WithdrawalRequest, WithdrawalStatus
from .dtos import WithdrawalCommandDTO, WithdrawalResponseDTO, withdrawal_to_dto
from .errors import forbidden, insufficient_balance

logger = logging.getLogger(__name__)


class RequestWithdrawal:
    """
    Use Case: Request a withdrawal

    Business Rules:
    1. amount must be at least the configured minimum
    2. amount must not exceed balance minus the tenant's other pending requests
    3. The ledger row is locked while checking, so two concurrent requests
       cannot both pass against the same funds
    4. The balance itself is untouched until approval
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ledger_repo: TenantBalanceRepository,
        withdrawal_repo: WithdrawalRepository,
        minimum_amount: int = 10000,
    ):
        self.uow = uow
        self.ledger_repo = ledger_repo
        self.withdrawal_repo = withdrawal_repo
        self.minimum_amount = minimum_amount

    async def execute(
        self, command: WithdrawalCommandDTO, actor: Optional[Actor] = None
    ) -> Result[WithdrawalResponseDTO]:
        if actor and not actor.can_manage_tenant(command.tenant_id):
            return Return.err(forbidden("Not allowed to withdraw from this tenant"))
        if command.tenant_id == PLATFORM_TENANT_ID:
            return Return.err(forbidden("Platform fees are paid out through the platform balance"))

        if command.amount < self.minimum_amount:
            return Return.err(
                Error(
                    code="AMOUNT_BELOW_MINIMUM",
                    message=f"Minimum withdrawal is {self.minimum_amount}",
                    reason=f"amount={command.amount}",
                )
            )

        try:
            ledger = await self.ledger_repo.get_by_tenant_id(command.tenant_id, for_update=True)
            balance = ledger.balance if ledger else 0
            pending = await self.withdrawal_repo.sum_pending(command.tenant_id)
            available = balance - pending

            if command.amount > available:
                await self.uow.rollback()
                logger.warning(
                    f"Withdrawal of {command.amount} refused for tenant {command.tenant_id}: "
                    f"balance={balance} pending={pending}"
                )
                return Return.err(insufficient_balance(available, command.amount))

            request = await self.withdrawal_repo.create(
                WithdrawalRequest(
                    tenant_id=command.tenant_id,
                    amount=command.amount,
                    bank_name=command.bank_name,
                    account_number=command.account_number,
                    account_name=command.account_name,
                    status=WithdrawalStatus.PENDING,
                    notes=command.notes,
                )
            )
            await self.uow.commit()

            logger.info(
                f"Withdrawal {request.id} requested by tenant {command.tenant_id} for {command.amount}"
            )
            return Return.ok(withdrawal_to_dto(request))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Withdrawal request failed for tenant {command.tenant_id}: {e}")
            return Return.err(
                Error(
                    code="WITHDRAWAL_REQUEST_FAILED",
                    message="Failed to request withdrawal",
                    reason=str(e),
                )
            )
