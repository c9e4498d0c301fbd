"""Get Balance Use Case

Retrieves a tenant's balance, pending withdrawals and available amount.
"""

from typing import Optional

from libs.result import Result, Return
from src.app.repositories.tenant_balance_repository import TenantBalanceRepository
from src.app.repositories.withdrawal_repository import WithdrawalRepository
from src.domain.actor import Actor
from .dtos import TenantBalanceDTO
from .errors import forbidden


class GetBalance:
    """
    Get Balance Use Case

    Read-only. A tenant that never earned has no ledger yet and gets a
    zero summary.
    """

    def __init__(self, ledger_repo: TenantBalanceRepository, withdrawal_repo: WithdrawalRepository):
        self.ledger_repo = ledger_repo
        self.withdrawal_repo = withdrawal_repo

    async def execute(self, tenant_id: str, actor: Optional[Actor] = None) -> Result[TenantBalanceDTO]:
        """
        Args:
            tenant_id: The tenant identifier
            actor: Caller, checked against the tenant when given

        Errors:
            FORBIDDEN: Caller cannot see this tenant's balance
        """
        if actor and not actor.can_manage_tenant(tenant_id):
            return Return.err(forbidden("Not allowed to view this tenant's balance"))

        ledger = await self.ledger_repo.get_by_tenant_id(tenant_id)
        pending = await self.withdrawal_repo.sum_pending(tenant_id)
        balance = ledger.balance if ledger else 0

        return Return.ok(
            TenantBalanceDTO(
                tenant_id=tenant_id,
                balance=balance,
                pending_withdrawals=pending,
                available=balance - pending,
                last_updated=ledger.updated_at if ledger else None,
            )
        )
