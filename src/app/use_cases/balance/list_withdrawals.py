"""List Withdrawals Use Case"""

from typing import Optional

from libs.result import Result, Return
from src.app.repositories.withdrawal_repository import WithdrawalRepository
from src.domain.actor import Actor
from src.domain.withdrawal import WithdrawalStatus
from .dtos import WithdrawalListResponseDTO, withdrawal_to_dto
from .errors import forbidden


class ListWithdrawals:
    def __init__(self, withdrawal_repo: WithdrawalRepository):
        self.withdrawal_repo = withdrawal_repo

    async def execute(
        self,
        actor: Actor,
        tenant_id: Optional[str] = None,
        status: Optional[WithdrawalStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Result[WithdrawalListResponseDTO]:
        """
        Sellers see their tenant's history. Admins see one tenant when
        tenant_id is given, otherwise the queue filtered by status.
        """
        if tenant_id is None and actor.can_settle_withdrawals():
            requests = await self.withdrawal_repo.list_by_status(status, limit=limit, offset=offset)
        else:
            target = tenant_id or actor.tenant_id
            if not target or not actor.can_manage_tenant(target):
                return Return.err(forbidden("Not allowed to view this tenant's withdrawals"))
            requests = await self.withdrawal_repo.list_by_tenant(
                target, status=status, limit=limit, offset=offset
            )

        return Return.ok(
            WithdrawalListResponseDTO(
                withdrawals=[withdrawal_to_dto(r) for r in requests],
                limit=limit,
                offset=offset,
            )
        )
