"""RejectWithdrawal Use Case"""

import logging
from datetime import datetime
from typing import Optional

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.withdrawal_repository import WithdrawalRepository
from src.domain.actor import Actor
from src.domain.withdrawal import WithdrawalStatus
from .dtos import WithdrawalResponseDTO, withdrawal_to_dto
from .errors import withdrawal_not_found, already_processed, forbidden

logger = logging.getLogger(__name__)


class RejectWithdrawal:
    """Rejecting never touches the balance; the held amount becomes available again."""

    def __init__(self, uow: UnitOfWork, withdrawal_repo: WithdrawalRepository):
        self.uow = uow
        self.withdrawal_repo = withdrawal_repo

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
                logger.warning(f"Withdrawal {request_id} already {current.value}, not rejecting")
                return Return.err(already_processed(request_id, current.value))

            moved = await self.withdrawal_repo.transition_status(
                request, WithdrawalStatus.REJECTED, admin_notes, datetime.utcnow()
            )
            if not moved:
                await self.uow.rollback()
                return Return.err(already_processed(request_id, "unknown"))

            await self.uow.commit()
            logger.info(f"Withdrawal {request_id} rejected for tenant {request.tenant_id}")
            return Return.ok(withdrawal_to_dto(request))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Rejecting withdrawal {request_id} failed: {e}")
            return Return.err(
                Error(
                    code="REJECT_WITHDRAWAL_FAILED",
                    message="Failed to reject withdrawal",
                    reason=str(e),
                )
            )
