"""Withdrawal API Routes

Tenant balance, seller withdrawal requests and admin settlement.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.api.auth import get_current_actor
from src.api.error import ClientError
from src.api.schemas.withdrawal_request import WithdrawalRequestSchema, ProcessWithdrawalSchema
from src.app.use_cases.balance import (
    LedgerPostings,
    RequestWithdrawal,
    ApproveWithdrawal,
    RejectWithdrawal,
    GetBalance,
    ListWithdrawals,
    WithdrawalCommandDTO,
    WithdrawalResponseDTO,
    WithdrawalListResponseDTO,
    TenantBalanceDTO,
)
from src.adapter.repositories import (
    SqlAlchemyTenantBalanceRepository,
    SqlAlchemyBalanceTransactionRepository,
    SqlAlchemyWithdrawalRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session
from src.domain.actor import Actor
from src.domain.withdrawal import WithdrawalStatus

router = APIRouter(tags=["Withdrawals"])


@router.get("/tenants/{tenant_id}/balance", response_model=TenantBalanceDTO)
async def get_balance(
    tenant_id: str,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
):
    """
    Balance summary for a tenant.

    **Example response:**
    ```json
    {
      "tenant_id": "tenant_123",
      "balance": 50000,
      "pending_withdrawals": 30000,
      "available": 20000,
      "last_updated": "2024-01-15T10:30:00Z"
    }
    ```
    """
    use_case = GetBalance(SqlAlchemyTenantBalanceRepository(session), SqlAlchemyWithdrawalRepository(session))
    result = await use_case.execute(tenant_id, actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/withdrawals",
    response_model=WithdrawalResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        402: {
            "description": "Amount exceeds balance minus pending withdrawals",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_BALANCE",
                            "message": "Insufficient balance: available 20000, requested 25000",
                        }
                    }
                }
            },
        }
    },
)
async def request_withdrawal(
    request: WithdrawalRequestSchema,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
):
    """
    Request a payout of part of the tenant balance.

    **Returns:**
    - 201: Request recorded as pending
    - 400: Below the minimum withdrawal
    - 402: Not enough available balance
    - 403: Caller does not manage the tenant
    """
    tenant_id = request.tenant_id or actor.tenant_id
    if not tenant_id:
        raise ClientError(Error(code="TENANT_REQUIRED", message="tenant_id is required"))

    use_case = RequestWithdrawal(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyTenantBalanceRepository(session),
        SqlAlchemyWithdrawalRepository(session),
        minimum_amount=ApplicationConfig.WITHDRAWAL_MINIMUM_AMOUNT,
    )
    command = WithdrawalCommandDTO(
        tenant_id=tenant_id,
        amount=request.amount,
        bank_name=request.bank_name,
        account_number=request.account_number,
        account_name=request.account_name,
        notes=request.notes,
    )
    result = await use_case.execute(command, actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/withdrawals", response_model=WithdrawalListResponseDTO)
async def list_withdrawals(
    tenant_id: Optional[str] = Query(None, description="Tenant to list; admins may omit it to see the queue"),
    withdrawal_status: Optional[WithdrawalStatus] = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
):
    use_case = ListWithdrawals(SqlAlchemyWithdrawalRepository(session))
    result = await use_case.execute(
        actor, tenant_id=tenant_id, status=withdrawal_status, limit=limit, offset=offset
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/withdrawals/{request_id}/approve", response_model=WithdrawalResponseDTO)
async def approve_withdrawal(
    request_id: str,
    request: Optional[ProcessWithdrawalSchema] = None,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
):
    """
    Approve a pending withdrawal and debit the tenant balance (admin only).

    **Returns:**
    - 200: Approved and debited
    - 402: Balance no longer covers the request
    - 409: Already approved or rejected
    """
    postings = LedgerPostings(
        SqlAlchemyTenantBalanceRepository(session),
        SqlAlchemyBalanceTransactionRepository(session),
    )
    use_case = ApproveWithdrawal(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyTenantBalanceRepository(session),
        SqlAlchemyWithdrawalRepository(session),
        postings,
    )
    admin_notes = request.admin_notes if request else None
    result = await use_case.execute(request_id, admin_notes=admin_notes, actor=actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/withdrawals/{request_id}/reject", response_model=WithdrawalResponseDTO)
async def reject_withdrawal(
    request_id: str,
    request: Optional[ProcessWithdrawalSchema] = None,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
):
    """Reject a pending withdrawal (admin only). The balance is untouched."""
    use_case = RejectWithdrawal(SqlAlchemyUnitOfWork(session), SqlAlchemyWithdrawalRepository(session))
    admin_notes = request.admin_notes if request else None
    result = await use_case.execute(request_id, admin_notes=admin_notes, actor=actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
