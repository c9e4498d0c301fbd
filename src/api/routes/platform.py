"""Platform API Routes

Service fee income collected by the marketplace (admin only).
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import get_current_actor
from src.api.error import ClientError
from src.api.schemas.withdrawal_request import PlatformPayoutSchema
from src.app.use_cases.balance import (
    LedgerPostings,
    GetPlatformBalance,
    WithdrawPlatformBalance,
    PlatformBalanceDTO,
    PlatformPayoutDTO,
)
from src.adapter.repositories import (
    SqlAlchemyTenantBalanceRepository,
    SqlAlchemyBalanceTransactionRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session
from src.domain.actor import Actor

router = APIRouter(prefix="/platform", tags=["Platform"])


@router.get("/balance", response_model=PlatformBalanceDTO)
async def get_platform_balance(
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
):
    """
    Service fee income held by the platform.

    **Example response:**
    ```json
    {
      "balance": 6000,
      "total_service_fee": 10000,
      "total_paid_out": 4000,
      "last_updated": "2024-01-15T10:30:00Z"
    }
    ```
    """
    use_case = GetPlatformBalance(
        SqlAlchemyTenantBalanceRepository(session),
        SqlAlchemyBalanceTransactionRepository(session),
    )
    result = await use_case.execute(actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/withdrawals", response_model=PlatformPayoutDTO, status_code=status.HTTP_201_CREATED)
async def withdraw_platform_balance(
    request: PlatformPayoutSchema,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
):
    """
    Pay out platform fee income.

    **Returns:**
    - 201: Debited from the platform balance
    - 402: Amount exceeds the platform balance
    - 403: Caller is not an admin
    """
    postings = LedgerPostings(
        SqlAlchemyTenantBalanceRepository(session),
        SqlAlchemyBalanceTransactionRepository(session),
    )
    use_case = WithdrawPlatformBalance(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyTenantBalanceRepository(session),
        postings,
    )
    result = await use_case.execute(request.amount, notes=request.notes, actor=actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
