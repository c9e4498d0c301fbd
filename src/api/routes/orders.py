"""Order API Routes

Checkout, order queries, payment resume and status changes.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.auth import get_current_actor
from src.api.error import ClientError
from src.api.schemas.order_request import (
    CheckoutRequestSchema,
    UpdateOrderStatusRequestSchema,
    ChangePaymentMethodRequestSchema,
)
from src.app.services.payment_gateway import PaymentGateway
from src.app.services.catalog_store import CatalogStore
from src.app.services.account_directory import AccountDirectory
from src.app.services.order_notifier import OrderNotifier
from src.app.use_cases.balance.ledger_postings import LedgerPostings
from src.app.use_cases.orders import (
    Checkout,
    CreateOrder,
    ResumePayment,
    PaymentSessionIssuer,
    ChangePaymentMethod,
    CancelOrder,
    UpdateOrderStatus,
    GetOrder,
    ListOrders,
    OrderTransitioner,
    CheckoutCommandDTO,
    OrderLineCommandDTO,
    UpdateOrderStatusCommandDTO,
    CheckoutResponseDTO,
    OrderResponseDTO,
    OrderListResponseDTO,
    PaymentSessionResponseDTO,
    StatusChangeResponseDTO,
)
from src.adapter.repositories import (
    SqlAlchemyOrderRepository,
    SqlAlchemyOrderItemRepository,
    SqlAlchemyTenantBalanceRepository,
    SqlAlchemyBalanceTransactionRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import (
    get_session,
    get_payment_gateway,
    get_catalog_store,
    get_account_directory,
    get_order_notifier,
)
from src.domain.actor import Actor
from src.domain.order import OrderStatus

router = APIRouter(prefix="/orders", tags=["Orders"])


def build_transitioner(session: AsyncSession) -> OrderTransitioner:
    postings = LedgerPostings(
        SqlAlchemyTenantBalanceRepository(session),
        SqlAlchemyBalanceTransactionRepository(session),
    )
    return OrderTransitioner(SqlAlchemyOrderRepository(session), postings)


def build_resume_payment(
    session: AsyncSession, gateway: PaymentGateway, directory: AccountDirectory
) -> ResumePayment:
    order_repo = SqlAlchemyOrderRepository(session)
    issuer = PaymentSessionIssuer(
        order_repo,
        SqlAlchemyOrderItemRepository(session),
        gateway,
        directory,
        session_ttl_seconds=ApplicationConfig.PAYMENT_SESSION_TTL_SECONDS,
    )
    return ResumePayment(SqlAlchemyUnitOfWork(session), order_repo, issuer)


@router.post(
    "/checkout",
    response_model=CheckoutResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Empty cart, unknown product or product from another tenant",
            "content": {
                "application/json": {
                    "example": {"error": {"code": "EMPTY_CART", "message": "Cart is empty"}}
                }
            },
        },
        409: {"description": "A pending order was created concurrently"},
    },
)
async def checkout(
    request: CheckoutRequestSchema,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    catalog: CatalogStore = Depends(get_catalog_store),
    directory: AccountDirectory = Depends(get_account_directory),
    notifier: OrderNotifier = Depends(get_order_notifier),
):
    """
    Checkout the caller's cart at one tenant.

    If the caller already has a pending order at the tenant it is returned
    with `resumed=true` instead of creating a new one, unless
    `replace_pending` is set. Gateway orders come back with a payment
    session token; when the gateway is unavailable the order is still
    created and `payment_session_token` is null (retry with
    `POST /orders/{id}/payment-session`).
    """
    uow = SqlAlchemyUnitOfWork(session)
    order_repo = SqlAlchemyOrderRepository(session)
    create_order = CreateOrder(
        uow,
        order_repo,
        SqlAlchemyOrderItemRepository(session),
        catalog,
        reference_prefix=ApplicationConfig.ORDER_REFERENCE_PREFIX,
    )
    resume_payment = build_resume_payment(session, gateway, directory)

    command = CheckoutCommandDTO(
        user_id=actor.user_id,
        tenant_id=request.tenant_id,
        items=[
            OrderLineCommandDTO(product_id=line.product_id, quantity=line.quantity)
            for line in request.items
        ],
        notes=request.notes,
        payment_method=request.payment_method,
        service_fee=ApplicationConfig.SERVICE_FEE,
        replace_pending=request.replace_pending,
    )

    use_case = Checkout(uow, order_repo, create_order, resume_payment, notifier)
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("", response_model=OrderListResponseDTO)
async def list_orders(
    history: bool = Query(False, description="Customers: completed/cancelled instead of active orders"),
    order_status: Optional[OrderStatus] = Query(None, alias="status", description="Sellers/admins: filter by status"),
    tenant_id: Optional[str] = Query(None, description="Admins: tenant to list"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
):
    """
    List orders visible to the caller.

    - customers: their own active orders (`pending, paid, processing, ready`)
      or, with `history=true`, completed and cancelled ones
    - sellers: their tenant's orders, optionally filtered by `status`
    - admins: any tenant's orders (`tenant_id` required)
    """
    use_case = ListOrders(SqlAlchemyOrderRepository(session))
    result = await use_case.execute(
        actor,
        history=history,
        status=order_status,
        tenant_id=tenant_id,
        limit=limit,
        offset=offset,
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{order_id}", response_model=OrderResponseDTO)
async def get_order(
    order_id: str,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
):
    """Order detail with line items; also the refetch after a realtime reconnect."""
    use_case = GetOrder(SqlAlchemyOrderRepository(session), SqlAlchemyOrderItemRepository(session))
    result = await use_case.execute(order_id, actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{order_id}/payment-session", response_model=PaymentSessionResponseDTO)
async def resume_payment(
    order_id: str,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    directory: AccountDirectory = Depends(get_account_directory),
):
    """
    Return the live payment session of a pending gateway order, or request
    a new one when there is none or it expired.

    **Returns:**
    - 200: Session (`reused=true` when the stored session is still live)
    - 409: Order is no longer pending
    - 502: Gateway unavailable; the order is unchanged, retry later
    """
    use_case = build_resume_payment(session, gateway, directory)
    result = await use_case.execute(order_id, actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.put("/{order_id}/payment-method", response_model=OrderResponseDTO)
async def change_payment_method(
    order_id: str,
    request: ChangePaymentMethodRequestSchema,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
    notifier: OrderNotifier = Depends(get_order_notifier),
):
    """Switch a pending order between gateway and cash; clears any payment session."""
    use_case = ChangePaymentMethod(
        SqlAlchemyUnitOfWork(session), SqlAlchemyOrderRepository(session), notifier
    )
    result = await use_case.execute(order_id, request.payment_method, actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{order_id}/cancel", response_model=OrderResponseDTO)
async def cancel_order(
    order_id: str,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
    notifier: OrderNotifier = Depends(get_order_notifier),
):
    """
    Cancel a pending order.

    Paid orders cannot be cancelled here (409 ORDER_NOT_PENDING).
    """
    use_case = CancelOrder(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyOrderRepository(session),
        build_transitioner(session),
        notifier,
    )
    result = await use_case.execute(order_id, actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.put("/{order_id}/status", response_model=StatusChangeResponseDTO)
async def update_order_status(
    order_id: str,
    request: UpdateOrderStatusRequestSchema,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
    notifier: OrderNotifier = Depends(get_order_notifier),
):
    """
    Seller/admin status change along the forward-only graph.

    **Returns:**
    - 200: Status changed; `balance_credited` tells whether this change
      credited the tenant
    - 403: Caller does not manage the order's tenant
    - 409: ORDER_TERMINAL, INVALID_TRANSITION or STATUS_CONFLICT
    """
    use_case = UpdateOrderStatus(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyOrderRepository(session),
        build_transitioner(session),
        notifier,
    )
    command = UpdateOrderStatusCommandDTO(order_id=order_id, status=request.status, actor=actor)
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
