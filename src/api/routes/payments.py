"""Payment API Routes

Gateway notification receiver and manual payment status sync.
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.auth import get_current_actor
from src.api.error import ClientError
from src.api.routes.orders import build_transitioner
from src.api.schemas.payment_request import GatewayNotificationSchema
from src.app.services.payment_gateway import PaymentGateway, GatewayTransactionStatus
from src.app.services.order_notifier import OrderNotifier
from src.app.services.notification_service import NotificationService
from src.app.use_cases.payments import (
    ApplyExternalStatus,
    HandlePaymentNotification,
    SyncPaymentStatus,
    ExternalStatusOutcomeDTO,
)
from src.adapter.repositories import SqlAlchemyOrderRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import (
    get_session,
    get_payment_gateway,
    get_order_notifier,
    get_notification_service,
)
from src.domain.actor import Actor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])


def build_apply_external_status(
    session: AsyncSession, notifier: OrderNotifier, alerts: NotificationService
) -> ApplyExternalStatus:
    return ApplyExternalStatus(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyOrderRepository(session),
        build_transitioner(session),
        notifier,
        alerts,
    )


@router.post(
    "/notifications",
    status_code=status.HTTP_200_OK,
    responses={
        401: {
            "description": "Signature check failed",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_SIGNATURE",
                            "message": "Notification signature is invalid",
                        }
                    }
                }
            },
        }
    },
)
async def receive_notification(
    request: GatewayNotificationSchema,
    session: AsyncSession = Depends(get_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    notifier: OrderNotifier = Depends(get_order_notifier),
    alerts: NotificationService = Depends(get_notification_service),
):
    """
    Gateway HTTP notification endpoint.

    Every authenticated notification is acknowledged with 200, including
    no-ops, unknown orders and amount mismatches, so the gateway stops
    retrying. Those cases are logged and raised as operator alerts. Only a
    failed signature check answers 401.
    """
    use_case = HandlePaymentNotification(
        gateway,
        build_apply_external_status(session, notifier, alerts),
        alerts,
        reject_invalid_signature=ApplicationConfig.REJECT_INVALID_WEBHOOK_SIGNATURE,
    )
    notification = GatewayTransactionStatus(
        order_reference=request.order_id,
        transaction_status=request.transaction_status,
        fraud_status=request.fraud_status,
        gross_amount=request.gross_amount,
        status_code=request.status_code,
        payment_type=request.payment_type,
        signature_key=request.signature_key,
    )
    result = await use_case.execute(notification)

    if result.is_err():
        if result.error.code == "INVALID_SIGNATURE":
            raise ClientError(result.error, status_code=status.HTTP_401_UNAUTHORIZED)
        logger.error(
            f"Notification for {request.order_id} acknowledged unresolved: "
            f"{result.error.code} {result.error.message}"
        )

    return {"status": "ok"}


@router.post("/orders/{order_id}/sync", response_model=ExternalStatusOutcomeDTO)
async def sync_payment_status(
    order_id: str,
    session: AsyncSession = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    notifier: OrderNotifier = Depends(get_order_notifier),
    alerts: NotificationService = Depends(get_notification_service),
):
    """
    Poll the gateway for a pending order and apply what it reports.

    Recovers orders whose notification never arrived. "No transaction yet"
    is a no-op (`applied=false`).
    """
    use_case = SyncPaymentStatus(
        SqlAlchemyOrderRepository(session),
        gateway,
        build_apply_external_status(session, notifier, alerts),
    )
    result = await use_case.execute(order_id, actor)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
