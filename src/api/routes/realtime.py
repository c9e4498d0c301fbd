"""Realtime order updates over websockets

A client first receives a reconciliation snapshot read from the database,
then every change published for the channel. Reconnecting clients get a
fresh snapshot, so a message dropped while disconnected is never the only
signal of a status change.

Messages:
    {"type": "snapshot", "order": {...}}            (order channel)
    {"type": "snapshot", "orders": [{...}, ...]}    (tenant channel)
    {"type": "order_update", "order": {...}}
"""

import logging
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import actor_from_websocket
from src.app.services.order_notifier import OrderNotifier, OrderSnapshot, order_channel, tenant_channel
from src.app.use_cases.orders import GetOrder, ListOrders
from src.adapter.repositories import SqlAlchemyOrderRepository, SqlAlchemyOrderItemRepository
from src.depends import get_session, get_order_notifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ws", tags=["Realtime"])

CLOSE_UNAUTHENTICATED = 4401
CLOSE_FORBIDDEN = 4403
CLOSE_NOT_FOUND = 4404


async def _pump(websocket: WebSocket, notifier: OrderNotifier, channel: str) -> None:
    async def forward(snapshot: OrderSnapshot) -> None:
        await websocket.send_json({"type": "order_update", "order": snapshot.model_dump(mode="json")})

    subscription = notifier.subscribe(channel, forward)
    try:
        while True:
            message = await websocket.receive_text()
            if message == "ping":
                await websocket.send_text("pong")
    except WebSocketDisconnect:
        logger.debug(f"Websocket on {channel} disconnected")
    finally:
        subscription.unsubscribe()


@router.websocket("/orders/{order_id}")
async def order_updates(
    websocket: WebSocket,
    order_id: str,
    session: AsyncSession = Depends(get_session),
    notifier: OrderNotifier = Depends(get_order_notifier),
):
    await websocket.accept()
    actor = actor_from_websocket(websocket)
    if actor is None:
        await websocket.close(code=CLOSE_UNAUTHENTICATED)
        return

    result = await GetOrder(
        SqlAlchemyOrderRepository(session), SqlAlchemyOrderItemRepository(session)
    ).execute(order_id, actor)
    if result.is_err():
        code = CLOSE_FORBIDDEN if result.error.code == "FORBIDDEN" else CLOSE_NOT_FOUND
        await websocket.close(code=code)
        return

    await session.rollback()
    await websocket.send_json({"type": "snapshot", "order": result.value.model_dump(mode="json")})
    await _pump(websocket, notifier, order_channel(order_id))


@router.websocket("/tenants/{tenant_id}")
async def tenant_updates(
    websocket: WebSocket,
    tenant_id: str,
    session: AsyncSession = Depends(get_session),
    notifier: OrderNotifier = Depends(get_order_notifier),
):
    await websocket.accept()
    actor = actor_from_websocket(websocket)
    if actor is None:
        await websocket.close(code=CLOSE_UNAUTHENTICATED)
        return
    if not actor.can_manage_tenant(tenant_id):
        await websocket.close(code=CLOSE_FORBIDDEN)
        return

    result = await ListOrders(SqlAlchemyOrderRepository(session)).execute(actor, tenant_id=tenant_id)
    if result.is_err():
        await websocket.close(code=CLOSE_FORBIDDEN)
        return

    await session.rollback()
    orders = [order.model_dump(mode="json") for order in result.value.orders]
    await websocket.send_json({"type": "snapshot", "orders": orders})
    await _pump(websocket, notifier, tenant_channel(tenant_id))
