"""Data Transfer Objects for Order Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from src.app.services.order_notifier import OrderSnapshot
from src.domain.actor import Actor
from src.domain.order import Order, OrderStatus, PaymentMethod
from src.domain.order_item import OrderItem


class OrderLineCommandDTO(BaseModel):
    product_id: str = Field(..., description="Catalog product reference")
    quantity: int = Field(..., description="Units ordered (must be > 0)")


class CreateOrderCommandDTO(BaseModel):
    """
    Command DTO for creating an order

    Used as input to CreateOrder use case.
    """

    user_id: str = Field(
        ...,
        description="Customer placing the order"
    )

    tenant_id: str = Field(
        ...,
        description="Tenant the order is placed at"
    )

    items: List[OrderLineCommandDTO] = Field(
        default_factory=list,
        description="Requested products and quantities"
    )

    notes: Optional[str] = Field(
        default=None,
        description="Free-text note for the seller"
    )

    payment_method: PaymentMethod = Field(
        ...,
        description="gateway or cash"
    )

    service_fee: int = Field(
        ...,
        ge=0,
        description="Platform fee captured on the order (minor units)"
    )


class CheckoutCommandDTO(CreateOrderCommandDTO):
    """
    Command DTO for checkout

    replace_pending=True cancels the caller's pending order at the tenant
    before creating the new one. Otherwise the pending order is resumed.
    """

    replace_pending: bool = Field(
        default=False,
        description="Explicitly discard an existing pending order at this tenant"
    )


class UpdateOrderStatusCommandDTO(BaseModel):
    order_id: str
    status: OrderStatus
    actor: Actor


class OrderItemDTO(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    unit_price: int
    subtotal: int


class OrderResponseDTO(BaseModel):
    """Order as returned to callers"""

    id: str
    external_reference: str
    user_id: str
    tenant_id: str
    subtotal: int
    service_fee: int
    total_amount: int
    status: OrderStatus
    payment_method: PaymentMethod
    gateway_payment_type: Optional[str] = None
    payment_session_token: Optional[str] = None
    payment_redirect_url: Optional[str] = None
    notes: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    items: Optional[List[OrderItemDTO]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "id": "0b6f4c2e-5d7e-4b8a-9a43-1f7c7c0d2f11",
                "external_reference": "ORD-1718000000000-X7K2P9QAB",
                "user_id": "user_123",
                "tenant_id": "tenant_abc",
                "subtotal": 38000,
                "service_fee": 2000,
                "total_amount": 40000,
                "status": "pending",
                "payment_method": "gateway",
                "payment_session_token": "66e4fa55-fdac-4ef9-91b5-733b97d1b862",
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-01T00:00:00Z"
            }
        }


class CheckoutResponseDTO(BaseModel):
    order: OrderResponseDTO
    payment_session_token: Optional[str] = None
    redirect_url: Optional[str] = None
    resumed: bool = Field(
        default=False,
        description="True when an existing pending order was returned instead of a new one"
    )


class PaymentSessionResponseDTO(BaseModel):
    order_id: str
    payment_session_token: str
    redirect_url: Optional[str] = None
    expires_at: Optional[datetime] = None
    reused: bool = Field(
        default=False,
        description="True when the stored, unexpired session was returned"
    )


class StatusChangeResponseDTO(BaseModel):
    order: OrderResponseDTO
    previous_status: OrderStatus
    balance_credited: bool = False


class OrderListResponseDTO(BaseModel):
    orders: List[OrderResponseDTO]
    limit: int
    offset: int


def item_to_dto(item: OrderItem) -> OrderItemDTO:
    return OrderItemDTO(
        product_id=item.product_id,
        product_name=item.product_name,
        quantity=item.quantity,
        unit_price=item.unit_price,
        subtotal=item.subtotal,
    )


def order_to_dto(order: Order, items: Optional[List[OrderItem]] = None) -> OrderResponseDTO:
    return OrderResponseDTO(
        id=order.id,
        external_reference=order.external_reference,
        user_id=order.user_id,
        tenant_id=order.tenant_id,
        subtotal=order.subtotal,
        service_fee=order.service_fee,
        total_amount=order.total_amount,
        status=order.status,
        payment_method=order.payment_method,
        gateway_payment_type=order.gateway_payment_type,
        payment_session_token=order.payment_session_token,
        payment_redirect_url=order.payment_redirect_url,
        notes=order.notes,
        paid_at=order.paid_at,
        created_at=order.created_at,
        updated_at=order.updated_at,
        items=[item_to_dto(i) for i in items] if items is not None else None,
    )


def order_snapshot(order: Order) -> OrderSnapshot:
    return OrderSnapshot(
        id=order.id,
        external_reference=order.external_reference,
        user_id=order.user_id,
        tenant_id=order.tenant_id,
        status=OrderStatus(order.status).value,
        payment_method=PaymentMethod(order.payment_method).value,
        total_amount=order.total_amount,
        paid_at=order.paid_at,
        updated_at=order.updated_at,
    )
