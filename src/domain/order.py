"""Order Domain Entity

One order per checkout attempt. Status moves forward only along the
transition graph below; completed and cancelled are terminal.

    pending    -> paid, completed (cash only), cancelled
    paid       -> processing, completed
    processing -> ready, completed
    ready      -> completed
"""

import secrets
import string
import time
from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, String, text
from src.domain.base import BaseModel, generate_uuid, enum_type


class OrderStatus(str, Enum):
    """Order status values"""
    PENDING = "pending"
    PAID = "paid"
    PROCESSING = "processing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    """How the customer settles the order"""
    GATEWAY = "gateway"
    CASH = "cash"


TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})

ACTIVE_STATUSES = (
    OrderStatus.PENDING,
    OrderStatus.PAID,
    OrderStatus.PROCESSING,
    OrderStatus.READY,
)

HISTORY_STATUSES = (OrderStatus.COMPLETED, OrderStatus.CANCELLED)

# Entering one of these from pending credits the tenant balance.
SETTLED_STATUSES = frozenset({OrderStatus.PAID, OrderStatus.COMPLETED})

_TRANSITIONS = {
    OrderStatus.PENDING: frozenset(
        {OrderStatus.PAID, OrderStatus.COMPLETED, OrderStatus.CANCELLED}
    ),
    OrderStatus.PAID: frozenset({OrderStatus.PROCESSING, OrderStatus.COMPLETED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.READY, OrderStatus.COMPLETED}),
    OrderStatus.READY: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


_REFERENCE_ALPHABET = string.ascii_uppercase + string.digits


def new_external_reference(prefix: str) -> str:
    """PREFIX-<epoch millis>-<9 random chars>, e.g. ORD-1718000000000-X7K2P9QAB"""
    suffix = "".join(secrets.choice(_REFERENCE_ALPHABET) for _ in range(9))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"


def is_terminal(status: OrderStatus) -> bool:
    return OrderStatus(status) in TERMINAL_STATUSES


def can_transition(
    current: OrderStatus, new: OrderStatus, payment_method: PaymentMethod
) -> bool:
    """Check a move against the forward-only transition graph"""
    current = OrderStatus(current)
    new = OrderStatus(new)
    if new not in _TRANSITIONS[current]:
        return False
    if current == OrderStatus.PENDING and new == OrderStatus.COMPLETED:
        return PaymentMethod(payment_method) == PaymentMethod.CASH
    return True


class Order(BaseModel, table=True):
    """
    Order - A customer's order at a single tenant

    Domain Rules:
    - external_reference is globally unique and immutable once set
    - total_amount = subtotal + service_fee, fixed at creation
    - service_fee is captured at creation and never recomputed
    - At most one pending order per (user_id, tenant_id)
    - Line items are immutable; edits mean cancel and recreate
    """

    __tablename__ = "orders"
    __table_args__ = (
        Index("ix_orders_user_id_status", "user_id", "status"),
        Index("ix_orders_tenant_id_status", "tenant_id", "status"),
        Index(
            "uq_orders_one_pending_per_user_tenant",
            "user_id",
            "tenant_id",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Opaque order identifier"
    )

    external_reference: str = Field(
        sa_column=Column(String(64), nullable=False, unique=True, index=True),
        description="Gateway order reference (e.g., ORD-1718000000000-X7K2P9QAB)"
    )

    user_id: str = Field(
        description="Customer who placed the order"
    )

    tenant_id: str = Field(
        description="Tenant (shop) the order belongs to"
    )

    subtotal: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Sum of line item subtotals (minor units)"
    )

    service_fee: int = Field(
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Platform fee captured at creation (minor units)"
    )

    total_amount: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="subtotal + service_fee (minor units)"
    )

    status: OrderStatus = Field(
        default=OrderStatus.PENDING,
        sa_column=Column(enum_type(OrderStatus), nullable=False, default=OrderStatus.PENDING),
        description="Lifecycle status"
    )

    payment_method: PaymentMethod = Field(
        sa_column=Column(enum_type(PaymentMethod), nullable=False),
        description="gateway or cash"
    )

    payment_session_token: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Gateway-issued session token, cleared on method change"
    )

    payment_redirect_url: Optional[str] = Field(
        default=None,
        sa_column=Column(String(512), nullable=True),
        description="Gateway hosted payment page for the session"
    )

    payment_session_expires_at: Optional[datetime] = Field(
        default=None,
        description="When the session token stops being usable"
    )

    gateway_payment_type: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Payment type reported by the gateway (e.g., qris, bank_transfer)"
    )

    notes: Optional[str] = Field(
        default=None,
        description="Free-text customer note"
    )

    paid_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp of first entry into paid/completed"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Order creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    def has_live_session(self, now: Optional[datetime] = None) -> bool:
        if not self.payment_session_token:
            return False
        if self.payment_session_expires_at is None:
            return True
        return self.payment_session_expires_at > (now or datetime.utcnow())

    class Config:
        """SQLModel configuration"""
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
            }
        }
