from .base import BaseModel, generate_uuid
from .order import Order, OrderStatus, PaymentMethod, can_transition, is_terminal
from .order_item import OrderItem
from .tenant_balance import TenantBalance, PLATFORM_TENANT_ID
from .balance_transaction import BalanceTransaction, TransactionType
from .withdrawal import WithdrawalRequest, WithdrawalStatus
from .cart import Cart, CartLine, ProductSnapshot, CartTenantConflict, InvalidQuantity
from .actor import Actor, Role

__all__ = [
    "BaseModel",
    "generate_uuid",
    "Order",
    "OrderStatus",
    "PaymentMethod",
    "can_transition",
    "is_terminal",
    "OrderItem",
    "TenantBalance",
    "PLATFORM_TENANT_ID",
    "BalanceTransaction",
    "TransactionType",
    "WithdrawalRequest",
    "WithdrawalStatus",
    "Cart",
    "CartLine",
    "ProductSnapshot",
    "CartTenantConflict",
    "InvalidQuantity",
    "Actor",
    "Role",
]
