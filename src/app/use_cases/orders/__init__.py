"""Order lifecycle use cases"""
from .create_order import CreateOrder
from .checkout import Checkout
from .resume_payment import ResumePayment
from .change_payment_method import ChangePaymentMethod
from .cancel_order import CancelOrder
from .update_order_status import UpdateOrderStatus
from .get_order import GetOrder
from .list_orders import ListOrders
from .payment_session import PaymentSessionIssuer
from .transition import OrderTransitioner, TransitionOutcome
from .dtos import (
    OrderLineCommandDTO,
    CreateOrderCommandDTO,
    CheckoutCommandDTO,
    UpdateOrderStatusCommandDTO,
    OrderItemDTO,
    OrderResponseDTO,
    CheckoutResponseDTO,
    PaymentSessionResponseDTO,
    StatusChangeResponseDTO,
    OrderListResponseDTO,
)

__all__ = [
    "CreateOrder",
    "Checkout",
    "ResumePayment",
    "ChangePaymentMethod",
    "CancelOrder",
    "UpdateOrderStatus",
    "GetOrder",
    "ListOrders",
    "PaymentSessionIssuer",
    "OrderTransitioner",
    "TransitionOutcome",
    "OrderLineCommandDTO",
    "CreateOrderCommandDTO",
    "CheckoutCommandDTO",
    "UpdateOrderStatusCommandDTO",
    "OrderItemDTO",
    "OrderResponseDTO",
    "CheckoutResponseDTO",
    "PaymentSessionResponseDTO",
    "StatusChangeResponseDTO",
    "OrderListResponseDTO",
]
