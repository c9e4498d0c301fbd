from .unit_of_work import UnitOfWork
from .notification_service import NotificationService, OperatorAlert, AlertKind
from .payment_gateway import PaymentGateway, PaymentGatewayError, PaymentGatewayTimeout
from .catalog_store import CatalogStore, CollaboratorError
from .account_directory import AccountDirectory, Profile
from .order_notifier import OrderNotifier, OrderSnapshot, Subscription

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "OperatorAlert",
    "AlertKind",
    "PaymentGateway",
    "PaymentGatewayError",
    "PaymentGatewayTimeout",
    "CatalogStore",
    "CollaboratorError",
    "AccountDirectory",
    "Profile",
    "OrderNotifier",
    "OrderSnapshot",
    "Subscription",
]
