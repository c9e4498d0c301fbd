from .unit_of_work import SqlAlchemyUnitOfWork
from .notification_service import (
    LoggingNotificationService,
    WebhookNotificationService,
    CompositeNotificationService,
    create_notification_service,
)
from .payment_gateway import MidtransPaymentGateway
from .catalog_store import HttpCatalogStore
from .account_directory import HttpAccountDirectory
from .order_notifier import InMemoryOrderNotifier

__all__ = [
    "SqlAlchemyUnitOfWork",
    "LoggingNotificationService",
    "WebhookNotificationService",
    "CompositeNotificationService",
    "create_notification_service",
    "MidtransPaymentGateway",
    "HttpCatalogStore",
    "HttpAccountDirectory",
    "InMemoryOrderNotifier",
]
