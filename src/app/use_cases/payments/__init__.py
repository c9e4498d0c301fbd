"""Payment notification and status-sync use cases"""
from .apply_external_status import ApplyExternalStatus, map_gateway_status
from .handle_notification import HandlePaymentNotification
from .sync_payment_status import SyncPaymentStatus
from .dtos import ExternalStatusCommandDTO, ExternalStatusOutcomeDTO

__all__ = [
    "ApplyExternalStatus",
    "map_gateway_status",
    "HandlePaymentNotification",
    "SyncPaymentStatus",
    "ExternalStatusCommandDTO",
    "ExternalStatusOutcomeDTO",
]
