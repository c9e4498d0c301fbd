"""Notification Service Interface

Defines the contract for sending operator alerts about payment and ledger
states that need a human.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class AlertKind(str, Enum):
    INVALID_SIGNATURE = "invalid_signature"
    UNKNOWN_ORDER = "unknown_order"
    AMOUNT_MISMATCH = "amount_mismatch"
    FRAUD_REVIEW = "fraud_review"
    PAID_AFTER_CANCEL = "paid_after_cancel"
    LEDGER_DISCREPANCY = "ledger_discrepancy"
    NOTIFICATION_FAILED = "notification_failed"


class OperatorAlert(BaseModel):
    kind: AlertKind
    message: str
    reference: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)
    raised_at: datetime = Field(default_factory=datetime.utcnow)


class NotificationService(ABC):
    """
    Abstract notification service for sending alerts

    Implementations can send notifications via:
    - Webhook (HTTP POST)
    - Logging
    """

    @abstractmethod
    async def send_alert(self, alert: OperatorAlert) -> bool:
        """
        Returns:
            True if notification sent successfully, False otherwise
        """
        pass
