"""Payment Gateway Interface

Defines the contract for the external payment processor: session creation,
status polling, and notification signature checks.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from pydantic import BaseModel, Field


class PaymentGatewayError(Exception):
    """Gateway rejected the request or could not be reached"""


class PaymentGatewayTimeout(PaymentGatewayError):
    """Gateway did not answer within the configured timeout"""


class GatewayItem(BaseModel):
    id: str
    name: str
    price: int = Field(..., description="Unit price (minor units)")
    quantity: int


class CustomerDetails(BaseModel):
    first_name: str = "Customer"
    phone: str = ""
    email: Optional[str] = None


class PaymentSession(BaseModel):
    token: str
    redirect_url: Optional[str] = None


class GatewayTransactionStatus(BaseModel):
    """Normalized gateway transaction state (from webhook or status poll)"""

    order_reference: str
    transaction_status: str
    fraud_status: Optional[str] = None
    gross_amount: str
    status_code: Optional[str] = None
    payment_type: Optional[str] = None
    signature_key: Optional[str] = None


class PaymentGateway(ABC):
    """
    Payment gateway client contract

    create_session: caller passes gross_amount equal to the order total; the
    client reconciles the item list to it exactly.
    """

    @abstractmethod
    async def create_session(
        self,
        order_reference: str,
        gross_amount: int,
        items: List[GatewayItem],
        customer: CustomerDetails,
    ) -> PaymentSession:
        """
        Raises:
            PaymentGatewayTimeout: call exceeded the timeout
            PaymentGatewayError: gateway refused the transaction
        """
        pass

    @abstractmethod
    async def get_status(self, order_reference: str) -> Optional[GatewayTransactionStatus]:
        """
        Poll the gateway for an order's transaction

        Returns:
            None if the gateway has no transaction for the reference yet
        """
        pass

    @abstractmethod
    def verify_signature(self, notification: GatewayTransactionStatus) -> bool:
        """Check the keyed signature carried by a notification"""
        pass
