from typing import Optional
from pydantic import BaseModel, Field

from src.domain.order import OrderStatus


class ExternalStatusCommandDTO(BaseModel):
    """Gateway transaction state normalized for the lifecycle engine"""

    order_reference: str = Field(..., description="External order reference sent to the gateway")
    transaction_status: str = Field(..., description="Gateway status, e.g. settlement, capture, expire")
    fraud_status: Optional[str] = Field(None, description="Gateway fraud verdict (accept/challenge/deny)")
    gross_amount: str = Field(..., description="Amount as reported by the gateway, e.g. '52000.00'")
    payment_type: Optional[str] = Field(None, description="Gateway payment type, e.g. qris")

    class Config:
        json_schema_extra = {
            "example": {
                "order_reference": "ORD-1718000000000-X7K2P9QAB",
                "transaction_status": "settlement",
                "fraud_status": "accept",
                "gross_amount": "52000.00",
                "payment_type": "qris",
            }
        }


class ExternalStatusOutcomeDTO(BaseModel):
    order_id: str
    order_reference: str
    previous_status: OrderStatus
    current_status: OrderStatus
    applied: bool = Field(..., description="False when the notification was a no-op")
    balance_credited: bool = False
    note: Optional[str] = None
