"""Request schema for gateway notifications"""

from typing import Optional, Union
from pydantic import BaseModel, Field, field_validator


class GatewayNotificationSchema(BaseModel):
    """
    Midtrans HTTP notification body

    Only the fields the order core consumes are declared; the gateway sends
    many more, which are ignored.
    """

    order_id: str = Field(..., description="External order reference")
    transaction_status: str = Field(..., description="capture, settlement, pending, deny, cancel, expire")
    fraud_status: Optional[str] = Field(default=None, description="accept, challenge, deny")
    gross_amount: str = Field(..., description="Amount as a decimal string, e.g. '52000.00'")
    status_code: Optional[str] = Field(default=None, description="Gateway status code, e.g. '200'")
    signature_key: Optional[str] = Field(default=None, description="SHA-512 signature")
    payment_type: Optional[str] = Field(default=None, description="qris, bank_transfer, gopay, ...")

    @field_validator("gross_amount", "status_code", mode="before")
    @classmethod
    def as_text(cls, v: Union[str, int, float, None]):
        """Signatures are computed over the exact text the gateway sent"""
        if v is None:
            return v
        return str(v)
