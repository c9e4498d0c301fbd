"""Request schemas for Order API

Pydantic models for validating incoming HTTP requests.
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from src.domain.order import OrderStatus, PaymentMethod


class OrderLineSchema(BaseModel):
    product_id: str = Field(..., min_length=1, description="Catalog product reference")
    quantity: int = Field(..., description="Units ordered (must be > 0)")


class CheckoutRequestSchema(BaseModel):
    """
    Request schema for checkout

    Used for POST /orders/checkout endpoint. The customer is taken from the
    caller identity, never from the body.
    """

    tenant_id: str = Field(
        ...,
        min_length=1,
        description="Tenant the cart belongs to"
    )

    items: List[OrderLineSchema] = Field(
        default_factory=list,
        description="Cart lines"
    )

    notes: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Free-text note for the seller"
    )

    payment_method: PaymentMethod = Field(
        default=PaymentMethod.GATEWAY,
        description="gateway or cash"
    )

    replace_pending: bool = Field(
        default=False,
        description="Cancel an existing pending order at this tenant instead of resuming it"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "tenant_id": "tenant_123",
                "items": [
                    {"product_id": "prod_nasi_goreng", "quantity": 2},
                    {"product_id": "prod_es_teh", "quantity": 1},
                ],
                "notes": "No chili please",
                "payment_method": "gateway",
                "replace_pending": False,
            }
        }


class UpdateOrderStatusRequestSchema(BaseModel):
    status: OrderStatus = Field(..., description="Target status")


class ChangePaymentMethodRequestSchema(BaseModel):
    payment_method: PaymentMethod = Field(..., description="gateway or cash")
