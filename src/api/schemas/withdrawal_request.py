"""Request schemas for Withdrawal API"""

from typing import Optional
from pydantic import BaseModel, Field


class WithdrawalRequestSchema(BaseModel):
    """
    Request schema for a withdrawal

    Used for POST /withdrawals. Sellers withdraw for their own tenant; an
    admin must name the tenant.
    """

    tenant_id: Optional[str] = Field(
        default=None,
        description="Tenant to withdraw from (defaults to the caller's tenant)"
    )

    amount: int = Field(
        ...,
        gt=0,
        description="Amount to withdraw (minor units)"
    )

    bank_name: str = Field(..., min_length=1, max_length=100, description="Destination bank")
    account_number: str = Field(..., min_length=1, max_length=50, description="Destination account number")
    account_name: str = Field(..., min_length=1, max_length=100, description="Name on the account")

    notes: Optional[str] = Field(default=None, max_length=500, description="Note for the admin")

    class Config:
        json_schema_extra = {
            "example": {
                "amount": 25000,
                "bank_name": "BCA",
                "account_number": "1234567890",
                "account_name": "Warung Sederhana",
                "notes": "Weekly payout",
            }
        }


class ProcessWithdrawalSchema(BaseModel):
    admin_notes: Optional[str] = Field(default=None, max_length=500, description="Reason or transfer note")


class PlatformPayoutSchema(BaseModel):
    """Request schema for POST /platform/withdrawals"""

    amount: int = Field(..., gt=0, description="Amount of fee income to pay out (minor units)")
    notes: Optional[str] = Field(default=None, max_length=500, description="Transfer note")
