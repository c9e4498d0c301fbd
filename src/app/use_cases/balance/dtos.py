"""Data Transfer Objects for Balance and Withdrawal Use Cases"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from src.domain.withdrawal import WithdrawalRequest, WithdrawalStatus


class WithdrawalCommandDTO(BaseModel):
    """
    Command DTO for requesting a withdrawal

    Used as input to RequestWithdrawal use case.
    """

    tenant_id: str = Field(
        ...,
        description="Tenant identifier"
    )

    amount: int = Field(
        ...,
        gt=0,
        description="Amount to withdraw (minor units)"
    )

    bank_name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Destination bank"
    )

    account_number: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Destination account number"
    )

    account_name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Name on the destination account"
    )

    notes: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Free-form note from the seller"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "tenant_id": "tenant_123",
                "amount": 25000,
                "bank_name": "BCA",
                "account_number": "1234567890",
                "account_name": "Warung Sederhana",
                "notes": "Weekly payout",
            }
        }


class WithdrawalResponseDTO(BaseModel):
    id: str
    tenant_id: str
    amount: int
    bank_name: str
    account_number: str
    account_name: str
    status: WithdrawalStatus
    notes: Optional[str] = None
    admin_notes: Optional[str] = None
    created_at: datetime
    processed_at: Optional[datetime] = None


class WithdrawalListResponseDTO(BaseModel):
    withdrawals: List[WithdrawalResponseDTO]
    limit: int
    offset: int


class TenantBalanceDTO(BaseModel):
    """
    Response DTO for a tenant's balance summary
    """

    tenant_id: str = Field(
        ...,
        description="Tenant identifier"
    )

    balance: int = Field(
        ...,
        description="Withdrawable accrued funds (minor units)"
    )

    pending_withdrawals: int = Field(
        ...,
        description="Sum of pending withdrawal requests"
    )

    available: int = Field(
        ...,
        description="balance - pending_withdrawals"
    )

    last_updated: Optional[datetime] = Field(
        default=None,
        description="Last balance mutation, None if the tenant never earned"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "tenant_id": "tenant_123",
                "balance": 50000,
                "pending_withdrawals": 30000,
                "available": 20000,
                "last_updated": "2024-01-15T10:30:00Z",
            }
        }


class LedgerDiscrepancyDTO(BaseModel):
    """
    DTO for a single ledger discrepancy found during reconciliation
    """

    tenant_id: str = Field(..., description="Tenant identifier")
    ledger_id: int = Field(..., description="Balance ledger ID")
    ledger_balance: int = Field(..., description="Balance stored on the ledger")
    calculated_balance: int = Field(..., description="Credits minus debits from transactions")
    discrepancy: int = Field(..., description="ledger_balance - calculated_balance")


class ReconciliationResultDTO(BaseModel):
    total_ledgers_checked: int
    discrepancies_found: int
    discrepancies: List[LedgerDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int


class PlatformBalanceDTO(BaseModel):
    """
    Response DTO for the platform's service fee balance
    """

    balance: int = Field(..., description="Withdrawable service fee income (minor units)")
    total_service_fee: int = Field(..., description="All service fees ever credited")
    total_paid_out: int = Field(..., description="All platform payouts")
    last_updated: Optional[datetime] = Field(
        default=None,
        description="Last balance mutation, None before the first fee"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "balance": 6000,
                "total_service_fee": 10000,
                "total_paid_out": 4000,
                "last_updated": "2024-01-15T10:30:00Z",
            }
        }


class PlatformPayoutDTO(BaseModel):
    transaction_id: int
    amount: int
    balance_after: int
    notes: Optional[str] = None
    created_at: datetime

def withdrawal_to_dto(request: WithdrawalRequest) -> WithdrawalResponseDTO:
    return WithdrawalResponseDTO(
        id=request.id,
        tenant_id=request.tenant_id,
        amount=request.amount,
        bank_name=request.bank_name,
        account_number=request.account_number,
        account_name=request.account_name,
        status=WithdrawalStatus(request.status),
        notes=request.notes,
        admin_notes=request.admin_notes,
        created_at=request.created_at,
        processed_at=request.processed_at,
    )
