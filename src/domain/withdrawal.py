"""Withdrawal Request Domain Entity

A seller's request to pay out part of the tenant balance. Approved and
rejected requests are terminal.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, String, CheckConstraint
from src.domain.base import BaseModel, generate_uuid, enum_type


class WithdrawalStatus(str, Enum):
    """Withdrawal request status"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class WithdrawalRequest(BaseModel, table=True):
    """
    Withdrawal Request - Seller payout ask

    Domain Rules:
    - amount >= configured minimum
    - amount <= balance - other pending withdrawals at request time
    - Approval debits the balance exactly once; rejection never touches it
    """

    __tablename__ = "withdrawal_requests"
    __table_args__ = (
        Index("ix_withdrawal_requests_tenant_id_status", "tenant_id", "status"),
        CheckConstraint("amount > 0", name="withdrawal_amount_positive"),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Opaque withdrawal identifier"
    )

    tenant_id: str = Field(
        description="Tenant requesting the payout"
    )

    amount: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Requested amount (minor units)"
    )

    bank_name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Destination bank"
    )

    account_number: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Destination account number"
    )

    account_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Destination account holder"
    )

    status: WithdrawalStatus = Field(
        default=WithdrawalStatus.PENDING,
        sa_column=Column(enum_type(WithdrawalStatus), nullable=False, default=WithdrawalStatus.PENDING),
        description="pending, approved or rejected"
    )

    notes: Optional[str] = Field(
        default=None,
        description="Seller note"
    )

    admin_notes: Optional[str] = Field(
        default=None,
        description="Admin note recorded on approval/rejection"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Request timestamp"
    )

    processed_at: Optional[datetime] = Field(
        default=None,
        description="Approval/rejection timestamp"
    )
