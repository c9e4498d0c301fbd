"""Balance Transaction Domain Entity

Immutable append-only record of every balance mutation, tenant or platform.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, BigInteger, Integer, String
from src.domain.base import BaseModel, enum_type


class TransactionType(str, Enum):
    """Balance transaction types"""
    ORDER_CREDIT = "order_credit"            # Settled order credited to tenant
    WITHDRAWAL_DEBIT = "withdrawal_debit"    # Approved withdrawal paid out
    SERVICE_FEE = "service_fee"              # Order service fee credited to the platform
    PLATFORM_PAYOUT = "platform_payout"      # Platform balance withdrawn by an admin


DEBIT_TYPES = frozenset({TransactionType.WITHDRAWAL_DEBIT, TransactionType.PLATFORM_PAYOUT})


class BalanceTransaction(BaseModel, table=True):
    """
    Balance Transaction - Audit trail of balance mutations

    Domain Rules:
    - Transactions are immutable (append-only)
    - amount is always positive; transaction_type gives the direction
    - idempotency_key is unique: order:<id>:credit, order:<id>:fee,
      withdrawal:<id>:debit, platform-payout:<id>
    """

    __tablename__ = "balance_transactions"
    __table_args__ = (
        Index('ix_balance_transactions_created_at', 'created_at'),
        Index('ix_balance_transactions_reference', 'reference_type', 'reference_id'),
    )

    id: int = Field(
        sa_column=Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True),
        description="Unique transaction identifier (auto-increment)"
    )

    tenant_id: str = Field(
        index=True,
        description="Tenant ID for query optimization"
    )

    ledger_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("tenant_balances.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to TenantBalance"
    )

    transaction_type: TransactionType = Field(
        sa_column=Column(enum_type(TransactionType), nullable=False),
        description="order_credit, withdrawal_debit, service_fee or platform_payout"
    )

    amount: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Amount moved (minor units, positive)"
    )

    balance_before: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Balance before the mutation"
    )

    balance_after: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Balance after the mutation"
    )

    reference_type: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Type of reference ('order', 'withdrawal' or 'platform_payout')"
    )

    reference_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="ID of the referenced order or withdrawal"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(String(500), nullable=True),
        description="Admin note on platform payouts"
    )

    idempotency_key: str = Field(
        unique=True,
        index=True,
        description="Unique key guarding exactly-once postings"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Transaction timestamp (immutable)"
    )
