"""Tenant Balance Domain Entity

Withdrawable balance per tenant. Each tenant has at most one row; the
platform's service fee income is kept in the reserved PLATFORM_TENANT_ID row.
Balance changes only through BalanceTransactions written in the same
database transaction.
"""

from datetime import datetime
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, BigInteger, Integer
from src.domain.base import BaseModel

# Reserved ledger row holding the service fees owed to the platform
PLATFORM_TENANT_ID = "__platform__"


class TenantBalance(BaseModel, table=True):
    """
    Tenant Balance - Accrued, withdrawable funds of a tenant

    Domain Rules:
    - One row per tenant (tenant_id is unique)
    - Balance must be non-negative
    - Credited once per settled order, debited once per approved withdrawal
    """

    __tablename__ = "tenant_balances"
    __table_args__ = (
        CheckConstraint('balance >= 0', name='balance_non_negative'),
    )

    id: int = Field(
        sa_column=Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True),
        description="Unique ledger identifier (auto-increment)"
    )

    tenant_id: str = Field(
        index=True,
        unique=True,
        description="Tenant ID (unique - one balance per tenant)"
    )

    balance: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Current balance (minor units, >= 0)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Ledger creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last balance update timestamp"
    )
