"""Balance ledger and withdrawal use cases"""
from .ledger_postings import (
    LedgerPostings,
    order_credit_key,
    service_fee_key,
    withdrawal_debit_key,
    platform_payout_key,
    tenant_share,
)
from .request_withdrawal import RequestWithdrawal
from .approve_withdrawal import ApproveWithdrawal
from .reject_withdrawal import RejectWithdrawal
from .get_balance import GetBalance
from .list_withdrawals import ListWithdrawals
from .reconcile_ledger import ReconcileLedger
from .platform_balance import GetPlatformBalance, WithdrawPlatformBalance
from .dtos import (
    WithdrawalCommandDTO,
    WithdrawalResponseDTO,
    WithdrawalListResponseDTO,
    TenantBalanceDTO,
    LedgerDiscrepancyDTO,
    ReconciliationResultDTO,
    PlatformBalanceDTO,
    PlatformPayoutDTO,
)

__all__ = [
    "LedgerPostings",
    "order_credit_key",
    "service_fee_key",
    "withdrawal_debit_key",
    "platform_payout_key",
    "tenant_share",
    "RequestWithdrawal",
    "ApproveWithdrawal",
    "RejectWithdrawal",
    "GetBalance",
    "ListWithdrawals",
    "ReconcileLedger",
    "GetPlatformBalance",
    "WithdrawPlatformBalance",
    "WithdrawalCommandDTO",
    "WithdrawalResponseDTO",
    "WithdrawalListResponseDTO",
    "TenantBalanceDTO",
    "LedgerDiscrepancyDTO",
    "ReconciliationResultDTO",
    "PlatformBalanceDTO",
    "PlatformPayoutDTO",
]
