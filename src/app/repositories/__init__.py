from .order_repository import OrderRepository
from .order_item_repository import OrderItemRepository
from .tenant_balance_repository import TenantBalanceRepository
from .balance_transaction_repository import BalanceTransactionRepository
from .withdrawal_repository import WithdrawalRepository

__all__ = [
    "OrderRepository",
    "OrderItemRepository",
    "TenantBalanceRepository",
    "BalanceTransactionRepository",
    "WithdrawalRepository",
]
