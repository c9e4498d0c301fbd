from .order_repository import SqlAlchemyOrderRepository
from .order_item_repository import SqlAlchemyOrderItemRepository
from .tenant_balance_repository import SqlAlchemyTenantBalanceRepository
from .balance_transaction_repository import SqlAlchemyBalanceTransactionRepository
from .withdrawal_repository import SqlAlchemyWithdrawalRepository

__all__ = [
    "SqlAlchemyOrderRepository",
    "SqlAlchemyOrderItemRepository",
    "SqlAlchemyTenantBalanceRepository",
    "SqlAlchemyBalanceTransactionRepository",
    "SqlAlchemyWithdrawalRepository",
]
