"""Ledger postings

The only code that mutates TenantBalance. Each posting writes a
BalanceTransaction with a unique idempotency key and updates the balance in
the caller's unit of work, so the posting commits or rolls back together
with the status change that triggered it.

A settled order is split in two postings: the tenant share to the tenant's
ledger and the service fee to the platform ledger.
"""

import logging
from typing import Optional
from src.app.repositories.tenant_balance_repository import TenantBalanceRepository
from src.app.repositories.balance_transaction_repository import BalanceTransactionRepository
from src.domain.balance_transaction import BalanceTransaction, TransactionType, DEBIT_TYPES
from src.domain.base import generate_uuid
from src.domain.order import Order
from src.domain.tenant_balance import TenantBalance, PLATFORM_TENANT_ID
from src.domain.withdrawal import WithdrawalRequest

logger = logging.getLogger(__name__)


def order_credit_key(order_id: str) -> str:
    return f"order:{order_id}:credit"


def service_fee_key(order_id: str) -> str:
    return f"order:{order_id}:fee"


def withdrawal_debit_key(request_id: str) -> str:
    return f"withdrawal:{request_id}:debit"


def platform_payout_key(payout_id: str) -> str:
    return f"platform-payout:{payout_id}"


def tenant_share(order: Order) -> int:
    """Amount owed to the tenant; the service fee stays with the platform"""
    return order.total_amount - order.service_fee


class LedgerPostings:
    def __init__(
        self,
        ledger_repo: TenantBalanceRepository,
        transaction_repo: BalanceTransactionRepository,
    ):
        self.ledger_repo = ledger_repo
        self.transaction_repo = transaction_repo

    async def credit_order(self, order: Order) -> bool:
        """
        Credit the tenant share and the platform fee for a settled order

        Ledgers are locked tenant first, platform second.

        Returns:
            True if posted now, False if the order was already credited
        """
        key = order_credit_key(order.id)
        if await self.transaction_repo.get_by_idempotency_key(key):
            logger.info(f"Order {order.id} already credited, skipping")
            return False

        ledger = await self.get_or_create_ledger(order.tenant_id)
        amount = tenant_share(order)
        await self._post(
            ledger,
            TransactionType.ORDER_CREDIT,
            amount,
            reference_type="order",
            reference_id=order.id,
            idempotency_key=key,
        )
        logger.info(f"Credited tenant {order.tenant_id} with {amount} for order {order.id}")

        if order.service_fee > 0:
            platform = await self.get_or_create_ledger(PLATFORM_TENANT_ID)
            await self._post(
                platform,
                TransactionType.SERVICE_FEE,
                order.service_fee,
                reference_type="order",
                reference_id=order.id,
                idempotency_key=service_fee_key(order.id),
            )
            logger.info(f"Credited platform with service fee {order.service_fee} for order {order.id}")

        return True

    async def debit_withdrawal(self, request: WithdrawalRequest, ledger: TenantBalance) -> BalanceTransaction:
        """
        Debit an approved withdrawal. Caller holds the ledger lock and has
        checked coverage.
        """
        transaction = await self._post(
            ledger,
            TransactionType.WITHDRAWAL_DEBIT,
            request.amount,
            reference_type="withdrawal",
            reference_id=request.id,
            idempotency_key=withdrawal_debit_key(request.id),
        )
        logger.info(f"Debited tenant {request.tenant_id} by {request.amount} for withdrawal {request.id}")
        return transaction

    async def debit_platform(
        self, ledger: TenantBalance, amount: int, notes: Optional[str] = None
    ) -> BalanceTransaction:
        """
        Pay out part of the platform balance. Caller holds the platform
        ledger lock and has checked coverage.
        """
        payout_id = generate_uuid()
        transaction = await self._post(
            ledger,
            TransactionType.PLATFORM_PAYOUT,
            amount,
            reference_type="platform_payout",
            reference_id=payout_id,
            idempotency_key=platform_payout_key(payout_id),
            notes=notes,
        )
        logger.info(f"Platform payout {payout_id} of {amount}")
        return transaction

    async def get_or_create_ledger(self, tenant_id: str) -> TenantBalance:
        ledger = await self.ledger_repo.get_by_tenant_id(tenant_id, for_update=True)
        if ledger:
            return ledger
        logger.info(f"Opening balance ledger for {tenant_id}")
        return await self.ledger_repo.create(TenantBalance(tenant_id=tenant_id, balance=0))

    async def _post(
        self,
        ledger: TenantBalance,
        transaction_type: TransactionType,
        amount: int,
        reference_type: str,
        reference_id: str,
        idempotency_key: str,
        notes: Optional[str] = None,
    ) -> BalanceTransaction:
        balance_before = ledger.balance
        if transaction_type in DEBIT_TYPES:
            balance_after = balance_before - amount
        else:
            balance_after = balance_before + amount

        transaction = await self.transaction_repo.create(
            BalanceTransaction(
                tenant_id=ledger.tenant_id,
                ledger_id=ledger.id,
                transaction_type=transaction_type,
                amount=amount,
                balance_before=balance_before,
                balance_after=balance_after,
                reference_type=reference_type,
                reference_id=reference_id,
                idempotency_key=idempotency_key,
                notes=notes,
            )
        )
        await self.ledger_repo.update_balance(ledger.id, balance_after)
        logger.debug(
            f"Ledger {ledger.tenant_id}: {transaction_type.value} {amount} "
            f"({balance_before} -> {balance_after})"
        )
        return transaction
