"""ReconcileLedger Use Case

Checks every tenant balance against its transaction history.
"""

import logging
import time
from datetime import datetime
from typing import Optional

from libs.result import Result, Return, Error
from src.app.services.notification_service import NotificationService, OperatorAlert, AlertKind
from src.app.repositories.tenant_balance_repository import TenantBalanceRepository
from src.app.repositories.balance_transaction_repository import BalanceTransactionRepository
from .dtos import LedgerDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcileLedger:
    """
    Use Case: Reconcile tenant balances against balance transactions

    Business Rules:
    1. Expected balance = sum(credits and fees) - sum(withdrawal debits and payouts),
       the platform fee ledger included
    2. Any ledger whose stored balance differs is reported and alerted
    3. Does NOT modify any data
    """

    def __init__(
        self,
        ledger_repo: TenantBalanceRepository,
        transaction_repo: BalanceTransactionRepository,
        notification_service: Optional[NotificationService] = None,
    ):
        self.ledger_repo = ledger_repo
        self.transaction_repo = transaction_repo
        self.notification_service = notification_service

    async def execute(self) -> Result[ReconciliationResultDTO]:
        start_time = time.time()
        reconciliation_time = datetime.utcnow()

        try:
            logger.info("Starting tenant balance reconciliation")

            ledgers = await self.ledger_repo.get_all()
            discrepancies: list[LedgerDiscrepancyDTO] = []

            for ledger in ledgers:
                calculated = await self.transaction_repo.get_transaction_sum_by_ledger(ledger.id)
                if ledger.balance == calculated:
                    continue

                discrepancy = LedgerDiscrepancyDTO(
                    tenant_id=ledger.tenant_id,
                    ledger_id=ledger.id,
                    ledger_balance=ledger.balance,
                    calculated_balance=calculated,
                    discrepancy=ledger.balance - calculated,
                )
                discrepancies.append(discrepancy)
                logger.warning(
                    f"Discrepancy for tenant {ledger.tenant_id} (ledger_id={ledger.id}): "
                    f"balance={ledger.balance} transactions={calculated}"
                )
                if self.notification_service:
                    await self.notification_service.send_alert(
                        OperatorAlert(
                            kind=AlertKind.LEDGER_DISCREPANCY,
                            message=f"Balance of tenant {ledger.tenant_id} does not match its transactions",
                            reference=ledger.tenant_id,
                            details=discrepancy.model_dump(),
                        )
                    )

            execution_time_ms = int((time.time() - start_time) * 1000)

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"out of {len(ledgers)} ledgers in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {len(ledgers)} ledgers balanced in {execution_time_ms}ms"
                )

            return Return.ok(
                ReconciliationResultDTO(
                    total_ledgers_checked=len(ledgers),
                    discrepancies_found=len(discrepancies),
                    discrepancies=discrepancies,
                    reconciliation_time=reconciliation_time,
                    execution_time_ms=execution_time_ms,
                )
            )

        except Exception as e:
            logger.error(f"Ledger reconciliation failed: {e}")
            return Return.err(
                Error(
                    code="RECONCILIATION_FAILED",
                    message="Failed to reconcile tenant balances",
                    reason=str(e),
                )
            )
