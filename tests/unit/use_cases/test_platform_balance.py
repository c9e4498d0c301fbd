"""Unit tests for GetPlatformBalance and WithdrawPlatformBalance"""

import pytest
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.balance.platform_balance import GetPlatformBalance, WithdrawPlatformBalance
from src.domain.actor import Actor, Role
from src.domain.balance_transaction import BalanceTransaction, TransactionType
from src.domain.tenant_balance import PLATFORM_TENANT_ID, TenantBalance

SELLER = Actor(user_id="seller_1", role=Role.SELLER, tenant_id="tenant_1")
ADMIN = Actor(user_id="admin_1", role=Role.ADMIN)


@pytest.fixture
def platform_ledger():
    return TenantBalance(id=1, tenant_id=PLATFORM_TENANT_ID, balance=6000, updated_at=datetime.utcnow())


@pytest.fixture
def mock_ledger_repo(platform_ledger):
    repo = MagicMock()
    repo.get_by_tenant_id = AsyncMock(return_value=platform_ledger)
    return repo


@pytest.fixture
def mock_transaction_repo():
    sums = {TransactionType.SERVICE_FEE: 10000, TransactionType.PLATFORM_PAYOUT: 4000}
    repo = MagicMock()
    repo.get_sum_by_type = AsyncMock(side_effect=lambda ledger_id, transaction_type: sums[transaction_type])
    return repo


@pytest.fixture
def mock_postings():
    async def debit(ledger, amount, notes=None):
        return BalanceTransaction(
            id=42,
            tenant_id=ledger.tenant_id,
            ledger_id=ledger.id,
            transaction_type=TransactionType.PLATFORM_PAYOUT,
            amount=amount,
            balance_before=ledger.balance,
            balance_after=ledger.balance - amount,
            idempotency_key="platform-payout:p1",
            notes=notes,
            created_at=datetime.utcnow(),
        )

    postings = MagicMock()
    postings.debit_platform = AsyncMock(side_effect=debit)
    return postings


@pytest.mark.asyncio
class TestGetPlatformBalance:
    async def test_admin_sees_fee_income(self, mock_ledger_repo, mock_transaction_repo, platform_ledger):
        use_case = GetPlatformBalance(mock_ledger_repo, mock_transaction_repo)

        result = await use_case.execute(ADMIN)

        assert result.is_ok()
        assert result.value.balance == 6000
        assert result.value.total_service_fee == 10000
        assert result.value.total_paid_out == 4000
        assert result.value.last_updated == platform_ledger.updated_at
        mock_ledger_repo.get_by_tenant_id.assert_called_once_with(PLATFORM_TENANT_ID)

    async def test_no_fees_yet(self, mock_ledger_repo, mock_transaction_repo):
        mock_ledger_repo.get_by_tenant_id = AsyncMock(return_value=None)
        use_case = GetPlatformBalance(mock_ledger_repo, mock_transaction_repo)

        result = await use_case.execute(ADMIN)

        assert result.is_ok()
        assert result.value.balance == 0
        assert result.value.total_service_fee == 0
        assert result.value.last_updated is None
        mock_transaction_repo.get_sum_by_type.assert_not_called()

    async def test_seller_forbidden(self, mock_ledger_repo, mock_transaction_repo):
        use_case = GetPlatformBalance(mock_ledger_repo, mock_transaction_repo)

        result = await use_case.execute(SELLER)

        assert result.error.code == "FORBIDDEN"
        mock_ledger_repo.get_by_tenant_id.assert_not_called()


@pytest.mark.asyncio
class TestWithdrawPlatformBalance:
    async def test_payout_debits_platform_ledger(
        self, mock_uow, mock_ledger_repo, mock_postings, platform_ledger
    ):
        """
        Given: Platform balance 6000
        When: An admin withdraws 4000
        Then: The locked platform ledger is debited and the payout committed
        """
        # Arrange
        use_case = WithdrawPlatformBalance(mock_uow, mock_ledger_repo, mock_postings)

        # Act
        result = await use_case.execute(4000, notes="Monthly sweep", actor=ADMIN)

        # Assert
        assert result.is_ok()
        assert result.value.amount == 4000
        assert result.value.balance_after == 2000
        assert result.value.notes == "Monthly sweep"
        mock_ledger_repo.get_by_tenant_id.assert_called_once_with(PLATFORM_TENANT_ID, for_update=True)
        mock_postings.debit_platform.assert_called_once_with(platform_ledger, 4000, "Monthly sweep")
        mock_uow.commit.assert_called_once()

    async def test_amount_above_balance_refused(self, mock_uow, mock_ledger_repo, mock_postings):
        use_case = WithdrawPlatformBalance(mock_uow, mock_ledger_repo, mock_postings)

        result = await use_case.execute(7000, actor=ADMIN)

        assert result.error.code == "INSUFFICIENT_BALANCE"
        mock_postings.debit_platform.assert_not_called()
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()

    async def test_no_platform_ledger_refused(self, mock_uow, mock_ledger_repo, mock_postings):
        mock_ledger_repo.get_by_tenant_id = AsyncMock(return_value=None)
        use_case = WithdrawPlatformBalance(mock_uow, mock_ledger_repo, mock_postings)

        result = await use_case.execute(1000, actor=ADMIN)

        assert result.error.code == "INSUFFICIENT_BALANCE"
        mock_postings.debit_platform.assert_not_called()

    async def test_non_positive_amount(self, mock_uow, mock_ledger_repo, mock_postings):
        use_case = WithdrawPlatformBalance(mock_uow, mock_ledger_repo, mock_postings)

        result = await use_case.execute(0, actor=ADMIN)

        assert result.error.code == "INVALID_AMOUNT"
        mock_ledger_repo.get_by_tenant_id.assert_not_called()

    async def test_seller_forbidden(self, mock_uow, mock_ledger_repo, mock_postings):
        use_case = WithdrawPlatformBalance(mock_uow, mock_ledger_repo, mock_postings)

        result = await use_case.execute(1000, actor=SELLER)

        assert result.error.code == "FORBIDDEN"
        mock_postings.debit_platform.assert_not_called()

    async def test_write_failure_rolls_back(self, mock_uow, mock_ledger_repo, mock_postings):
        mock_postings.debit_platform = AsyncMock(side_effect=RuntimeError("disk full"))
        use_case = WithdrawPlatformBalance(mock_uow, mock_ledger_repo, mock_postings)

        result = await use_case.execute(1000, actor=ADMIN)

        assert result.error.code == "PLATFORM_PAYOUT_FAILED"
        assert result.error.reason == "disk full"
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()
