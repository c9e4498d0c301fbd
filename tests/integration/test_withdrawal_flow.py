"""Withdrawal requests and admin settlement against a real database"""

import pytest
import pytest_asyncio

from src.domain.tenant_balance import PLATFORM_TENANT_ID, TenantBalance
from src.domain.withdrawal import WithdrawalRequest, WithdrawalStatus
from tests.integration.conftest import SELLER, ADMIN, CUSTOMER

BANK = {"bank_name": "BCA", "account_number": "1234567890", "account_name": "Warung Budi"}


@pytest_asyncio.fixture
async def funded_tenant(db_session):
    """tenant_1 holds 50000 with a pending 30000 withdrawal"""
    db_session.add(TenantBalance(tenant_id="tenant_1", balance=50000))
    pending = WithdrawalRequest(tenant_id="tenant_1", amount=30000, **BANK)
    db_session.add(pending)
    await db_session.commit()
    return pending.id


@pytest.mark.asyncio
class TestRequestWithdrawal:
    async def test_pending_requests_reserve_balance(self, client, funded_tenant):
        """
        Given: Balance 50000 with 30000 already pending
        When: The seller requests 25000
        Then: Refused with 402, only 20000 is available
        """
        response = await client.post("/withdrawals", json={"amount": 25000, **BANK}, headers=SELLER)

        assert response.status_code == 402
        assert response.json()["error"]["code"] == "INSUFFICIENT_BALANCE"

        balance = await client.get("/tenants/tenant_1/balance", headers=SELLER)
        assert balance.json()["balance"] == 50000
        assert balance.json()["pending_withdrawals"] == 30000
        assert balance.json()["available"] == 20000

    async def test_request_within_available(self, client, funded_tenant):
        response = await client.post("/withdrawals", json={"amount": 20000, **BANK}, headers=SELLER)

        assert response.status_code == 201
        assert response.json()["status"] == "pending"
        assert response.json()["tenant_id"] == "tenant_1"

        balance = await client.get("/tenants/tenant_1/balance", headers=SELLER)
        assert balance.json()["available"] == 0

    async def test_below_minimum(self, client, funded_tenant):
        response = await client.post("/withdrawals", json={"amount": 5000, **BANK}, headers=SELLER)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "AMOUNT_BELOW_MINIMUM"

    async def test_zero_amount_is_validation_error(self, client):
        response = await client.post("/withdrawals", json={"amount": 0, **BANK}, headers=SELLER)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_seller_cannot_withdraw_for_other_tenant(self, client, funded_tenant):
        response = await client.post(
            "/withdrawals", json={"tenant_id": "tenant_2", "amount": 10000, **BANK}, headers=SELLER
        )

        assert response.status_code == 403

    async def test_tenant_without_ledger_has_zero_balance(self, client):
        response = await client.get("/tenants/tenant_9/balance", headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["balance"] == 0
        assert response.json()["available"] == 0
        assert response.json()["last_updated"] is None


@pytest.mark.asyncio
class TestSettleWithdrawal:
    async def test_approve_debits_balance(self, client, funded_tenant):
        # Act
        response = await client.post(
            f"/withdrawals/{funded_tenant}/approve", json={"admin_notes": "transferred"}, headers=ADMIN
        )

        # Assert
        assert response.status_code == 200
        assert response.json()["status"] == WithdrawalStatus.APPROVED.value
        assert response.json()["admin_notes"] == "transferred"
        assert response.json()["processed_at"] is not None

        balance = await client.get("/tenants/tenant_1/balance", headers=ADMIN)
        assert balance.json()["balance"] == 20000
        assert balance.json()["pending_withdrawals"] == 0

    async def test_second_approval_refused(self, client, funded_tenant):
        await client.post(f"/withdrawals/{funded_tenant}/approve", headers=ADMIN)

        response = await client.post(f"/withdrawals/{funded_tenant}/approve", headers=ADMIN)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "WITHDRAWAL_ALREADY_PROCESSED"
        balance = await client.get("/tenants/tenant_1/balance", headers=ADMIN)
        assert balance.json()["balance"] == 20000

    async def test_reject_releases_reservation(self, client, funded_tenant):
        response = await client.post(f"/withdrawals/{funded_tenant}/reject", headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["status"] == "rejected"

        balance = await client.get("/tenants/tenant_1/balance", headers=ADMIN)
        assert balance.json()["balance"] == 50000
        assert balance.json()["available"] == 50000

    async def test_seller_cannot_approve(self, client, funded_tenant):
        response = await client.post(f"/withdrawals/{funded_tenant}/approve", headers=SELLER)

        assert response.status_code == 403

    async def test_customer_cannot_list_withdrawals(self, client, funded_tenant):
        response = await client.get("/withdrawals", params={"tenant_id": "tenant_1"}, headers=CUSTOMER)

        assert response.status_code == 403

    async def test_admin_lists_pending_queue(self, client, funded_tenant):
        response = await client.get("/withdrawals", params={"status": "pending"}, headers=ADMIN)

        assert response.status_code == 200
        assert [w["id"] for w in response.json()["withdrawals"]] == [funded_tenant]


@pytest_asyncio.fixture
async def platform_fees(db_session):
    db_session.add(TenantBalance(tenant_id=PLATFORM_TENANT_ID, balance=6000))
    await db_session.commit()


@pytest.mark.asyncio
class TestPlatformPayout:
    async def test_admin_withdraws_fee_income(self, client, platform_fees):
        response = await client.post("/platform/withdrawals", json={"amount": 4000, "notes": "sweep"}, headers=ADMIN)

        assert response.status_code == 201
        assert response.json()["balance_after"] == 2000

        platform = await client.get("/platform/balance", headers=ADMIN)
        assert platform.json()["balance"] == 2000
        assert platform.json()["total_paid_out"] == 4000

    async def test_payout_above_balance_refused(self, client, platform_fees):
        response = await client.post("/platform/withdrawals", json={"amount": 9000}, headers=ADMIN)

        assert response.status_code == 402
        assert response.json()["error"]["code"] == "INSUFFICIENT_BALANCE"

    async def test_seller_cannot_see_platform_balance(self, client, platform_fees):
        response = await client.get("/platform/balance", headers=SELLER)

        assert response.status_code == 403
