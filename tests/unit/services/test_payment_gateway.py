"""Unit tests for the Midtrans payment gateway client"""

import base64
import json

import httpx
import pytest

from src.adapter.services.payment_gateway import (
    MidtransPaymentGateway,
    SANDBOX_API_URL,
    SANDBOX_SNAP_URL,
    compute_signature,
    reconcile_items,
)
from src.app.services.payment_gateway import (
    CustomerDetails,
    GatewayItem,
    GatewayTransactionStatus,
    PaymentGatewayError,
    PaymentGatewayTimeout,
)

SERVER_KEY = "SB-Mid-server-test"
REFERENCE = "ORD-1718000000000-ABCDEFGHI"

ITEMS = [GatewayItem(id="p_rice", name="Nasi Goreng", price=19000, quantity=2)]


def gateway_with(handler, **kwargs):
    return MidtransPaymentGateway(SERVER_KEY, transport=httpx.MockTransport(handler), **kwargs)


class TestReconcileItems:
    def test_service_fee_line_added(self):
        items = reconcile_items(40000, ITEMS)

        assert items[-1].id == "SERVICE_FEE"
        assert items[-1].price == 2000
        assert sum(i.price * i.quantity for i in items) == 40000

    def test_negative_gap_becomes_adjustment(self):
        items = reconcile_items(37000, ITEMS)

        assert items[-1].id == "ADJUSTMENT"
        assert items[-1].price == -1000
        assert sum(i.price * i.quantity for i in items) == 37000

    def test_exact_total_unchanged(self):
        assert reconcile_items(38000, ITEMS) == ITEMS


class TestSignature:
    def test_valid_signature_accepted(self):
        gateway = MidtransPaymentGateway(SERVER_KEY)
        notification = GatewayTransactionStatus(
            order_reference=REFERENCE,
            transaction_status="settlement",
            gross_amount="40000.00",
            status_code="200",
            signature_key=compute_signature(REFERENCE, "200", "40000.00", SERVER_KEY),
        )

        assert gateway.verify_signature(notification) is True

    def test_tampered_amount_rejected(self):
        gateway = MidtransPaymentGateway(SERVER_KEY)
        notification = GatewayTransactionStatus(
            order_reference=REFERENCE,
            transaction_status="settlement",
            gross_amount="1.00",
            status_code="200",
            signature_key=compute_signature(REFERENCE, "200", "40000.00", SERVER_KEY),
        )

        assert gateway.verify_signature(notification) is False

    def test_missing_signature_rejected(self):
        gateway = MidtransPaymentGateway(SERVER_KEY)
        notification = GatewayTransactionStatus(
            order_reference=REFERENCE,
            transaction_status="settlement",
            gross_amount="40000.00",
            status_code="200",
        )

        assert gateway.verify_signature(notification) is False


@pytest.mark.asyncio
class TestCreateSession:
    async def test_session_created(self):
        """
        Given: The gateway answers with a token
        When: A session is created for a 40000 order with 38000 of items
        Then: Payload balances to gross_amount, Basic auth uses the server key
        """
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers["Authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(201, json={"token": "snap-token-1", "redirect_url": "https://pay.example/1"})

        gateway = gateway_with(handler, finish_url="https://shop.example/user/history", session_ttl_seconds=3600)

        session = await gateway.create_session(REFERENCE, 40000, ITEMS, CustomerDetails(first_name="Budi"))

        assert session.token == "snap-token-1"
        assert session.redirect_url == "https://pay.example/1"
        assert captured["url"] == SANDBOX_SNAP_URL
        expected_auth = base64.b64encode(f"{SERVER_KEY}:".encode()).decode()
        assert captured["auth"] == f"Basic {expected_auth}"

        body = captured["body"]
        assert body["transaction_details"] == {"order_id": REFERENCE, "gross_amount": 40000}
        assert sum(i["price"] * i["quantity"] for i in body["item_details"]) == 40000
        assert body["callbacks"]["finish"] == "https://shop.example/user/history"
        assert body["expiry"] == {"unit": "minutes", "duration": 60}
        assert "email" not in body["customer_details"]

    async def test_timeout_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(PaymentGatewayTimeout):
            await gateway_with(handler).create_session(REFERENCE, 40000, ITEMS, CustomerDetails())

    async def test_refusal_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error_messages": ["gross_amount is not equal"]})

        with pytest.raises(PaymentGatewayError):
            await gateway_with(handler).create_session(REFERENCE, 40000, ITEMS, CustomerDetails())

    async def test_missing_token_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(201, json={})

        with pytest.raises(PaymentGatewayError):
            await gateway_with(handler).create_session(REFERENCE, 40000, ITEMS, CustomerDetails())


@pytest.mark.asyncio
class TestGetStatus:
    async def test_status_parsed(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == f"{SANDBOX_API_URL}/v2/{REFERENCE}/status"
            return httpx.Response(
                200,
                json={
                    "order_id": REFERENCE,
                    "transaction_status": "settlement",
                    "gross_amount": "40000.00",
                    "status_code": "200",
                    "payment_type": "qris",
                },
            )

        status = await gateway_with(handler).get_status(REFERENCE)

        assert status.transaction_status == "settlement"
        assert status.gross_amount == "40000.00"
        assert status.payment_type == "qris"

    async def test_unknown_transaction_in_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"status_code": "404", "status_message": "Transaction doesn't exist."})

        assert await gateway_with(handler).get_status(REFERENCE) is None

    async def test_http_404(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        assert await gateway_with(handler).get_status(REFERENCE) is None

    async def test_server_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="maintenance")

        with pytest.raises(PaymentGatewayError):
            await gateway_with(handler).get_status(REFERENCE)
