"""Midtrans payment gateway client

Snap sessions are created with POST /snap/v1/transactions and transaction
state is polled with GET /v2/{order_id}/status. Both use HTTP Basic auth
with the server key as username and an empty password.
"""

import base64
import hashlib
import hmac
import logging
from typing import List, Optional
import httpx
from src.app.services.payment_gateway import (
    PaymentGateway,
    PaymentGatewayError,
    PaymentGatewayTimeout,
    GatewayItem,
    CustomerDetails,
    PaymentSession,
    GatewayTransactionStatus,
)

logger = logging.getLogger(__name__)

SANDBOX_SNAP_URL = "https://app.sandbox.midtrans.com/snap/v1/transactions"
PRODUCTION_SNAP_URL = "https://app.midtrans.com/snap/v1/transactions"
SANDBOX_API_URL = "https://api.sandbox.midtrans.com"
PRODUCTION_API_URL = "https://api.midtrans.com"


def reconcile_items(gross_amount: int, items: List[GatewayItem]) -> List[GatewayItem]:
    """
    Append one adjustment line so item totals equal gross_amount exactly

    A positive gap (the service fee) becomes SERVICE_FEE; a negative gap
    becomes a negative-priced ADJUSTMENT line.
    """
    item_total = sum(item.price * item.quantity for item in items)
    diff = gross_amount - item_total
    if diff == 0:
        return list(items)

    if diff > 0:
        adjustment = GatewayItem(id="SERVICE_FEE", name="Service fee", price=diff, quantity=1)
    else:
        adjustment = GatewayItem(id="ADJUSTMENT", name="Adjustment", price=diff, quantity=1)
    return list(items) + [adjustment]


def compute_signature(order_id: str, status_code: str, gross_amount: str, server_key: str) -> str:
    """SHA-512 hex digest of order_id + status_code + gross_amount + server_key"""
    payload = f"{order_id}{status_code}{gross_amount}{server_key}"
    return hashlib.sha512(payload.encode("utf-8")).hexdigest()


class MidtransPaymentGateway(PaymentGateway):
    """
    Midtrans Snap client

    Every call is bounded by timeout_seconds. A timeout raises
    PaymentGatewayTimeout; any other transport failure or non-2xx answer
    raises PaymentGatewayError.
    """

    def __init__(
        self,
        server_key: str,
        is_production: bool = False,
        timeout_seconds: float = 10.0,
        finish_url: Optional[str] = None,
        session_ttl_seconds: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.server_key = server_key
        self.is_production = is_production
        self.timeout_seconds = timeout_seconds
        self.finish_url = finish_url
        self.session_ttl_seconds = session_ttl_seconds
        self.transport = transport

    @property
    def snap_url(self) -> str:
        return PRODUCTION_SNAP_URL if self.is_production else SANDBOX_SNAP_URL

    @property
    def api_url(self) -> str:
        return PRODUCTION_API_URL if self.is_production else SANDBOX_API_URL

    def _headers(self) -> dict:
        token = base64.b64encode(f"{self.server_key}:".encode("utf-8")).decode("ascii")
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Authorization": f"Basic {token}",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport)

    def build_payload(
        self,
        order_reference: str,
        gross_amount: int,
        items: List[GatewayItem],
        customer: CustomerDetails,
    ) -> dict:
        customer_details = {"first_name": customer.first_name, "phone": customer.phone}
        if customer.email:
            customer_details["email"] = customer.email

        payload = {
            "transaction_details": {
                "order_id": order_reference,
                "gross_amount": gross_amount,
            },
            "customer_details": customer_details,
            "item_details": [item.model_dump() for item in reconcile_items(gross_amount, items)],
        }
        if self.finish_url:
            payload["callbacks"] = {"finish": self.finish_url}
        if self.session_ttl_seconds:
            payload["expiry"] = {
                "unit": "minutes",
                "duration": max(1, self.session_ttl_seconds // 60),
            }
        return payload

    async def create_session(
        self,
        order_reference: str,
        gross_amount: int,
        items: List[GatewayItem],
        customer: CustomerDetails,
    ) -> PaymentSession:
        payload = self.build_payload(order_reference, gross_amount, items, customer)

        try:
            async with self._client() as client:
                response = await client.post(self.snap_url, json=payload, headers=self._headers())
        except httpx.TimeoutException as e:
            logger.error(f"Gateway timed out creating session for {order_reference}: {e}")
            raise PaymentGatewayTimeout(f"Session creation for {order_reference} timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"Gateway unreachable creating session for {order_reference}: {e}")
            raise PaymentGatewayError(str(e)) from e

        if response.status_code >= 400:
            logger.error(
                f"Gateway refused session for {order_reference}: "
                f"HTTP {response.status_code} {response.text}"
            )
            raise PaymentGatewayError(f"HTTP {response.status_code}: {response.text}")

        data = response.json()
        token = data.get("token")
        if not token:
            raise PaymentGatewayError(f"Gateway answered without a token for {order_reference}")

        logger.info(f"Payment session created for {order_reference}")
        return PaymentSession(token=token, redirect_url=data.get("redirect_url"))

    async def get_status(self, order_reference: str) -> Optional[GatewayTransactionStatus]:
        url = f"{self.api_url}/v2/{order_reference}/status"

        try:
            async with self._client() as client:
                response = await client.get(url, headers=self._headers())
        except httpx.TimeoutException as e:
            raise PaymentGatewayTimeout(f"Status poll for {order_reference} timed out") from e
        except httpx.HTTPError as e:
            raise PaymentGatewayError(str(e)) from e

        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise PaymentGatewayError(f"HTTP {response.status_code}: {response.text}")

        data = response.json()
        # Midtrans reports "transaction not found" inside a 200 body
        if str(data.get("status_code")) == "404":
            return None

        return GatewayTransactionStatus(
            order_reference=data.get("order_id", order_reference),
            transaction_status=data["transaction_status"],
            fraud_status=data.get("fraud_status"),
            gross_amount=str(data.get("gross_amount", "0")),
            status_code=data.get("status_code"),
            payment_type=data.get("payment_type"),
            signature_key=data.get("signature_key"),
        )

    def verify_signature(self, notification: GatewayTransactionStatus) -> bool:
        if not notification.signature_key or notification.status_code is None:
            return False
        expected = compute_signature(
            notification.order_reference,
            notification.status_code,
            notification.gross_amount,
            self.server_key,
        )
        return hmac.compare_digest(expected, notification.signature_key.lower())
