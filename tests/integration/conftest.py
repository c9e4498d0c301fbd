import hmac
from typing import Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401 registers tables on SQLModel.metadata
from config import ApplicationConfig
from src.adapter.services.order_notifier import InMemoryOrderNotifier
from src.adapter.services.payment_gateway import compute_signature
from src.app.services.account_directory import AccountDirectory, Profile
from src.app.services.catalog_store import CatalogStore
from src.app.services.notification_service import NotificationService, OperatorAlert
from src.app.services.payment_gateway import (
    PaymentGateway,
    PaymentGatewayError,
    PaymentSession,
    GatewayTransactionStatus,
)
from src.depends import (
    get_session,
    get_payment_gateway,
    get_catalog_store,
    get_account_directory,
    get_order_notifier,
    get_notification_service,
)
from src.domain.cart import ProductSnapshot

SERVER_KEY = "SB-Mid-server-integration"

CUSTOMER = {"X-User-Id": "user_1", "X-User-Role": "customer"}
OTHER_CUSTOMER = {"X-User-Id": "user_2", "X-User-Role": "customer"}
SELLER = {"X-User-Id": "seller_1", "X-User-Role": "seller", "X-Tenant-Id": "tenant_1"}
ADMIN = {"X-User-Id": "admin_1", "X-User-Role": "admin"}


class FakePaymentGateway(PaymentGateway):
    """Issues numbered tokens; verifies signatures the way the gateway signs them"""

    def __init__(self):
        self.available = True
        self.sessions: List[dict] = []
        self.statuses: Dict[str, GatewayTransactionStatus] = {}

    async def create_session(self, order_reference, gross_amount, items, customer) -> PaymentSession:
        if not self.available:
            raise PaymentGatewayError("gateway unavailable")
        token = f"snap-token-{len(self.sessions) + 1}"
        self.sessions.append({"order_reference": order_reference, "gross_amount": gross_amount, "items": items})
        return PaymentSession(token=token, redirect_url=f"https://pay.test/{token}")

    async def get_status(self, order_reference: str) -> Optional[GatewayTransactionStatus]:
        return self.statuses.get(order_reference)

    def verify_signature(self, notification: GatewayTransactionStatus) -> bool:
        if not notification.signature_key or notification.status_code is None:
            return False
        expected = compute_signature(
            notification.order_reference, notification.status_code, notification.gross_amount, SERVER_KEY
        )
        return hmac.compare_digest(expected, notification.signature_key)


class FakeCatalogStore(CatalogStore):
    def __init__(self):
        self.products = {
            "p_rice": ProductSnapshot(id="p_rice", name="Nasi Goreng", price=19000, tenant_id="tenant_1"),
            "p_tea": ProductSnapshot(id="p_tea", name="Es Teh", price=4000, tenant_id="tenant_1"),
            "p_soup": ProductSnapshot(id="p_soup", name="Soto Ayam", price=15000, tenant_id="tenant_2"),
        }

    async def get_product(self, product_id: str) -> Optional[ProductSnapshot]:
        return self.products.get(product_id)


class FakeAccountDirectory(AccountDirectory):
    async def get_profile(self, user_id: str) -> Optional[Profile]:
        return Profile(user_id=user_id, name="Budi", phone="08123456789")


class RecordingNotificationService(NotificationService):
    def __init__(self):
        self.alerts: List[OperatorAlert] = []

    async def send_alert(self, alert: OperatorAlert) -> bool:
        self.alerts.append(alert)
        return True


def gateway_notification(
    order_reference: str,
    transaction_status: str = "settlement",
    gross_amount: str = "40000.00",
    status_code: str = "200",
    fraud_status: Optional[str] = None,
    signed: bool = True,
) -> dict:
    body = {
        "order_id": order_reference,
        "transaction_status": transaction_status,
        "gross_amount": gross_amount,
        "status_code": status_code,
        "payment_type": "qris",
        "fraud_status": fraud_status,
    }
    if signed:
        body["signature_key"] = compute_signature(order_reference, status_code, gross_amount, SERVER_KEY)
    else:
        body["signature_key"] = "0" * 128
    return body


@pytest.fixture(autouse=True)
def app_config(monkeypatch):
    """Pin the settings the tests depend on, whatever env.yaml says"""
    monkeypatch.setattr(ApplicationConfig, "AUTH_DISABLED", False)
    monkeypatch.setattr(ApplicationConfig, "SERVICE_FEE", 2000)
    monkeypatch.setattr(ApplicationConfig, "WITHDRAWAL_MINIMUM_AMOUNT", 10000)
    monkeypatch.setattr(ApplicationConfig, "REJECT_INVALID_WEBHOOK_SIGNATURE", True)
    monkeypatch.setattr(ApplicationConfig, "ENABLE_SENTRY", 0)
    monkeypatch.setattr(ApplicationConfig, "API_PREFIX", "")
    return ApplicationConfig


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create a throwaway SQLite database per test"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'orders_test.db'}", echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest.fixture
def gateway():
    return FakePaymentGateway()


@pytest.fixture
def catalog():
    return FakeCatalogStore()


@pytest.fixture
def alerts():
    return RecordingNotificationService()


@pytest.fixture
def notifier():
    return InMemoryOrderNotifier()


@pytest_asyncio.fixture
async def client(db_session, gateway, catalog, alerts, notifier, app_config):
    """Create test client with database session and collaborator overrides"""
    from src.api.app import create_app

    app = create_app(app_config)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_catalog_store] = lambda: catalog
    app.dependency_overrides[get_account_directory] = lambda: FakeAccountDirectory()
    app.dependency_overrides[get_order_notifier] = lambda: notifier
    app.dependency_overrides[get_notification_service] = lambda: alerts

    # ASGITransport does not run the lifespan, so no tables are created on the default engine
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
