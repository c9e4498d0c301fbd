from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.adapter.services.payment_gateway import MidtransPaymentGateway
from src.adapter.services.catalog_store import HttpCatalogStore
from src.adapter.services.account_directory import HttpAccountDirectory
from src.adapter.services.order_notifier import InMemoryOrderNotifier
from src.adapter.services.notification_service import create_notification_service
from src.app.services.payment_gateway import PaymentGateway
from src.app.services.catalog_store import CatalogStore
from src.app.services.account_directory import AccountDirectory
from src.app.services.order_notifier import OrderNotifier
from src.app.services.notification_service import NotificationService

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

# One notifier per process; websocket handlers and use cases must share it.
order_notifier = InMemoryOrderNotifier(
    delivery_timeout=ApplicationConfig.REALTIME_DELIVERY_TIMEOUT_SECONDS,
    max_backlog=ApplicationConfig.REALTIME_MAX_BACKLOG,
)

payment_gateway = MidtransPaymentGateway(
    server_key=ApplicationConfig.PAYMENT_GATEWAY_SERVER_KEY,
    is_production=ApplicationConfig.PAYMENT_GATEWAY_IS_PRODUCTION,
    timeout_seconds=ApplicationConfig.PAYMENT_GATEWAY_TIMEOUT_SECONDS,
    finish_url=f"{ApplicationConfig.FRONTEND_URL}/user/history",
    session_ttl_seconds=ApplicationConfig.PAYMENT_SESSION_TTL_SECONDS,
)

catalog_store = HttpCatalogStore(
    ApplicationConfig.CATALOG_SERVICE_URL,
    timeout=ApplicationConfig.DIRECTORY_TIMEOUT_SECONDS,
)

account_directory = HttpAccountDirectory(
    ApplicationConfig.ACCOUNT_DIRECTORY_URL,
    timeout=ApplicationConfig.DIRECTORY_TIMEOUT_SECONDS,
)

notification_service = create_notification_service(ApplicationConfig.ALERT_WEBHOOK_URL)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_payment_gateway() -> PaymentGateway:
    return payment_gateway


def get_catalog_store() -> CatalogStore:
    return catalog_store


def get_account_directory() -> AccountDirectory:
    return account_directory


def get_order_notifier() -> OrderNotifier:
    return order_notifier


def get_notification_service() -> NotificationService:
    return notification_service
