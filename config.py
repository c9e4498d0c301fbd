import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.environ.get("ORDER_SERVICE_CONFIG", os.path.join(ROOT_PATH, "env.yaml"))

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./orders.db")
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", True))
    API_PREFIX = data.get("API_PREFIX", "")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    AUTH_DISABLED = bool(data.get("AUTH_DISABLED", False))
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Orders
    SERVICE_FEE = int(data.get("SERVICE_FEE", 2000))  # Flat platform fee (minor units)
    ORDER_REFERENCE_PREFIX = data.get("ORDER_REFERENCE_PREFIX", "ORD")

    # Payment gateway
    PAYMENT_GATEWAY_SERVER_KEY = data.get("PAYMENT_GATEWAY_SERVER_KEY", "")
    PAYMENT_GATEWAY_IS_PRODUCTION = bool(data.get("PAYMENT_GATEWAY_IS_PRODUCTION", False))
    PAYMENT_GATEWAY_TIMEOUT_SECONDS = float(data.get("PAYMENT_GATEWAY_TIMEOUT_SECONDS", 10.0))
    PAYMENT_SESSION_TTL_SECONDS = int(data.get("PAYMENT_SESSION_TTL_SECONDS", 86400))
    FRONTEND_URL = data.get("FRONTEND_URL", "http://localhost:8080")
    REJECT_INVALID_WEBHOOK_SIGNATURE = bool(data.get("REJECT_INVALID_WEBHOOK_SIGNATURE", True))

    # Withdrawals
    WITHDRAWAL_MINIMUM_AMOUNT = int(data.get("WITHDRAWAL_MINIMUM_AMOUNT", 10000))

    # Collaborators
    CATALOG_SERVICE_URL = data.get("CATALOG_SERVICE_URL", "http://localhost:8001")
    ACCOUNT_DIRECTORY_URL = data.get("ACCOUNT_DIRECTORY_URL", "http://localhost:8002")
    DIRECTORY_TIMEOUT_SECONDS = float(data.get("DIRECTORY_TIMEOUT_SECONDS", 5.0))

    # Operator alerts
    ALERT_WEBHOOK_URL = data.get("ALERT_WEBHOOK_URL", None)

    # Realtime
    REALTIME_DELIVERY_TIMEOUT_SECONDS = float(data.get("REALTIME_DELIVERY_TIMEOUT_SECONDS", 5.0))
    REALTIME_MAX_BACKLOG = int(data.get("REALTIME_MAX_BACKLOG", 100))  # Per subscriber

    # Ledger Reconciliation
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
    RECONCILIATION_INTERVAL_SECONDS = data.get("RECONCILIATION_INTERVAL_SECONDS", 86400)  # Daily
