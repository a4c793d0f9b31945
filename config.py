import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./parking.db")
    MIGRATION_DB_URI = data.get("MIGRATION_DB_URI", "sqlite:///./parking.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Calendar used for Friday/holiday tariff selection
    TIMEZONE = data.get("TIMEZONE", "Asia/Tehran")
    CURRENCY_LABEL = data.get("CURRENCY_LABEL", "تومان")

    # Credit notifications
    NOTIFICATION_WEBHOOK_URL = data.get("NOTIFICATION_WEBHOOK_URL", None)
    NOTIFICATION_DEDUP_HOURS = data.get("NOTIFICATION_DEDUP_HOURS", 24)
    DEFAULT_NOTIFICATION_CHANNELS = data.get("DEFAULT_NOTIFICATION_CHANNELS", ["in_app"])

    # Monthly auto-charge sweep
    MONTHLY_CHARGE_ENABLED = bool(data.get("MONTHLY_CHARGE_ENABLED", True))

    # Online top-up gateway
    PAYMENT_MERCHANT_ID = data.get("PAYMENT_MERCHANT_ID", "test-merchant")
    PAYMENT_CALLBACK_URL = data.get(
        "PAYMENT_CALLBACK_URL", "http://localhost:8000/api/credit-accounts/top-up/callback"
    )
    PAYMENT_API_URL = data.get("PAYMENT_API_URL", "https://api.zarinpal.com/pg/v4/payment")
    PAYMENT_START_URL = data.get("PAYMENT_START_URL", "https://www.zarinpal.com/pg/StartPay")
    PAYMENT_SANDBOX = bool(data.get("PAYMENT_SANDBOX", True))
