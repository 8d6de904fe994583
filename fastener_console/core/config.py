# fastener_console/core/config.py
import os
from dotenv import load_dotenv

load_dotenv()  # load .env


def _split_csv(value: str) -> list:
    return [item.strip() for item in value.split(",") if item.strip()]


class BACKEND_CONFIG:
    # quoting system REST backend
    BASE_URL = os.getenv("BACKEND_BASE_URL", "http://localhost:8000").rstrip("/")
    TIMEOUT = float(os.getenv("BACKEND_TIMEOUT", "15"))
    GET_RETRY = int(os.getenv("BACKEND_GET_RETRY", "1"))  # GET only, mutations never retry
    RETRY_BACKOFF_SECONDS = float(os.getenv("BACKEND_RETRY_BACKOFF_SECONDS", "0.5"))

    LOGIN_PATH = "/api/login"
    COMPANIES_PATH = "/api/definitions/companies"
    CUSTOMERS_PATH = "/api/definitions/customers"
    TRADE_TERMS_PATH = "/api/customers/{customer_id}/trade-terms"
    PRODUCT_CATEGORIES_PATH = "/api/definitions/product-categories"
    MENUS_PATH = "/api/menus"
    ROLES_PATH = "/api/roles"
    ROLE_MENUS_PATH = "/api/role-menus"
    ACCOUNTS_PATH = "/api/manage-accounts"


class TOKEN_CONFIG:
    SESSION_SECRET_KEY = os.getenv("SESSION_SECRET_KEY", "your-secret-key")
    ALGORITHM = "HS256"
    SESSION_EXPIRE_MINUTES = int(os.getenv("SESSION_EXPIRE_MINUTES", "30"))  # idle logout window
    SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "console_session")
    SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"
    SESSION_RENEW_HEADER = os.getenv("SESSION_RENEW_HEADER", "X-Session-Token")  # renewed token for bearer clients


class ROLE_CONFIG:
    SUPERADMIN_ROLE = os.getenv("SUPERADMIN_ROLE", "superadmin")
    # roles allowed on the account management screens
    ACCOUNT_ADMIN_ROLES = tuple(_split_csv(os.getenv("ACCOUNT_ADMIN_ROLES", "superadmin,company_admin")))
    DEFAULT_ACCOUNT_ROLE = "sales"


class CORS_CONFIG:
    ALLOW_ORIGINS = _split_csv(os.getenv(
        "CORS_ALLOW_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000"
    ))


class LOG_CONFIG:
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


class EDITOR_CONFIG:
    # role-menu editors kept in memory, one per session
    REGISTRY_SIZE = int(os.getenv("EDITOR_REGISTRY_SIZE", "1000"))
