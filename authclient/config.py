import logging
import os

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Invalid number for {name}: {value!r}. Using default: {default}")
        return default


# --- Config ---
API_BASE_URL = os.getenv("AUTH_API_BASE_URL", "http://localhost:8080/api").rstrip("/")
CSRF_COOKIE_NAME = os.getenv("AUTH_CSRF_COOKIE", "csrf_token")
CSRF_HEADER_NAME = os.getenv("AUTH_CSRF_HEADER", "X-CSRF-Token")
REQUESTED_WITH_HEADER = "X-Requested-With"
REQUESTED_WITH_VALUE = "XMLHttpRequest"
LOGIN_PATH = os.getenv("AUTH_LOGIN_PATH", "/login")
REFRESH_PATH = os.getenv("AUTH_REFRESH_PATH", "/auth/refresh")
HTTP_TIMEOUT = _env_float("AUTH_HTTP_TIMEOUT", 10.0)
SINGLE_FLIGHT_REFRESH = _env_bool("AUTH_SINGLE_FLIGHT_REFRESH", False)

# Methods that never carry the anti-forgery header
SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})

MIN_PASSWORD_LENGTH = 8


def log_configuration() -> None:
    logger.info("=== Auth client configuration ===")
    logger.info(f"AUTH_API_BASE_URL: {API_BASE_URL}")
    logger.info(f"AUTH_CSRF_COOKIE: {CSRF_COOKIE_NAME}")
    logger.info(f"AUTH_CSRF_HEADER: {CSRF_HEADER_NAME}")
    logger.info(f"AUTH_LOGIN_PATH: {LOGIN_PATH}")
    logger.info(f"AUTH_HTTP_TIMEOUT: {HTTP_TIMEOUT}")
    logger.info(f"AUTH_SINGLE_FLIGHT_REFRESH: {'enabled' if SINGLE_FLIGHT_REFRESH else 'disabled'}")
