"""
Configuration for the fireworks storefront.

Catalog, orders and accounts live behind the remote commerce API; the
storefront only needs to know where it is. Cart, session and order cache
live in the signed browser session, so SECRET_KEY must be stable across
restarts for a signed-in user to stay signed in.
"""

import os
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

# Environment must be loaded before the class bodies below read it
load_dotenv(override=True)

BASE_DIR = Path(__file__).resolve().parent


def _env_float(name: str, default: str) -> float:
    return float(os.environ.get(name, default))


class Config:
    """Settings shared by every environment."""

    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"
    TESTING = False

    # Browser session (holds auth-storage, cart and orders)
    SESSION_COOKIE_NAME = "fireworks_storefront_session"
    PERMANENT_SESSION_LIFETIME = timedelta(days=30)

    # Commerce API
    COMMERCE_API_URL = os.environ.get("COMMERCE_API_URL", "http://localhost:5000/api")
    COMMERCE_API_TIMEOUT = _env_float("COMMERCE_API_TIMEOUT", "10")

    # Session record for `flask login` / `flask whoami` (no browser involved)
    AUTH_STORAGE_PATH = os.environ.get(
        "AUTH_STORAGE_PATH", str(BASE_DIR / "instance" / "auth-storage.json")
    )

    # Simulated payment: seconds to wait before the (always successful) result
    PAYMENT_DELAY_SECONDS = _env_float("PAYMENT_DELAY_SECONDS", "3.0")


class ProductionConfig(Config):
    ENVIRONMENT = "production"
    DEBUG = False
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    """In-process tests: fixed secret, no payment wait."""
    ENVIRONMENT = "testing"
    DEBUG = False
    TESTING = True
    SECRET_KEY = "testing-secret-key"
    PAYMENT_DELAY_SECONDS = 0.0
