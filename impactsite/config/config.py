# impactsite/config/config.py
# Canonical Impact Site configuration (env-first, production-safe)

from __future__ import annotations

import os
from typing import Optional


# ----------------------------
# Env helpers
# ----------------------------
_TRUTHY = {"1", "true", "yes", "on", "y"}
_FALSY = {"0", "false", "no", "off", "n"}


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    if v is None:
        return default
    s = str(v).strip()
    return s if s else default


def _bool(name: str, default: bool = False) -> bool:
    v = _env(name)
    if v is None:
        return default
    s = v.strip().lower()
    if s in _TRUTHY:
        return True
    if s in _FALSY:
        return False
    return default


def _int(name: str, default: int) -> int:
    v = _env(name)
    if v is None:
        return default
    try:
        return int(str(v).strip())
    except ValueError:
        return default


def _float(name: str, default: float) -> float:
    v = _env(name)
    if v is None:
        return default
    try:
        return float(str(v).strip())
    except ValueError:
        return default


def _clean_base_url(v: Optional[str]) -> str:
    return (v or "").strip().rstrip("/")


# ----------------------------
# Config classes
# ----------------------------
class BaseConfig:
    """
    Env-first config:
    - all important settings can be overridden via environment variables
    - safe defaults for local dev
    """

    ENV = (_env("APP_ENV") or _env("ENV") or _env("FLASK_ENV") or "base").strip().lower()

    DEBUG = _bool("FLASK_DEBUG", False)
    TESTING = _bool("TESTING", False)

    # Security
    SECRET_KEY = _env("SECRET_KEY", "dev-change-me")
    WTF_CSRF_ENABLED = _bool("WTF_CSRF_ENABLED", True)
    TRUST_PROXY = _bool("TRUST_PROXY", False)
    CORS_ORIGINS = _env("CORS_ORIGINS", "*")

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = _env("SESSION_COOKIE_SAMESITE", "Lax")
    SESSION_COOKIE_SECURE = True

    # Brand
    BRAND_NAME = _env("BRAND_NAME", "Impact Foundation")
    PUBLIC_BASE_URL = _clean_base_url(_env("PUBLIC_BASE_URL", ""))

    # Logging
    LOG_LEVEL = _env("LOG_LEVEL", "INFO")
    WERKZEUG_LOG_LEVEL = _env("WERKZEUG_LOG_LEVEL", "WARNING")

    # SQLAlchemy (reference REST backend)
    SQLALCHEMY_DATABASE_URI = _env("SQLALCHEMY_DATABASE_URI", "sqlite:///impactsite-dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}
    AUTO_CREATE_SQLITE = _bool("AUTO_CREATE_SQLITE", True)

    # Remote resource client. Empty API_BASE_URL = in-process bundled API.
    API_BASE_URL = _clean_base_url(_env("API_BASE_URL", ""))
    API_TIMEOUT = _float("API_TIMEOUT", 10.0)
    API_RETRIES = _int("API_RETRIES", 2)

    # Flask-RESTX: keep 404 messages verbatim (no "did you mean" suffix)
    RESTX_ERROR_404_HELP = False
    RESTX_MASK_SWAGGER = False

    # Page rendering budgets (seconds)
    LIST_WAIT_SECONDS = _float("LIST_WAIT_SECONDS", 3.0)
    DASHBOARD_WAIT_SECONDS = _float("DASHBOARD_WAIT_SECONDS", 2.0)
    DASHBOARD_REFRESH_SECONDS = _int("DASHBOARD_REFRESH_SECONDS", 3)

    # Admin dialog pages kept per process (oldest evicted first)
    ADMIN_MAX_PAGES = _int("ADMIN_MAX_PAGES", 512)

    # Mail (contact-message notifications)
    MAIL_SERVER = _env("MAIL_SERVER", "localhost")
    MAIL_PORT = _int("MAIL_PORT", 25)
    MAIL_USE_TLS = _bool("MAIL_USE_TLS", False)
    MAIL_USERNAME = _env("MAIL_USERNAME")
    MAIL_PASSWORD = _env("MAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = _env("MAIL_DEFAULT_SENDER", "no-reply@impact.local")
    CONTACT_NOTIFY_TO = _env("CONTACT_NOTIFY_TO", "")

    # Error reporting
    SENTRY_DSN = _env("SENTRY_DSN", "")

    @classmethod
    def init_app(cls, app) -> None:
        """
        Optional hook for factory boot hardening.
        Call this from create_app() after app.config.from_object(...)
        """
        uri = str(app.config.get("SQLALCHEMY_DATABASE_URI") or "")

        if uri.startswith("sqlite:"):
            opts = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS") or {})
            connect_args = dict(opts.get("connect_args") or {})
            connect_args.setdefault("check_same_thread", False)
            opts["connect_args"] = connect_args
            opts.setdefault("pool_pre_ping", True)
            app.config["SQLALCHEMY_ENGINE_OPTIONS"] = opts


class DevelopmentConfig(BaseConfig):
    ENV = "development"
    DEBUG = True

    SESSION_COOKIE_SECURE = False
    LOG_LEVEL = _env("LOG_LEVEL", "DEBUG")


class TestingConfig(BaseConfig):
    ENV = "testing"
    TESTING = True
    DEBUG = False

    SECRET_KEY = "testing-secret"
    WTF_CSRF_ENABLED = False
    SESSION_COOKIE_SECURE = False
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    API_BASE_URL = ""
    MAIL_SUPPRESS_SEND = True
    CONTACT_NOTIFY_TO = ""
    SENTRY_DSN = ""
    LIST_WAIT_SECONDS = 10.0
    DASHBOARD_WAIT_SECONDS = 10.0


class ProductionConfig(BaseConfig):
    ENV = "production"
    DEBUG = False

    SESSION_COOKIE_SECURE = True
    TRUST_PROXY = _bool("TRUST_PROXY", True)

    @classmethod
    def init_app(cls, app) -> None:
        super().init_app(app)

        # ---- Production guardrails (fail fast) ----
        sk = app.config.get("SECRET_KEY")
        if not sk or sk == "dev-change-me":
            raise RuntimeError("SECRET_KEY must be set to a strong random value in production.")

        base = (app.config.get("API_BASE_URL") or "").strip()
        if base.startswith("http://") and not base.startswith(("http://127.0.0.1", "http://localhost")):
            raise RuntimeError("API_BASE_URL must be https:// in production.")

        if _bool("FLASK_DEBUG", False):
            raise RuntimeError("FLASK_DEBUG must be 0 in production.")
