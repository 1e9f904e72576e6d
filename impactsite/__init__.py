# impactsite/__init__.py
# Impact Site: Flask app factory
# Goals:
# - env-first config with explicit overrides for tests
# - one ResourceClient per app, injected into every page
# - JSON error shape for /api, HTML for web
# - request ids in every log line

from __future__ import annotations

import logging
import os
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Type, Union
from uuid import uuid4

import sentry_sdk
from dotenv import load_dotenv
from flask import Flask, g, jsonify, render_template, request
from flask_compress import Compress
from flask_talisman import Talisman
from sentry_sdk.integrations.flask import FlaskIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from werkzeug.exceptions import HTTPException, InternalServerError
from werkzeug.middleware.proxy_fix import ProxyFix
from werkzeug.utils import import_string

# IMPORTANT: never override real env vars in prod
load_dotenv(override=False)

ConfigLike = Union[str, Type[Any]]

from impactsite.extensions import db, init_all_extensions  # noqa: E402


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _env_mode(app: Optional[Flask] = None) -> str:
    """
    Determine environment mode deterministically.
    Priority:
      1) app.config["ENV"]
      2) APP_ENV / ENV / FLASK_ENV env vars
      3) default "development"
    """
    if app is not None:
        v = app.config.get("ENV")
        if v and str(v).strip():
            return str(v).strip().lower()

    for key in ("APP_ENV", "ENV", "FLASK_ENV"):
        val = (os.getenv(key) or "").strip().lower()
        if val:
            if val == "prod":
                return "production"
            if val == "dev":
                return "development"
            return val

    return "development"


def _resolve_config(target: Optional[ConfigLike]) -> ConfigLike:
    """
    Choose config class/module path.
    - If explicitly provided, respect it.
    - Else if FLASK_CONFIG is set, use it (a dotted path or a CONFIG_BY_NAME key).
    - Else ProductionConfig when env indicates production; otherwise DevelopmentConfig.
    """
    from impactsite.config import CONFIG_BY_NAME

    if target is not None:
        if isinstance(target, str) and target in CONFIG_BY_NAME:
            return CONFIG_BY_NAME[target]
        return target

    explicit = (os.getenv("FLASK_CONFIG") or "").strip()
    if explicit:
        return CONFIG_BY_NAME.get(explicit.lower(), explicit)

    return CONFIG_BY_NAME["production" if _env_mode(None) == "production" else "development"]


def _is_prod(app: Flask) -> bool:
    return _env_mode(app) == "production"


def _json_error(message: str, status: int, **extra: Any):
    payload: Dict[str, Any] = {"ok": False, "error": {"code": int(status), "message": str(message)}}
    rid = extra.pop("request_id", None)
    if rid:
        payload["error"]["request_id"] = rid
    if extra:
        payload["error"].update(extra)

    resp = jsonify(payload)
    resp.status_code = int(status)
    return resp


def _wants_json_response() -> bool:
    path = request.path or ""
    if path.startswith(("/api/", "/healthz", "/version")):
        return True
    accept = (request.headers.get("Accept") or "").lower()
    return "application/json" in accept and "text/html" not in accept


# -----------------------------------------------------------------------------
# Logging with request_id
# -----------------------------------------------------------------------------
class _RequestIDFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        try:
            record.request_id = getattr(g, "request_id", "-")
        except RuntimeError:
            # outside an app/request context (background fetches, CLI)
            record.request_id = "-"
        return True


def _configure_logging(app: Flask) -> None:
    fmt = "%(asctime)s [%(levelname)s] %(name)s [rid=%(request_id)s]: %(message)s"
    root = logging.getLogger()

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        handler.addFilter(_RequestIDFilter())
        root.addHandler(handler)
    else:
        for h in root.handlers:
            if not any(isinstance(f, _RequestIDFilter) for f in h.filters):
                h.addFilter(_RequestIDFilter())
            if not getattr(h, "formatter", None) or "%(request_id)s" not in getattr(h.formatter, "_fmt", ""):
                h.setFormatter(logging.Formatter(fmt))

    root.setLevel(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    logging.getLogger("werkzeug").setLevel(str(app.config.get("WERKZEUG_LOG_LEVEL", "WARNING")).upper())
    app.logger.info("Loaded config: ENV=%s DEBUG=%s", app.config.get("ENV", "?"), app.debug)


# -----------------------------------------------------------------------------
# Jinja helpers
# -----------------------------------------------------------------------------
def _register_jinja_helpers(app: Flask) -> None:
    @app.context_processor
    def _defaults():
        return {
            "brand_name": app.config.get("BRAND_NAME", "Impact Foundation"),
            "current_year": datetime.now(timezone.utc).year,
        }


# -----------------------------------------------------------------------------
# ProxyFix (reverse proxy)
# -----------------------------------------------------------------------------
def _apply_proxyfix(app: Flask) -> None:
    if not app.config.get("TRUST_PROXY"):
        return

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=1)
    app.logger.info("ProxyFix enabled (trusting X-Forwarded-* headers).")
    app.config["PREFERRED_URL_SCHEME"] = "https"


# -----------------------------------------------------------------------------
# Integrations
# -----------------------------------------------------------------------------
def _init_sentry(app: Flask) -> None:
    dsn = (app.config.get("SENTRY_DSN") or "").strip()
    if not dsn:
        return
    sentry_sdk.init(
        dsn=dsn,
        integrations=[
            FlaskIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.0")),
        send_default_pii=False,
        environment=app.config.get("ENV", "development"),
        release=os.getenv("GIT_COMMIT"),
    )
    app.logger.info("Sentry initialized")


def _init_talisman(app: Flask) -> None:
    if not _is_prod(app):
        return
    Talisman(app, content_security_policy=None)


def _parse_cors_origins(raw: str) -> Union[str, list]:
    raw = (raw or "*").strip()
    if raw in {"", "*"}:
        return "*"
    if "," in raw:
        return [o.strip() for o in raw.split(",") if o.strip()]
    return raw


def _maybe_create_sqlite_tables(app: Flask) -> None:
    uri = (app.config.get("SQLALCHEMY_DATABASE_URI") or "").strip()
    if not uri.startswith("sqlite"):
        return
    if app.config.get("AUTO_CREATE_SQLITE", True) is not True:
        return
    import impactsite.models  # noqa: F401  (register tables)

    with app.app_context():
        db.create_all()


# -----------------------------------------------------------------------------
# Request lifecycle + errors
# -----------------------------------------------------------------------------
def _register_request_lifecycle(app: Flask) -> None:
    @app.before_request
    def _bootstrap_request():
        g.request_id = request.headers.get("X-Request-ID") or uuid4().hex
        g._start_ts = time.perf_counter()

    @app.after_request
    def _attach_request_headers(resp):
        resp.headers["X-Request-ID"] = getattr(g, "request_id", "-")
        start = getattr(g, "_start_ts", None)
        if start:
            resp.headers["X-Response-Time-ms"] = str(int((time.perf_counter() - start) * 1000))
        return resp


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def _http_err(err: HTTPException):
        if _wants_json_response():
            return _json_error(err.description or err.name, err.code or 500, request_id=getattr(g, "request_id", "-"))
        if err.code == 404:
            return render_template("errors/404.html"), 404
        return err

    @app.errorhandler(Exception)
    def _uncaught(err: Exception):
        app.logger.exception("Unhandled error")
        if _wants_json_response():
            return _json_error("Internal Server Error", 500, request_id=getattr(g, "request_id", "-"))
        return InternalServerError()


# -----------------------------------------------------------------------------
# Health endpoints
# -----------------------------------------------------------------------------
def _register_health_endpoints(app: Flask) -> None:
    @app.get("/healthz")
    def _healthz():
        return {
            "status": "ok",
            "brand": app.config.get("BRAND_NAME", "Impact Foundation"),
            "env": app.config.get("ENV", "unknown"),
            "request_id": getattr(g, "request_id", "-"),
        }

    @app.get("/version")
    def _version():
        return {
            "version": os.getenv("GIT_COMMIT", "dev"),
            "env": app.config.get("ENV"),
            "brand": app.config.get("BRAND_NAME", "Impact Foundation"),
            "public_base_url": app.config.get("PUBLIC_BASE_URL") or "",
            "api_base_url": app.config.get("API_BASE_URL") or "(in-process)",
        }


def _register_blueprints(app: Flask) -> None:
    from impactsite.admin import admin_bp
    from impactsite.routes import api_bp, main_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp, url_prefix="/api")
    app.register_blueprint(admin_bp)


# -----------------------------------------------------------------------------
# App Factory
# -----------------------------------------------------------------------------
def create_app(config_class: Optional[ConfigLike] = None, overrides: Optional[Dict[str, Any]] = None) -> Flask:
    app = Flask(__name__)

    # ---- Config loading
    cfg = _resolve_config(config_class)
    if isinstance(cfg, str):
        cfg = import_string(cfg)
    app.config.from_object(cfg)
    if overrides:
        app.config.update(overrides)

    init_cfg = getattr(cfg, "init_app", None)
    if callable(init_cfg):
        init_cfg(app)

    app.config["ENV"] = _env_mode(app)
    app.url_map.strict_slashes = False
    app.config.setdefault("JSON_SORT_KEYS", False)

    # ---- Proxy handling first
    _apply_proxyfix(app)

    # ---- Logging / Jinja helpers
    _configure_logging(app)
    _register_jinja_helpers(app)

    # ---- Optional integrations
    _init_sentry(app)
    _init_talisman(app)

    # ---- Core extensions
    init_all_extensions(app, cors_origins=_parse_cors_origins(app.config.get("CORS_ORIGINS", "*")))
    Compress(app)
    _maybe_create_sqlite_tables(app)

    # ---- Resource client + admin page store
    from impactsite.admin.store import init_page_store
    from impactsite.resources import init_resources

    init_resources(app)
    init_page_store(app)

    # ---- Request lifecycle / errors
    _register_request_lifecycle(app)
    _register_error_handlers(app)

    # ---- Blueprints + health
    _register_blueprints(app)
    _register_health_endpoints(app)

    # ---- CLI
    from impactsite.cli import seed_content

    app.cli.add_command(seed_content)

    return app
