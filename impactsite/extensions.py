import atexit
import logging
import os
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Callable, List, Optional

from flask_cors import CORS
from flask_mail import Mail, Message
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from flask_wtf.csrf import CSRFProtect

log = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
# Core singletons
# ─────────────────────────────────────────────────────────────
db = SQLAlchemy()
migrate = Migrate()
mail = Mail()
csrf = CSRFProtect()
cors = CORS()


# ─────────────────────────────────────────────────────────────
# Background tasks + clean shutdown
# ─────────────────────────────────────────────────────────────
_BG_MAX_WORKERS = int(os.getenv("BG_MAX_WORKERS", "8"))
_EXECUTOR = ThreadPoolExecutor(max_workers=_BG_MAX_WORKERS, thread_name_prefix="impactsite-bg")


def get_executor() -> Executor:
    return _EXECUTOR


def run_bg(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
    return _EXECUTOR.submit(func, *args, **kwargs)


@atexit.register
def _shutdown_executor() -> None:
    _EXECUTOR.shutdown(wait=False, cancel_futures=True)


# ─────────────────────────────────────────────────────────────
# Safe DB helpers
# ─────────────────────────────────────────────────────────────
def safe_commit() -> bool:
    try:
        db.session.commit()
        return True
    except Exception as e:
        log.error("DB commit failed: %s", e, exc_info=True)
        db.session.rollback()
        return False


# ─────────────────────────────────────────────────────────────
# Email helper
# ─────────────────────────────────────────────────────────────
def send_email_async(
    app: Any,
    subject: str,
    recipients: List[str],
    *,
    body: str,
    reply_to: Optional[str] = None,
    sender: Optional[str] = None,
    max_retries: int = 2,
    retry_backoff: float = 0.5,
) -> Future:
    def _job() -> bool:
        # Always run inside an app context
        with app.app_context():
            logger = getattr(app, "logger", log)
            msg = Message(
                subject=subject,
                recipients=recipients,
                sender=sender or app.config.get("MAIL_DEFAULT_SENDER"),
                reply_to=reply_to,
                body=body,
            )

            attempts = 0
            while True:
                try:
                    mail.send(msg)
                    return True
                except Exception as e:
                    attempts += 1
                    if attempts > max_retries:
                        logger.error("Email send permanently failed: %s", e, exc_info=True)
                        return False
                    logger.warning(
                        "Mail send failed (attempt %s/%s): %s",
                        attempts,
                        max_retries,
                        e,
                    )
                    time.sleep(float(retry_backoff) * attempts)

    return run_bg(_job)


# ─────────────────────────────────────────────────────────────
# Init all extensions
# ─────────────────────────────────────────────────────────────
def init_all_extensions(app: Any, *, cors_origins: Any = "*") -> None:
    db.init_app(app)
    migrate.init_app(app, db, compare_type=True, render_as_batch=True)
    mail.init_app(app)
    csrf.init_app(app)

    # Browser rule: cannot use credentials with wildcard origin
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": cors_origins}},
        supports_credentials=cors_origins != "*",
        expose_headers=["X-Request-ID"],
        allow_headers=["Content-Type", "X-Request-ID"],
        methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    )


__all__ = [
    "db",
    "migrate",
    "mail",
    "csrf",
    "cors",
    "get_executor",
    "run_bg",
    "safe_commit",
    "send_email_async",
    "init_all_extensions",
]
