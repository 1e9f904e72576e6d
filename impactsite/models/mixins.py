# impactsite/models/mixins.py
"""Shared SQLAlchemy mixins for timestamps."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Mapped, mapped_column

from impactsite.extensions import db


def utcnow() -> datetime:
    """Naive UTC timestamp (SQLite drops tzinfo anyway)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat_utc(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat() + "Z"


class TimestampMixin:
    """Adds created_at and updated_at columns with auto-refresh behavior."""

    created_at: Mapped[datetime] = mapped_column(
        db.DateTime, default=utcnow, nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        db.DateTime,
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
        index=True,
    )
