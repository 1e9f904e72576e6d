# ──────────────────────────────────────────────────────────────────────────────
# Program model: a community program shown on the public site and managed
# from the admin CRUD page. Ids are opaque, server-assigned strings.
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations

from typing import Any, Dict
from uuid import uuid4

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from impactsite.extensions import db

from .mixins import TimestampMixin, isoformat_utc

WRITABLE_FIELDS = ("title", "category", "description", "image")


def _new_program_id() -> str:
    return uuid4().hex


class Program(TimestampMixin, db.Model):
    __tablename__ = "programs"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_program_id)
    title: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    def apply(self, values: Dict[str, Any]) -> None:
        """Copy validated writable fields onto the row (last write wins)."""
        for name in WRITABLE_FIELDS:
            if name in values:
                setattr(self, name, values[name])

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "description": self.description,
            "image": self.image,
            "createdAt": isoformat_utc(self.created_at),
            "updatedAt": isoformat_utc(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Program id={self.id} title={self.title!r}>"
