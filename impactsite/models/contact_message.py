from __future__ import annotations

# impactsite/models/contact_message.py
from typing import Any, Dict

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from impactsite.extensions import db

from .mixins import TimestampMixin, isoformat_utc


class ContactMessage(TimestampMixin, db.Model):
    __tablename__ = "contact_messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    email: Mapped[str] = mapped_column(String(160), nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "subject": self.subject,
            "message": self.message,
            "createdAt": isoformat_utc(self.created_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<ContactMessage id={self.id} email={self.email!r}>"
