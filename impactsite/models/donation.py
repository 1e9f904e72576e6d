from __future__ import annotations

# -----------------------------------------------------------------------------
# Donation intent: what a visitor pledged from a program page.
# Cents-based; payment processing happens outside this app.
# -----------------------------------------------------------------------------
from typing import Any, Dict

from sqlalchemy import CheckConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column

from impactsite.extensions import db
from impactsite.forms.donation_form import DONATION_PROGRAMS

from .mixins import TimestampMixin, isoformat_utc


class Donation(TimestampMixin, db.Model):
    __tablename__ = "donations"
    __table_args__ = (
        CheckConstraint("amount_cents >= 0", name="ck_donations_amount_nonneg"),
        Index("ix_donations_program_created", "program", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    program: Mapped[str] = mapped_column(
        db.String(40),
        nullable=False,
        default="general",
        doc=f"Donation program: {', '.join(DONATION_PROGRAMS)}",
    )
    name: Mapped[str] = mapped_column(db.String(160), nullable=False)
    email: Mapped[str] = mapped_column(db.String(160), nullable=False, index=True)
    amount_cents: Mapped[int] = mapped_column(
        db.Integer,
        default=0,
        nullable=False,
        doc="Pledged amount in cents",
    )
    status: Mapped[str] = mapped_column(db.String(32), nullable=False, default="pledged")

    @property
    def amount_dollars(self) -> float:
        return round((self.amount_cents or 0) / 100.0, 2)

    def set_amount_dollars(self, dollars: Any) -> None:
        self.amount_cents = int(round(float(dollars) * 100))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "program": self.program,
            "name": self.name,
            "email": self.email,
            "amount": self.amount_dollars,
            "status": self.status,
            "createdAt": isoformat_utc(self.created_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Donation {self.name} ${self.amount_dollars:,.2f} program={self.program}>"
