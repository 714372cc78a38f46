"""
models/payment.py — Payment table definition.

One row per payment attempt. `provider_intent_id` is the processor's
payment-intent id; confirm-payment looks rows up by it.

FK policy: event_id ON DELETE SET NULL — the payment record survives the
deletion of the event it paid for.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clubsphere.app.clock import utcnow
from clubsphere.app.extensions import db
from clubsphere.app.models.enums import PaymentStatus, PaymentType, enum_column_type


class Payment(db.Model):
    __tablename__ = "payments"

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_payments_amount_nonnegative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    user_email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    # Major currency units (e.g. dollars), as shown to the user.
    amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
    )

    type: Mapped[PaymentType] = mapped_column(
        enum_column_type(PaymentType, "payment_type_enum"),
        nullable=False,
    )

    club_id: Mapped[int] = mapped_column(
        ForeignKey("clubs.id", ondelete="RESTRICT"),
        nullable=False,
    )

    event_id: Mapped[int | None] = mapped_column(
        ForeignKey("events.id", ondelete="SET NULL"),
        nullable=True,
    )

    provider_intent_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )

    status: Mapped[PaymentStatus] = mapped_column(
        enum_column_type(PaymentStatus, "payment_status_enum"),
        nullable=False,
        default=PaymentStatus.PENDING,
        server_default=PaymentStatus.PENDING.value,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        onupdate=utcnow,
    )

    # ── Relationships ──────────────────────────────────────────────────────

    club: Mapped["Club"] = relationship("Club")  # noqa: F821

    event: Mapped["Event"] = relationship("Event")  # noqa: F821

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<Payment id={self.id} "
            f"intent={self.provider_intent_id!r} "
            f"status={self.status.value}>"
        )
