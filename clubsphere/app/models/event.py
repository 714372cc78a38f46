"""
models/event.py — Event table definition.

No business logic. No imports from services or routes.

Key design points:
  - `current_attendees` is a cached count of `registered` EventRegistration
    rows. event_service recomputes it in a single UPDATE with a COUNT(*)
    subquery after every register/unregister.
  - `max_attendees` NULL means unbounded.
  - `event_fee` is 0 whenever `is_paid` is false (enforced by event_service
    and by a CHECK constraint).
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clubsphere.app.clock import utcnow
from clubsphere.app.extensions import db


class Event(db.Model):
    __tablename__ = "events"

    __table_args__ = (
        CheckConstraint("event_fee >= 0", name="ck_events_fee_nonnegative"),
        CheckConstraint(
            "is_paid OR event_fee = 0",
            name="ck_events_free_has_no_fee",
        ),
        CheckConstraint(
            "max_attendees IS NULL OR max_attendees > 0",
            name="ck_events_max_attendees_positive",
        ),
        CheckConstraint(
            "current_attendees >= 0",
            name="ck_events_current_attendees_nonnegative",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    # ON DELETE RESTRICT: clubs are never deleted while they own events.
    club_id: Mapped[int] = mapped_column(
        ForeignKey("clubs.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    event_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )

    location: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    is_paid: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default="false",
    )

    event_fee: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0"),
        server_default="0",
    )

    max_attendees: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )

    current_attendees: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
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

    club: Mapped["Club"] = relationship(  # noqa: F821
        "Club",
        back_populates="events",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Event id={self.id} club_id={self.club_id} title={self.title!r}>"
