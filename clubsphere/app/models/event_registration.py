"""
models/event_registration.py — EventRegistration table definition.

No business logic. No imports from services or routes.

UNIQUE(event_id, user_email) is the race-safe guarantee that a user holds at
most one registration per event; the service pre-check only produces a
friendlier error and may lose a race.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clubsphere.app.clock import utcnow
from clubsphere.app.extensions import db
from clubsphere.app.models.enums import RegistrationStatus, enum_column_type


class EventRegistration(db.Model):
    __tablename__ = "event_registrations"

    __table_args__ = (
        UniqueConstraint(
            "event_id",
            "user_email",
            name="uq_event_registrations_event_user",
        ),
        # Attendee recounts filter on (event_id, status).
        Index("idx_event_registrations_event_status", "event_id", "status"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    # ON DELETE CASCADE: registrations do not outlive their event.
    event_id: Mapped[int] = mapped_column(
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
    )

    user_email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    club_id: Mapped[int] = mapped_column(
        ForeignKey("clubs.id", ondelete="RESTRICT"),
        nullable=False,
    )

    status: Mapped[RegistrationStatus] = mapped_column(
        enum_column_type(RegistrationStatus, "registration_status_enum"),
        nullable=False,
        default=RegistrationStatus.REGISTERED,
        server_default=RegistrationStatus.REGISTERED.value,
    )

    payment_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    # ── Relationships ──────────────────────────────────────────────────────

    event: Mapped["Event"] = relationship("Event")  # noqa: F821

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<EventRegistration id={self.id} "
            f"event_id={self.event_id} "
            f"user_email={self.user_email!r}>"
        )
