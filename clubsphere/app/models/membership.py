"""
models/membership.py — Club membership table definition.

No business logic. No imports from services or routes.

UNIQUE(user_email, club_id) — a user can only belong to a club once. The
service maps a violation of this constraint to ALREADY_MEMBER (409).
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clubsphere.app.clock import utcnow
from clubsphere.app.extensions import db
from clubsphere.app.models.enums import MembershipStatus, enum_column_type


class Membership(db.Model):
    __tablename__ = "memberships"

    __table_args__ = (
        UniqueConstraint("user_email", "club_id", name="uq_memberships_user_club"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    user_email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    # ON DELETE RESTRICT: cannot delete a club that has members.
    club_id: Mapped[int] = mapped_column(
        ForeignKey("clubs.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    status: Mapped[MembershipStatus] = mapped_column(
        enum_column_type(MembershipStatus, "membership_status_enum"),
        nullable=False,
        default=MembershipStatus.ACTIVE,
        server_default=MembershipStatus.ACTIVE.value,
    )

    # Reference supplied by the client when joining a paid club.
    payment_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    # ── Relationships ──────────────────────────────────────────────────────

    club: Mapped["Club"] = relationship("Club")  # noqa: F821

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<Membership id={self.id} "
            f"user_email={self.user_email!r} "
            f"club_id={self.club_id}>"
        )
