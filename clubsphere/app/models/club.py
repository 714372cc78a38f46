"""
models/club.py — Club table definition.

No business logic. No imports from services or routes.

Key design points:
  - `manager_email` is a snapshot of the creating manager's email, not a
    foreign key. Ownership checks compare it to the caller's email.
  - `member_count` is a cached aggregate of membership rows. It is only
    changed through an atomic UPDATE ... SET member_count = member_count + 1
    in membership_service, never by read-modify-write.
  - `membership_fee` uses Numeric(10, 2) — never Float.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clubsphere.app.clock import utcnow
from clubsphere.app.extensions import db
from clubsphere.app.models.enums import ClubCategory, ClubStatus, enum_column_type


class Club(db.Model):
    __tablename__ = "clubs"

    __table_args__ = (
        CheckConstraint("membership_fee >= 0", name="ck_clubs_fee_nonnegative"),
        CheckConstraint("member_count >= 0", name="ck_clubs_member_count_nonnegative"),
        CheckConstraint(
            "LENGTH(TRIM(club_name)) > 0",
            name="ck_clubs_name_nonempty",
        ),
        # Public listings always filter on status.
        Index("idx_clubs_status", "status"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    club_name: Mapped[str] = mapped_column(
        String(150),
        nullable=False,
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    category: Mapped[ClubCategory] = mapped_column(
        enum_column_type(ClubCategory, "club_category_enum"),
        nullable=False,
    )

    location: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    banner_image: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        default="",
        server_default="",
    )

    membership_fee: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0"),
        server_default="0",
    )

    status: Mapped[ClubStatus] = mapped_column(
        enum_column_type(ClubStatus, "club_status_enum"),
        nullable=False,
        default=ClubStatus.PENDING,
        server_default=ClubStatus.PENDING.value,
    )

    manager_email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    member_count: Mapped[int] = mapped_column(
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

    events: Mapped[list["Event"]] = relationship(  # noqa: F821
        "Event",
        back_populates="club",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Club id={self.id} name={self.club_name!r} status={self.status.value}>"
