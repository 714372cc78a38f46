"""Initial schema — all tables, constraints, and indexes.

Revision: 001_initial_schema
Created:  2026-10-19

Append-only:
  This file must NEVER be edited after it has been applied to any database.
  If a schema change is required, create a NEW migration file.

Enumerations are VARCHAR columns with a CHECK constraint (no native
PostgreSQL enum types), matching enum_column_type() in models/enums.py.

Creation order (FK dependencies):
  users → clubs → events → event_registrations, memberships, payments

ON DELETE policies:
  events.club_id               → RESTRICT  (clubs are not deleted while they own events)
  event_registrations.event_id → CASCADE   (registrations do not outlive their event)
  memberships.club_id          → RESTRICT
  payments.club_id             → RESTRICT
  payments.event_id            → SET NULL  (the payment record survives its event)

Users are referenced by email, never by foreign key.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# ── Alembic revision identifiers ──────────────────────────────────────────
revision: str = "001_initial_schema"
down_revision: str | None = None      # first migration
branch_labels: tuple | None = None
depends_on: tuple | None = None


def _enum(name: str, *values: str) -> sa.Enum:
    return sa.Enum(
        *values,
        name=name,
        native_enum=False,
        create_constraint=True,
        length=32,
    )


ROLE = ("admin", "clubManager", "member")
CLUB_STATUS = ("pending", "approved", "rejected")
CLUB_CATEGORY = (
    "Photography", "Sports", "Tech", "Arts", "Music",
    "Books", "Travel", "Food", "Fitness", "Other",
)
MEMBERSHIP_STATUS = ("active", "expired", "pendingPayment")
REGISTRATION_STATUS = ("registered", "cancelled")
PAYMENT_TYPE = ("membership", "event")
PAYMENT_STATUS = ("pending", "succeeded", "failed", "cancelled")


def _timestamps(with_updated: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]
    if with_updated:
        columns.append(sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True))
    return columns


def upgrade() -> None:

    # ── users ──────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("photo_url", sa.String(500), nullable=False, server_default=""),
        sa.Column(
            "role",
            _enum("role_enum", *ROLE),
            nullable=False,
            server_default="member",
        ),
        *_timestamps(with_updated=False),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.CheckConstraint("LENGTH(TRIM(name)) > 0", name="ck_users_name_nonempty"),
        sa.CheckConstraint("email LIKE '%@%'", name="ck_users_email_format"),
    )

    # ── clubs ──────────────────────────────────────────────────────────────
    op.create_table(
        "clubs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("club_name", sa.String(150), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", _enum("club_category_enum", *CLUB_CATEGORY), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("banner_image", sa.String(500), nullable=False, server_default=""),
        sa.Column("membership_fee", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column(
            "status",
            _enum("club_status_enum", *CLUB_STATUS),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("manager_email", sa.String(255), nullable=False),
        sa.Column("member_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.CheckConstraint("membership_fee >= 0", name="ck_clubs_fee_nonnegative"),
        sa.CheckConstraint("member_count >= 0", name="ck_clubs_member_count_nonnegative"),
        sa.CheckConstraint("LENGTH(TRIM(club_name)) > 0", name="ck_clubs_name_nonempty"),
    )
    op.create_index("idx_clubs_status", "clubs", ["status"])
    op.create_index("ix_clubs_manager_email", "clubs", ["manager_email"])

    # ── events ─────────────────────────────────────────────────────────────
    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "club_id",
            sa.Integer(),
            sa.ForeignKey("clubs.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("event_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("is_paid", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("event_fee", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("max_attendees", sa.Integer(), nullable=True),
        sa.Column("current_attendees", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.CheckConstraint("event_fee >= 0", name="ck_events_fee_nonnegative"),
        sa.CheckConstraint("is_paid OR event_fee = 0", name="ck_events_free_has_no_fee"),
        sa.CheckConstraint(
            "max_attendees IS NULL OR max_attendees > 0",
            name="ck_events_max_attendees_positive",
        ),
        sa.CheckConstraint(
            "current_attendees >= 0",
            name="ck_events_current_attendees_nonnegative",
        ),
    )
    op.create_index("ix_events_club_id", "events", ["club_id"])
    op.create_index("ix_events_event_date", "events", ["event_date"])

    # ── event_registrations ────────────────────────────────────────────────
    op.create_table(
        "event_registrations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "event_id",
            sa.Integer(),
            sa.ForeignKey("events.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_email", sa.String(255), nullable=False),
        sa.Column(
            "club_id",
            sa.Integer(),
            sa.ForeignKey("clubs.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "status",
            _enum("registration_status_enum", *REGISTRATION_STATUS),
            nullable=False,
            server_default="registered",
        ),
        sa.Column("payment_id", sa.String(255), nullable=True),
        *_timestamps(with_updated=False),
        sa.UniqueConstraint(
            "event_id",
            "user_email",
            name="uq_event_registrations_event_user",
        ),
    )
    op.create_index(
        "idx_event_registrations_event_status",
        "event_registrations",
        ["event_id", "status"],
    )
    op.create_index(
        "ix_event_registrations_user_email",
        "event_registrations",
        ["user_email"],
    )

    # ── memberships ────────────────────────────────────────────────────────
    op.create_table(
        "memberships",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_email", sa.String(255), nullable=False),
        sa.Column(
            "club_id",
            sa.Integer(),
            sa.ForeignKey("clubs.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "status",
            _enum("membership_status_enum", *MEMBERSHIP_STATUS),
            nullable=False,
            server_default="active",
        ),
        sa.Column("payment_id", sa.String(255), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(with_updated=False),
        sa.UniqueConstraint("user_email", "club_id", name="uq_memberships_user_club"),
    )
    op.create_index("ix_memberships_user_email", "memberships", ["user_email"])
    op.create_index("ix_memberships_club_id", "memberships", ["club_id"])

    # ── payments ───────────────────────────────────────────────────────────
    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_email", sa.String(255), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("type", _enum("payment_type_enum", *PAYMENT_TYPE), nullable=False),
        sa.Column(
            "club_id",
            sa.Integer(),
            sa.ForeignKey("clubs.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "event_id",
            sa.Integer(),
            sa.ForeignKey("events.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("provider_intent_id", sa.String(255), nullable=False),
        sa.Column(
            "status",
            _enum("payment_status_enum", *PAYMENT_STATUS),
            nullable=False,
            server_default="pending",
        ),
        *_timestamps(),
        sa.UniqueConstraint("provider_intent_id", name="uq_payments_provider_intent_id"),
        sa.CheckConstraint("amount >= 0", name="ck_payments_amount_nonnegative"),
    )
    op.create_index("ix_payments_user_email", "payments", ["user_email"])


def downgrade() -> None:
    """Drops everything in reverse FK order."""
    op.drop_table("payments")
    op.drop_table("memberships")
    op.drop_table("event_registrations")
    op.drop_table("events")
    op.drop_table("clubs")
    op.drop_table("users")
