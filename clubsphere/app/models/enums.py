"""
models/enums.py — Closed value sets shared by models, schemas and services.

Defined once here so they can be imported by schemas and services without
pulling in the full models. Do not duplicate these as plain string constants
anywhere else in the codebase. Values are the strings sent over the wire.
"""

from __future__ import annotations

import enum

from sqlalchemy import Enum


class Role(str, enum.Enum):
    ADMIN        = "admin"
    CLUB_MANAGER = "clubManager"
    MEMBER       = "member"


class ClubStatus(str, enum.Enum):
    PENDING  = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ClubCategory(str, enum.Enum):
    PHOTOGRAPHY = "Photography"
    SPORTS      = "Sports"
    TECH        = "Tech"
    ARTS        = "Arts"
    MUSIC       = "Music"
    BOOKS       = "Books"
    TRAVEL      = "Travel"
    FOOD        = "Food"
    FITNESS     = "Fitness"
    OTHER       = "Other"


class MembershipStatus(str, enum.Enum):
    ACTIVE          = "active"
    EXPIRED         = "expired"
    PENDING_PAYMENT = "pendingPayment"


class RegistrationStatus(str, enum.Enum):
    REGISTERED = "registered"
    CANCELLED  = "cancelled"


class PaymentType(str, enum.Enum):
    MEMBERSHIP = "membership"
    EVENT      = "event"


class PaymentStatus(str, enum.Enum):
    PENDING   = "pending"
    SUCCEEDED = "succeeded"
    FAILED    = "failed"
    CANCELLED = "cancelled"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Ensure SQLAlchemy stores enum values (e.g., 'clubManager'), not names ('CLUB_MANAGER')."""
    return [member.value for member in enum_cls]


def enum_column_type(enum_cls: type[enum.Enum], name: str) -> Enum:
    """
    Portable enum column: VARCHAR plus a CHECK constraint rather than a
    PostgreSQL native type, so the same models run on SQLite in tests.
    """
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        create_constraint=True,
        validate_strings=True,
        values_callable=_enum_values,
        length=32,
    )
