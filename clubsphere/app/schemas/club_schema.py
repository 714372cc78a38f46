"""
schemas/club_schema.py — Marshmallow schemas for club endpoints.

Validation responsibility:
  - This file: field types, lengths, category and status values, fee
    precision, list query parameters.
  - services/club_service.py:
      - CLUB_NOT_FOUND (requires DB lookup)
      - ownership (FORBIDDEN) — manager_email vs. caller
      - INVALID_STATUS for values outside approved/rejected

Wire names are camelCase (data_key); loaded dicts use snake_case keys.
Unknown keys in club bodies (managerEmail, status, memberCount, ...) are
dropped: those columns are never taken from the request.

IMPORTANT: Inherits from marshmallow.Schema directly — never ma.Schema.
"""

from __future__ import annotations

from decimal import Decimal

from marshmallow import EXCLUDE, Schema, fields, validate

from clubsphere.app.errors import ErrorCode
from clubsphere.app.models.enums import ClubCategory, ClubStatus
from clubsphere.app.schemas.common import validate_fee, validate_non_empty_after_trim

CLUB_SORT_KEYS = ("createdAt", "clubName", "memberCount", "membershipFee")
CATEGORY_FILTERS = tuple(c.value for c in ClubCategory) + ("all",)


def _category_field(**kwargs) -> fields.Enum:
    return fields.Enum(
        ClubCategory,
        by_value=True,
        error_messages={"unknown": ErrorCode.INVALID_CATEGORY},
        **kwargs,
    )


class CreateClubSchema(Schema):
    """POST /clubs"""

    class Meta:
        unknown = EXCLUDE

    club_name = fields.Str(
        data_key="clubName",
        required=True,
        validate=[
            validate.Length(
                min=1,
                max=150,
                error="Club name must be between 1 and 150 characters.",
            ),
            validate_non_empty_after_trim,
        ],
    )

    description = fields.Str(
        required=True,
        validate=[validate.Length(min=1), validate_non_empty_after_trim],
    )

    category = _category_field(required=True)

    location = fields.Str(
        required=True,
        validate=[validate.Length(min=1, max=200), validate_non_empty_after_trim],
    )

    banner_image = fields.Str(
        data_key="bannerImage",
        load_default="",
        validate=validate.Length(max=500),
    )

    membership_fee = fields.Decimal(
        data_key="membershipFee",
        load_default=Decimal("0"),
        validate=validate_fee,
    )


class UpdateClubSchema(Schema):
    """
    PUT /clubs/:id

    Nothing is required and nothing has a default: a key absent from the
    body stays absent from the loaded dict, so the service leaves that
    column unchanged. An empty description is accepted.
    """

    class Meta:
        unknown = EXCLUDE

    club_name = fields.Str(
        data_key="clubName",
        validate=[
            validate.Length(
                min=1,
                max=150,
                error="Club name must be between 1 and 150 characters.",
            ),
            validate_non_empty_after_trim,
        ],
    )
    description = fields.Str()
    category = _category_field()
    location = fields.Str(
        validate=[validate.Length(min=1, max=200), validate_non_empty_after_trim],
    )
    banner_image = fields.Str(data_key="bannerImage", validate=validate.Length(max=500))
    membership_fee = fields.Decimal(data_key="membershipFee", validate=validate_fee)


class ClubStatusSchema(Schema):
    """
    PATCH /clubs/:id/status

    Values outside the ClubStatus enum fail here; `pending` passes the
    schema and is rejected by the service.
    """

    status = fields.Enum(
        ClubStatus,
        required=True,
        by_value=True,
        error_messages={"unknown": ErrorCode.INVALID_STATUS},
    )


class ClubListQuerySchema(Schema):
    """GET /clubs query string."""

    class Meta:
        unknown = EXCLUDE

    search = fields.Str(load_default=None)
    category = fields.Str(
        load_default=None,
        validate=validate.OneOf(CATEGORY_FILTERS, error=ErrorCode.INVALID_CATEGORY),
    )
    sort = fields.Str(load_default="createdAt", validate=validate.OneOf(CLUB_SORT_KEYS))
    order = fields.Str(load_default="desc", validate=validate.OneOf(("asc", "desc")))
    page = fields.Int(load_default=1, validate=validate.Range(min=1))
    limit = fields.Int(load_default=12, validate=validate.Range(min=1, max=100))


class AdminClubQuerySchema(Schema):
    """GET /clubs/admin/all query string. No status means every club."""

    class Meta:
        unknown = EXCLUDE

    status = fields.Enum(
        ClubStatus,
        load_default=None,
        by_value=True,
        error_messages={"unknown": ErrorCode.INVALID_STATUS},
    )
