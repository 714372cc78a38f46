"""
schemas/membership_schema.py — Join-club payload.

Whether a paymentId is required depends on the club's fee, which needs a
DB lookup, so PAYMENT_REQUIRED is raised by membership_service.py.
"""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields


class JoinClubSchema(Schema):
    """POST /memberships/join/:clubId — the body is optional for free clubs."""

    class Meta:
        unknown = EXCLUDE

    payment_id = fields.Str(data_key="paymentId", load_default=None, allow_none=True)
