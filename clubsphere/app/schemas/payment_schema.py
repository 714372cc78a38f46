"""
schemas/payment_schema.py — Payment intent and confirmation payloads.

IMPORTANT: Inherits from marshmallow.Schema directly — never ma.Schema.
"""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from clubsphere.app.schemas.common import validate_non_empty_after_trim


class MembershipPaymentSchema(Schema):
    """POST /payments/create-membership-payment"""

    club_id = fields.Int(
        data_key="clubId",
        required=True,
        strict=True,
        validate=validate.Range(min=1, error="clubId must be a positive integer."),
    )


class EventPaymentSchema(Schema):
    """POST /payments/create-event-payment"""

    event_id = fields.Int(
        data_key="eventId",
        required=True,
        strict=True,
        validate=validate.Range(min=1, error="eventId must be a positive integer."),
    )


class ConfirmPaymentSchema(Schema):
    """POST /payments/confirm-payment"""

    payment_intent_id = fields.Str(
        data_key="paymentIntentId",
        required=True,
        validate=[validate.Length(min=1, max=255), validate_non_empty_after_trim],
    )
