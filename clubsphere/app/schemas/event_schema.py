"""
schemas/event_schema.py — Marshmallow schemas for event endpoints.

Validation responsibility:
  - This file: field types, lengths, fee precision, capacity bounds,
    list query parameters.
  - services/event_service.py:
      - ownership of the club (FORBIDDEN)
      - event_fee forced to 0 when the event is not paid
      - EVENT_IN_PAST / EVENT_FULL / ALREADY_REGISTERED at registration

Event dates may be sent with or without an offset; naive values are
taken as UTC by the service.

IMPORTANT: Inherits from marshmallow.Schema directly — never ma.Schema.
"""

from __future__ import annotations

from decimal import Decimal

from marshmallow import EXCLUDE, Schema, fields, validate

from clubsphere.app.schemas.common import validate_fee, validate_non_empty_after_trim

EVENT_SORT_KEYS = ("eventDate", "title", "createdAt", "eventFee")


def _text(max_length: int | None = None, **kwargs) -> fields.Str:
    length = validate.Length(min=1, max=max_length)
    return fields.Str(validate=[length, validate_non_empty_after_trim], **kwargs)


class CreateEventSchema(Schema):
    """POST /events"""

    class Meta:
        unknown = EXCLUDE

    club_id = fields.Int(
        data_key="clubId",
        required=True,
        strict=True,
        validate=validate.Range(min=1, error="clubId must be a positive integer."),
    )
    title = _text(200, required=True)
    description = _text(required=True)
    event_date = fields.DateTime(data_key="eventDate", required=True)
    location = _text(200, required=True)
    is_paid = fields.Bool(data_key="isPaid", load_default=False)
    event_fee = fields.Decimal(
        data_key="eventFee",
        load_default=Decimal("0"),
        validate=validate_fee,
    )
    # None or absent means unlimited.
    max_attendees = fields.Int(
        data_key="maxAttendees",
        load_default=None,
        allow_none=True,
        strict=True,
        validate=validate.Range(min=1, error="maxAttendees must be at least 1."),
    )


class UpdateEventSchema(Schema):
    """
    PUT /events/:id

    Partial: absent keys stay absent. `maxAttendees: null` is kept in the
    loaded dict and clears the cap.
    """

    class Meta:
        unknown = EXCLUDE

    title = _text(200)
    description = fields.Str()
    event_date = fields.DateTime(data_key="eventDate")
    location = _text(200)
    is_paid = fields.Bool(data_key="isPaid")
    event_fee = fields.Decimal(data_key="eventFee", validate=validate_fee)
    max_attendees = fields.Int(
        data_key="maxAttendees",
        allow_none=True,
        strict=True,
        validate=validate.Range(min=1, error="maxAttendees must be at least 1."),
    )


class EventListQuerySchema(Schema):
    """GET /events query string."""

    class Meta:
        unknown = EXCLUDE

    search = fields.Str(load_default=None)
    sort = fields.Str(load_default="eventDate", validate=validate.OneOf(EVENT_SORT_KEYS))
    order = fields.Str(load_default="asc", validate=validate.OneOf(("asc", "desc")))
    page = fields.Int(load_default=1, validate=validate.Range(min=1))
    limit = fields.Int(load_default=12, validate=validate.Range(min=1, max=100))


class RegisterEventSchema(Schema):
    """POST /events/:id/register — the body is optional."""

    class Meta:
        unknown = EXCLUDE

    payment_id = fields.Str(data_key="paymentId", load_default=None, allow_none=True)
