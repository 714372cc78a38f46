"""
Unit tests for request schemas: field rules, wire names, defaults and the
error codes carried in validation messages.

No database, no Flask: schemas inherit from marshmallow.Schema directly.
"""

from __future__ import annotations

from datetime import timezone
from decimal import Decimal

import pytest
from marshmallow import ValidationError

from clubsphere.app.errors import ErrorCode
from clubsphere.app.models.enums import ClubCategory, ClubStatus, Role
from clubsphere.app.schemas.auth_schema import LoginSchema, RegisterSchema
from clubsphere.app.schemas.club_schema import (
    AdminClubQuerySchema,
    ClubListQuerySchema,
    ClubStatusSchema,
    CreateClubSchema,
    UpdateClubSchema,
)
from clubsphere.app.schemas.event_schema import (
    CreateEventSchema,
    EventListQuerySchema,
    RegisterEventSchema,
    UpdateEventSchema,
)
from clubsphere.app.schemas.membership_schema import JoinClubSchema
from clubsphere.app.schemas.payment_schema import ConfirmPaymentSchema, MembershipPaymentSchema
from clubsphere.app.schemas.user_schema import UpdateRoleSchema


def _errors(schema, payload) -> dict:
    with pytest.raises(ValidationError) as exc_info:
        schema.load(payload)
    return exc_info.value.messages


def _club(**overrides) -> dict:
    payload = {
        "clubName": "Photo Walkers",
        "description": "Weekly walks.",
        "category": "Photography",
        "location": "New York, NY",
    }
    payload.update(overrides)
    return payload


def _event(**overrides) -> dict:
    payload = {
        "clubId": 1,
        "title": "Sunrise Shoot",
        "description": "Meet at the pier.",
        "eventDate": "2030-06-01T07:00:00Z",
        "location": "Pier 17",
    }
    payload.update(overrides)
    return payload


# ── RegisterSchema ─────────────────────────────────────────────────────────

class TestRegisterSchema:

    def test_valid_payload(self):
        data = RegisterSchema().load({
            "name": "Alice",
            "email": "alice@example.com",
            "password": "Password1",
            "photoUrl": "https://example.com/a.png",
        })
        assert data["photo_url"] == "https://example.com/a.png"

    def test_photo_url_defaults_to_empty(self):
        data = RegisterSchema().load({
            "name": "Alice",
            "email": "alice@example.com",
            "password": "Password1",
        })
        assert data["photo_url"] == ""

    def test_missing_name(self):
        errors = _errors(RegisterSchema(), {"email": "a@example.com", "password": "Password1"})
        assert errors["name"] == ["Missing data for required field."]

    def test_blank_name(self):
        errors = _errors(RegisterSchema(), {"name": "   ", "email": "a@example.com", "password": "Password1"})
        assert "name" in errors

    def test_invalid_email(self):
        errors = _errors(RegisterSchema(), {"name": "A", "email": "nope", "password": "Password1"})
        assert "email" in errors

    @pytest.mark.parametrize("password, message", [
        ("Pass1",     "Password must be at least 8 characters long."),
        ("12345678",  "Password must contain at least one letter."),
        ("Passwords", "Password must contain at least one digit."),
    ])
    def test_weak_passwords(self, password, message):
        errors = _errors(RegisterSchema(), {"name": "A", "email": "a@example.com", "password": password})
        assert errors["password"] == [message]

    def test_unknown_key_is_rejected(self):
        errors = _errors(RegisterSchema(), {
            "name": "A",
            "email": "a@example.com",
            "password": "Password1",
            "role": "admin",
        })
        assert "role" in errors


def test_login_requires_both_fields():
    errors = _errors(LoginSchema(), {"email": "a@example.com"})
    assert "password" in errors


# ── Club schemas ───────────────────────────────────────────────────────────

class TestCreateClubSchema:

    def test_defaults(self):
        data = CreateClubSchema().load(_club())
        assert data["category"] is ClubCategory.PHOTOGRAPHY
        assert data["membership_fee"] == Decimal("0")
        assert data["banner_image"] == ""

    def test_server_managed_keys_are_dropped(self):
        data = CreateClubSchema().load(_club(managerEmail="x@example.com", status="approved", memberCount=99))
        assert "managerEmail" not in data
        assert "status" not in data
        assert "member_count" not in data

    def test_unknown_category_is_invalid_category(self):
        errors = _errors(CreateClubSchema(), _club(category="Knitting"))
        assert errors["category"] == [ErrorCode.INVALID_CATEGORY]

    def test_negative_fee(self):
        errors = _errors(CreateClubSchema(), _club(membershipFee="-1"))
        assert errors["membershipFee"] == ["Fee cannot be negative."]

    def test_three_decimal_places(self):
        errors = _errors(CreateClubSchema(), _club(membershipFee="1.005"))
        assert errors["membershipFee"] == ["Fee must have at most 2 decimal places."]

    def test_name_too_long(self):
        errors = _errors(CreateClubSchema(), _club(clubName="x" * 151))
        assert "clubName" in errors


def test_update_club_keeps_only_present_keys():
    data = UpdateClubSchema().load({"membershipFee": "0", "description": ""})
    assert data == {"membership_fee": Decimal("0"), "description": ""}


def test_club_status_values():
    assert ClubStatusSchema().load({"status": "approved"})["status"] is ClubStatus.APPROVED
    # pending passes the schema; the service refuses it.
    assert ClubStatusSchema().load({"status": "pending"})["status"] is ClubStatus.PENDING
    errors = _errors(ClubStatusSchema(), {"status": "archived"})
    assert errors["status"] == [ErrorCode.INVALID_STATUS]


class TestClubListQuerySchema:

    def test_defaults(self):
        assert ClubListQuerySchema().load({}) == {
            "search": None,
            "category": None,
            "sort": "createdAt",
            "order": "desc",
            "page": 1,
            "limit": 12,
        }

    def test_query_strings_are_coerced(self):
        data = ClubListQuerySchema().load({"page": "3", "limit": "5", "category": "all"})
        assert data["page"] == 3
        assert data["limit"] == 5
        assert data["category"] == "all"

    def test_limit_above_100(self):
        assert "limit" in _errors(ClubListQuerySchema(), {"limit": "101"})

    def test_page_zero(self):
        assert "page" in _errors(ClubListQuerySchema(), {"page": "0"})

    def test_unknown_category(self):
        errors = _errors(ClubListQuerySchema(), {"category": "Knitting"})
        assert errors["category"] == [ErrorCode.INVALID_CATEGORY]

    def test_unknown_sort(self):
        assert "sort" in _errors(ClubListQuerySchema(), {"sort": "password"})


def test_admin_club_query_status_is_optional():
    assert AdminClubQuerySchema().load({}) == {"status": None}
    assert AdminClubQuerySchema().load({"status": "pending"})["status"] is ClubStatus.PENDING


# ── Event schemas ──────────────────────────────────────────────────────────

class TestCreateEventSchema:

    def test_defaults(self):
        data = CreateEventSchema().load(_event())
        assert data["is_paid"] is False
        assert data["event_fee"] == Decimal("0")
        assert data["max_attendees"] is None
        assert data["event_date"].tzinfo is not None
        assert data["event_date"].utcoffset() == timezone.utc.utcoffset(None)

    def test_club_id_must_be_integer(self):
        assert "clubId" in _errors(CreateEventSchema(), _event(clubId="1"))

    def test_max_attendees_at_least_one(self):
        errors = _errors(CreateEventSchema(), _event(maxAttendees=0))
        assert errors["maxAttendees"] == ["maxAttendees must be at least 1."]

    def test_bad_date(self):
        assert "eventDate" in _errors(CreateEventSchema(), _event(eventDate="next tuesday"))

    def test_missing_title(self):
        payload = _event()
        del payload["title"]
        assert _errors(CreateEventSchema(), payload)["title"] == ["Missing data for required field."]


def test_update_event_null_max_attendees_is_kept():
    data = UpdateEventSchema().load({"maxAttendees": None})
    assert data == {"max_attendees": None}


def test_update_event_empty_body():
    assert UpdateEventSchema().load({}) == {}


def test_event_list_query_defaults():
    data = EventListQuerySchema().load({})
    assert data["sort"] == "eventDate"
    assert data["order"] == "asc"


def test_register_event_body_is_optional():
    assert RegisterEventSchema().load({}) == {"payment_id": None}


# ── Membership, payment, user schemas ──────────────────────────────────────

def test_join_club_payment_id():
    assert JoinClubSchema().load({}) == {"payment_id": None}
    assert JoinClubSchema().load({"paymentId": "pay_1"}) == {"payment_id": "pay_1"}


def test_membership_payment_requires_club_id():
    errors = _errors(MembershipPaymentSchema(), {})
    assert errors["clubId"] == ["Missing data for required field."]


def test_confirm_payment_rejects_blank_intent():
    assert "paymentIntentId" in _errors(ConfirmPaymentSchema(), {"paymentIntentId": "  "})


def test_update_role():
    assert UpdateRoleSchema().load({"role": "clubManager"})["role"] is Role.CLUB_MANAGER
    errors = _errors(UpdateRoleSchema(), {"role": "superuser"})
    assert errors["role"] == [ErrorCode.INVALID_ROLE]
