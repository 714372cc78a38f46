"""
Unit tests for club_service branches that do not need a database.

These tests run DB-free with a mocked session and SimpleNamespace rows.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from clubsphere.app.errors import AppError, ErrorCode
from clubsphere.app.identity import Identity
from clubsphere.app.models.enums import ClubCategory, ClubStatus, Role
from clubsphere.app.services import club_service

MANAGER = Identity(user_id=2, email="manager@example.com", role=Role.CLUB_MANAGER)
ADMIN = Identity(user_id=1, email="admin@example.com", role=Role.ADMIN)


def _club(**overrides) -> SimpleNamespace:
    ts = datetime(2026, 1, 1, tzinfo=timezone.utc)
    values = dict(
        id=5,
        club_name="Photo Walkers",
        description="Weekly walks.",
        category=ClubCategory.PHOTOGRAPHY,
        location="New York, NY",
        banner_image="",
        membership_fee=Decimal("15"),
        status=ClubStatus.PENDING,
        manager_email="manager@example.com",
        member_count=0,
        created_at=ts,
        updated_at=ts,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def test_get_club_or_404_raises_when_missing():
    session = MagicMock()
    session.get.return_value = None

    with pytest.raises(AppError) as exc_info:
        club_service.get_club_or_404(club_id=404, session=session)

    assert exc_info.value.code == ErrorCode.CLUB_NOT_FOUND
    assert exc_info.value.http_status == 404


def test_build_club_dict_serializes_fee_as_string():
    result = club_service.build_club_dict(_club())

    assert result["membershipFee"] == "15.00"
    assert result["category"] == "Photography"
    assert result["status"] == "pending"
    assert result["createdAt"] == "2026-01-01T00:00:00+00:00"


def test_update_club_by_other_manager_is_forbidden():
    session = MagicMock()
    session.get.return_value = _club(manager_email="someone@example.com")

    with pytest.raises(AppError) as exc_info:
        club_service.update_club(MANAGER, 5, {"club_name": "Mine now"}, session)

    assert exc_info.value.code == ErrorCode.FORBIDDEN
    session.flush.assert_not_called()


def test_manager_email_match_is_exact():
    session = MagicMock()
    session.get.return_value = _club(manager_email="Manager@Example.com")

    with pytest.raises(AppError):
        club_service.update_club(MANAGER, 5, {}, session)


def test_update_club_applies_falsy_values_and_skips_absent_keys():
    session = MagicMock()
    club = _club()
    session.get.return_value = club

    result = club_service.update_club(
        MANAGER,
        5,
        {"membership_fee": Decimal("0"), "banner_image": ""},
        session,
    )

    assert club.membership_fee == Decimal("0")
    assert club.club_name == "Photo Walkers"
    assert result["membershipFee"] == "0.00"
    session.flush.assert_called_once()


def test_update_club_ignores_server_managed_fields():
    session = MagicMock()
    club = _club()
    session.get.return_value = club

    club_service.update_club(
        MANAGER,
        5,
        {"status": ClubStatus.APPROVED, "manager_email": "x@example.com", "member_count": 50},
        session,
    )

    assert club.status is ClubStatus.PENDING
    assert club.manager_email == "manager@example.com"
    assert club.member_count == 0


def test_set_status_pending_is_rejected_before_lookup():
    session = MagicMock()

    with pytest.raises(AppError) as exc_info:
        club_service.set_club_status(ADMIN, 5, ClubStatus.PENDING, session)

    assert exc_info.value.code == ErrorCode.INVALID_STATUS
    assert exc_info.value.field == "status"
    session.get.assert_not_called()


def test_set_status_approves():
    session = MagicMock()
    club = _club()
    session.get.return_value = club

    result = club_service.set_club_status(ADMIN, 5, ClubStatus.APPROVED, session)

    assert club.status is ClubStatus.APPROVED
    assert result["status"] == "approved"


def test_unknown_sort_key_is_invalid_field():
    with pytest.raises(AppError) as exc_info:
        club_service._order_by("password_hash", "asc")

    assert exc_info.value.code == ErrorCode.INVALID_FIELD
    assert exc_info.value.field == "sort"


def test_list_manager_clubs_serializes_rows():
    session = MagicMock()
    session.execute.return_value.scalars.return_value.all.return_value = [
        _club(id=1),
        _club(id=2, status=ClubStatus.APPROVED),
    ]

    result = club_service.list_manager_clubs(MANAGER, session)

    assert [c["id"] for c in result] == [1, 2]
    session.execute.assert_called_once()
