"""
Unit tests for payment_service, DB-free, with a mocked gateway.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from clubsphere.app.errors import AppError, ErrorCode
from clubsphere.app.identity import Identity
from clubsphere.app.models.enums import ClubStatus, PaymentStatus, PaymentType, Role
from clubsphere.app.services import payment_service
from clubsphere.app.services.payment_gateway import PaymentGatewayError, PaymentIntent

MEMBER = Identity(user_id=3, email="member@example.com", role=Role.MEMBER)
OTHER = Identity(user_id=4, email="other@example.com", role=Role.MEMBER)
ADMIN = Identity(user_id=1, email="admin@example.com", role=Role.ADMIN)


def _payment(**overrides) -> SimpleNamespace:
    ts = datetime(2026, 1, 1, tzinfo=timezone.utc)
    values = dict(
        id=11,
        user_email="member@example.com",
        amount=Decimal("15"),
        type=PaymentType.MEMBERSHIP,
        club_id=5,
        club=SimpleNamespace(club_name="Photo Walkers"),
        event_id=None,
        event=None,
        provider_intent_id="pi_1",
        status=PaymentStatus.PENDING,
        created_at=ts,
        updated_at=ts,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def _session_with(payment) -> MagicMock:
    session = MagicMock()
    session.execute.return_value.scalar_one_or_none.return_value = payment
    return session


def _gateway(status: str = "succeeded") -> MagicMock:
    gateway = MagicMock()
    gateway.retrieve_intent.return_value = PaymentIntent(id="pi_1", client_secret=None, status=status)
    return gateway


# ── create intents ─────────────────────────────────────────────────────────

def test_free_club_is_free_to_join():
    session = MagicMock()
    session.get.return_value = SimpleNamespace(id=5, status=ClubStatus.APPROVED, membership_fee=Decimal("0"))
    gateway = MagicMock()

    with pytest.raises(AppError) as exc_info:
        payment_service.create_membership_intent(MEMBER, 5, gateway, "usd", session)

    assert exc_info.value.code == ErrorCode.FREE_TO_JOIN
    gateway.create_intent.assert_not_called()


def test_unpaid_event_is_free_event():
    session = MagicMock()
    session.get.return_value = SimpleNamespace(
        id=9,
        is_paid=False,
        event_fee=Decimal("0"),
        club=SimpleNamespace(status=ClubStatus.APPROVED),
    )

    with pytest.raises(AppError) as exc_info:
        payment_service.create_event_intent(MEMBER, 9, MagicMock(), "usd", session)

    assert exc_info.value.code == ErrorCode.FREE_EVENT


def test_event_of_unapproved_club_is_not_found():
    session = MagicMock()
    session.get.return_value = SimpleNamespace(
        id=9,
        is_paid=True,
        event_fee=Decimal("5"),
        club=SimpleNamespace(status=ClubStatus.PENDING),
    )

    with pytest.raises(AppError) as exc_info:
        payment_service.create_event_intent(MEMBER, 9, MagicMock(), "usd", session)

    assert exc_info.value.code == ErrorCode.EVENT_NOT_FOUND


def test_gateway_failure_writes_no_row():
    session = MagicMock()
    session.get.return_value = SimpleNamespace(id=5, status=ClubStatus.APPROVED, membership_fee=Decimal("15"))
    gateway = MagicMock()
    gateway.create_intent.side_effect = PaymentGatewayError("down")

    with pytest.raises(AppError) as exc_info:
        payment_service.create_membership_intent(MEMBER, 5, gateway, "usd", session)

    assert exc_info.value.code == ErrorCode.PAYMENT_PROVIDER_ERROR
    assert exc_info.value.http_status == 502
    session.add.assert_not_called()


def test_membership_intent_amount_in_minor_units():
    session = MagicMock()
    session.get.return_value = SimpleNamespace(id=5, status=ClubStatus.APPROVED, membership_fee=Decimal("15.50"))
    gateway = MagicMock()
    gateway.create_intent.return_value = PaymentIntent(id="pi_9", client_secret="secret", status="requires_payment_method")

    result = payment_service.create_membership_intent(MEMBER, 5, gateway, "usd", session)

    gateway.create_intent.assert_called_once_with(
        1550,
        "usd",
        {"type": "membership", "clubId": 5, "userEmail": "member@example.com"},
    )
    assert result["clientSecret"] == "secret"
    assert result["paymentIntentId"] == "pi_9"
    added = session.add.call_args.args[0]
    assert added.status is PaymentStatus.PENDING
    assert added.provider_intent_id == "pi_9"


# ── confirm ────────────────────────────────────────────────────────────────

def test_confirm_unknown_intent():
    with pytest.raises(AppError) as exc_info:
        payment_service.confirm_payment(MEMBER, "pi_x", _gateway(), _session_with(None))

    assert exc_info.value.code == ErrorCode.PAYMENT_NOT_FOUND


def test_confirm_someone_elses_payment():
    gateway = _gateway()

    with pytest.raises(AppError) as exc_info:
        payment_service.confirm_payment(OTHER, "pi_1", gateway, _session_with(_payment()))

    assert exc_info.value.code == ErrorCode.FORBIDDEN
    gateway.retrieve_intent.assert_not_called()


def test_admin_may_confirm_any_payment():
    payment = _payment()
    result = payment_service.confirm_payment(ADMIN, "pi_1", _gateway(), _session_with(payment))

    assert result["status"] == "succeeded"


def test_confirm_succeeded():
    payment = _payment()
    session = _session_with(payment)

    result = payment_service.confirm_payment(MEMBER, "pi_1", _gateway("succeeded"), session)

    assert payment.status is PaymentStatus.SUCCEEDED
    assert result["amount"] == "15.00"
    assert result["eventTitle"] is None
    session.commit.assert_not_called()


def test_confirm_canceled_records_and_raises():
    payment = _payment()
    session = _session_with(payment)

    with pytest.raises(AppError) as exc_info:
        payment_service.confirm_payment(MEMBER, "pi_1", _gateway("canceled"), session)

    assert exc_info.value.code == ErrorCode.PAYMENT_NOT_SUCCEEDED
    assert payment.status is PaymentStatus.CANCELLED
    session.commit.assert_called_once()


def test_confirm_processing_leaves_status():
    payment = _payment()

    with pytest.raises(AppError):
        payment_service.confirm_payment(MEMBER, "pi_1", _gateway("processing"), _session_with(payment))

    assert payment.status is PaymentStatus.PENDING


def test_succeeded_is_never_downgraded():
    payment = _payment(status=PaymentStatus.SUCCEEDED)

    with pytest.raises(AppError):
        payment_service.confirm_payment(MEMBER, "pi_1", _gateway("canceled"), _session_with(payment))

    assert payment.status is PaymentStatus.SUCCEEDED


def test_confirm_gateway_failure():
    gateway = MagicMock()
    gateway.retrieve_intent.side_effect = PaymentGatewayError("timeout")

    with pytest.raises(AppError) as exc_info:
        payment_service.confirm_payment(MEMBER, "pi_1", gateway, _session_with(_payment()))

    assert exc_info.value.code == ErrorCode.PAYMENT_PROVIDER_ERROR


def test_confirm_declined_attempt_records_failed():
    payment = _payment()
    session = _session_with(payment)
    gateway = MagicMock()
    gateway.retrieve_intent.return_value = PaymentIntent(
        id="pi_1",
        client_secret=None,
        status="requires_payment_method",
        failure_message="Your card was declined.",
    )

    with pytest.raises(AppError) as exc_info:
        payment_service.confirm_payment(MEMBER, "pi_1", gateway, session)

    assert exc_info.value.code == ErrorCode.PAYMENT_NOT_SUCCEEDED
    assert payment.status is PaymentStatus.FAILED
    session.commit.assert_called_once()


def test_confirm_fresh_intent_stays_pending():
    payment = _payment()

    with pytest.raises(AppError):
        payment_service.confirm_payment(
            MEMBER, "pi_1", _gateway("requires_payment_method"), _session_with(payment),
        )

    assert payment.status is PaymentStatus.PENDING
