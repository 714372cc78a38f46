"""
services/payment_service.py — Payment intents and their reconciliation.

Flow (pull-based, no webhook):
  1. Client asks for an intent  → create_membership_intent / create_event_intent
     → processor intent + local Payment row in `pending`.
  2. Client completes the charge with the processor using clientSecret.
  3. Client calls confirm_payment(intentId) → we read the intent status from
     the processor and record it on the local row.
  4. Client calls join / register with the local payment id.

Step 4 is the client's job: a succeeded payment does NOT create a membership
or registration by itself.

Layer rules:
  - No Flask imports. The gateway is passed in like the session.
  - Commits are the route's responsibility, except in confirm_payment when
    a non-succeeded status has been recorded and an error is about to be
    raised.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from clubsphere.app.clock import isoformat
from clubsphere.app.errors import AppError, ErrorCode, forbidden, invalid_input, not_found
from clubsphere.app.identity import Identity
from clubsphere.app.models.club import Club
from clubsphere.app.models.enums import ClubStatus, PaymentStatus, PaymentType
from clubsphere.app.models.event import Event
from clubsphere.app.models.payment import Payment
from clubsphere.app.money import to_minor_units, to_money_str
from clubsphere.app.services.payment_gateway import PaymentGatewayError

logger = logging.getLogger(__name__)

# Processor intent status → local status, for the statuses we record.
# requires_payment_method is also the state of a fresh intent, so it only
# counts as failed when the processor reports a declined attempt.
_PROCESSOR_STATUS = {
    "succeeded": PaymentStatus.SUCCEEDED,
    "canceled":  PaymentStatus.CANCELLED,
}


# ── Private helpers ────────────────────────────────────────────────────────

def _local_status(intent) -> PaymentStatus | None:
    if intent.status == "requires_payment_method" and intent.failure_message:
        return PaymentStatus.FAILED
    return _PROCESSOR_STATUS.get(intent.status)


def _provider_error() -> AppError:
    return AppError(
        ErrorCode.PAYMENT_PROVIDER_ERROR,
        "The payment processor is unavailable. Please try again later.",
        502,
    )


def build_payment_dict(payment: Payment) -> dict:
    return {
        "id": payment.id,
        "userEmail": payment.user_email,
        "amount": to_money_str(payment.amount),
        "type": payment.type.value,
        "clubId": payment.club_id,
        "clubName": payment.club.club_name,
        "eventId": payment.event_id,
        "eventTitle": payment.event.title if payment.event is not None else None,
        "paymentIntentId": payment.provider_intent_id,
        "status": payment.status.value,
        "createdAt": isoformat(payment.created_at),
        "updatedAt": isoformat(payment.updated_at),
    }


def _start_payment(
        caller: Identity,
        payment_type: PaymentType,
        amount,
        club: Club,
        event: Event | None,
        gateway,
        currency: str,
        session: Session,
) -> dict:
    metadata = {
        "type": payment_type.value,
        "clubId": club.id,
        "userEmail": caller.email,
    }
    if event is not None:
        metadata["eventId"] = event.id

    try:
        intent = gateway.create_intent(to_minor_units(amount), currency, metadata)
    except PaymentGatewayError:
        raise _provider_error()

    payment = Payment(
        user_email=caller.email,
        amount=amount,
        type=payment_type,
        club_id=club.id,
        event_id=event.id if event is not None else None,
        provider_intent_id=intent.id,
        status=PaymentStatus.PENDING,
    )
    session.add(payment)
    session.flush()

    logger.info(
        "Payment %s (%s, intent %s) started by %s",
        payment.id,
        payment_type.value,
        intent.id,
        caller.email,
    )
    return {
        "clientSecret": intent.client_secret,
        "paymentId": payment.id,
        "paymentIntentId": intent.id,
    }


# ── Public service functions ───────────────────────────────────────────────

def create_membership_intent(
        caller: Identity,
        club_id: int,
        gateway,
        currency: str,
        session: Session,
) -> dict:
    """
    Raises:
      AppError(CLUB_NOT_FOUND, 404)        — missing or not approved
      AppError(FREE_TO_JOIN, 400)          — club has no fee
      AppError(PAYMENT_PROVIDER_ERROR, 502)
    """
    club = session.get(Club, club_id)
    if club is None or club.status != ClubStatus.APPROVED:
        raise not_found(ErrorCode.CLUB_NOT_FOUND, "Club not found or not approved.")

    if club.membership_fee <= 0:
        raise invalid_input(ErrorCode.FREE_TO_JOIN, "This club is free to join.")

    return _start_payment(
        caller,
        PaymentType.MEMBERSHIP,
        club.membership_fee,
        club,
        None,
        gateway,
        currency,
        session,
    )


def create_event_intent(
        caller: Identity,
        event_id: int,
        gateway,
        currency: str,
        session: Session,
) -> dict:
    """
    Raises:
      AppError(EVENT_NOT_FOUND, 404)       — missing, or its club not approved
      AppError(FREE_EVENT, 400)            — event is free
      AppError(PAYMENT_PROVIDER_ERROR, 502)
    """
    event = session.get(Event, event_id)
    if event is None or event.club.status != ClubStatus.APPROVED:
        raise not_found(ErrorCode.EVENT_NOT_FOUND, "Event not found or club not approved.")

    if not event.is_paid or event.event_fee <= 0:
        raise invalid_input(ErrorCode.FREE_EVENT, "This event is free.")

    return _start_payment(
        caller,
        PaymentType.EVENT,
        event.event_fee,
        event.club,
        event,
        gateway,
        currency,
        session,
    )


def confirm_payment(
        caller: Identity,
        intent_id: str,
        gateway,
        session: Session,
) -> dict:
    """
    Reads the intent status from the processor and records it locally.

    Idempotent: confirming an already-succeeded intent leaves it `succeeded`.
    A succeeded row is never moved to another status.
    A declined attempt is recorded as `failed`; the client may retry the
    same intent, and a later success still moves the row to `succeeded`.

    Raises:
      AppError(PAYMENT_NOT_FOUND, 404)     — no local row for this intent
      AppError(FORBIDDEN, 403)             — row belongs to another user
      AppError(PAYMENT_NOT_SUCCEEDED, 400) — processor status is not succeeded
      AppError(PAYMENT_PROVIDER_ERROR, 502)
    """
    payment = session.execute(
        select(Payment).where(Payment.provider_intent_id == intent_id)
    ).scalar_one_or_none()
    if payment is None:
        raise not_found(ErrorCode.PAYMENT_NOT_FOUND, f"No payment for intent '{intent_id}'.")

    if payment.user_email != caller.email and not caller.is_admin:
        raise forbidden("You can only confirm your own payments.")

    try:
        intent = gateway.retrieve_intent(intent_id)
    except PaymentGatewayError:
        raise _provider_error()

    new_status = _local_status(intent)
    if new_status is not None and payment.status != PaymentStatus.SUCCEEDED:
        payment.status = new_status
        session.flush()
        logger.info("Payment %s marked %s", payment.id, new_status.value)

    if intent.status != "succeeded":
        # The route never reaches its commit on this path; keep the recorded
        # cancellation.
        session.commit()
        raise invalid_input(
            ErrorCode.PAYMENT_NOT_SUCCEEDED,
            f"Payment not successful (processor status: {intent.status}).",
        )

    return build_payment_dict(payment)


def list_my_payments(caller: Identity, session: Session) -> list[dict]:
    payments = session.execute(
        select(Payment)
        .where(Payment.user_email == caller.email)
        .order_by(Payment.created_at.desc(), Payment.id.desc())
    ).scalars().all()
    return [build_payment_dict(p) for p in payments]


def list_all_payments(session: Session) -> list[dict]:
    payments = session.execute(
        select(Payment).order_by(Payment.created_at.desc(), Payment.id.desc())
    ).scalars().all()
    return [build_payment_dict(p) for p in payments]
