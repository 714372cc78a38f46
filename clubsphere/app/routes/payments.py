"""
routes/payments.py — Payment route handlers.

The gateway comes from app.extensions via get_payment_gateway() and is
passed to the service like the session.

Endpoints (url_prefix=/api/payments):
  POST   /payments/create-membership-payment  → 201  {clientSecret, paymentId, paymentIntentId}
  POST   /payments/create-event-payment       → 201  {clientSecret, paymentId, paymentIntentId}
  POST   /payments/confirm-payment            → 200  payment with status succeeded
  GET    /payments/my-payments                → 200  caller's payments
  GET    /payments/admin/all                  → 200  every payment (admin)
"""

from __future__ import annotations

from flask import Blueprint, current_app, g, jsonify, request

from clubsphere.app.extensions import db, get_payment_gateway
from clubsphere.app.middleware.access_control import require_role
from clubsphere.app.middleware.auth_middleware import require_auth
from clubsphere.app.models.enums import Role
from clubsphere.app.schemas.payment_schema import (
    ConfirmPaymentSchema,
    EventPaymentSchema,
    MembershipPaymentSchema,
)
from clubsphere.app.services import payment_service

payments_bp = Blueprint("payments", __name__)


@payments_bp.route("/create-membership-payment", methods=["POST"])
@require_auth
def create_membership_payment():
    data = MembershipPaymentSchema().load(request.get_json(force=True) or {})
    result = payment_service.create_membership_intent(
        caller=g.identity,
        club_id=data["club_id"],
        gateway=get_payment_gateway(),
        currency=current_app.config["PAYMENT_CURRENCY"],
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 201


@payments_bp.route("/create-event-payment", methods=["POST"])
@require_auth
def create_event_payment():
    data = EventPaymentSchema().load(request.get_json(force=True) or {})
    result = payment_service.create_event_intent(
        caller=g.identity,
        event_id=data["event_id"],
        gateway=get_payment_gateway(),
        currency=current_app.config["PAYMENT_CURRENCY"],
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 201


@payments_bp.route("/confirm-payment", methods=["POST"])
@require_auth
def confirm_payment():
    """POST /payments/confirm-payment — Pull the processor status and record it."""
    data = ConfirmPaymentSchema().load(request.get_json(force=True) or {})
    result = payment_service.confirm_payment(
        caller=g.identity,
        intent_id=data["payment_intent_id"],
        gateway=get_payment_gateway(),
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 200


@payments_bp.route("/my-payments", methods=["GET"])
@require_auth
def my_payments():
    result = payment_service.list_my_payments(caller=g.identity, session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@payments_bp.route("/admin/all", methods=["GET"])
@require_auth
@require_role(Role.ADMIN)
def admin_all_payments():
    result = payment_service.list_all_payments(session=db.session)
    return jsonify({"data": result, "warnings": []}), 200
