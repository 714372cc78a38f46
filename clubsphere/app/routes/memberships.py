"""
routes/memberships.py — Club membership route handlers.

Endpoints (url_prefix=/api/memberships):
  POST   /memberships/join/:clubId        → 201  join an approved club
  GET    /memberships/my-memberships      → 200  caller's memberships
  GET    /memberships/club/:clubId        → 200  members (manager or admin)
"""

from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from clubsphere.app.extensions import db
from clubsphere.app.middleware.auth_middleware import require_auth
from clubsphere.app.schemas.membership_schema import JoinClubSchema
from clubsphere.app.services import membership_service

memberships_bp = Blueprint("memberships", __name__)


@memberships_bp.route("/join/<int:club_id>", methods=["POST"])
@require_auth
def join_club(club_id: int):
    """POST /memberships/join/:clubId — paymentId is required for paid clubs."""
    data = JoinClubSchema().load(request.get_json(silent=True) or {})
    result = membership_service.join_club(
        caller=g.identity,
        club_id=club_id,
        payment_id=data["payment_id"],
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 201


@memberships_bp.route("/my-memberships", methods=["GET"])
@require_auth
def my_memberships():
    result = membership_service.list_my_memberships(caller=g.identity, session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@memberships_bp.route("/club/<int:club_id>", methods=["GET"])
@require_auth
def club_members(club_id: int):
    result = membership_service.list_club_members(
        caller=g.identity,
        club_id=club_id,
        session=db.session,
    )
    return jsonify({"data": result, "warnings": []}), 200
