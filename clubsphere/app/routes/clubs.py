"""
routes/clubs.py — Club route handlers.

Layer rules:
  - Parse, validate, call ONE service, commit, return envelope.
  - No business logic. No DB queries. No bare SQL.

Endpoints (url_prefix=/api/clubs):
  GET    /clubs                     → 200  paginated approved clubs (public)
  GET    /clubs/featured            → 200  top approved clubs (public)
  GET    /clubs/:id                 → 200  one club, any status (public)
  POST   /clubs                     → 201  create (clubManager)
  PUT    /clubs/:id                 → 200  update own club (clubManager)
  GET    /clubs/manager/my-clubs    → 200  caller's clubs (clubManager)
  GET    /clubs/admin/all           → 200  all clubs, ?status= filter (admin)
  PATCH  /clubs/:id/status          → 200  approve / reject (admin)
"""

from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from clubsphere.app.extensions import db
from clubsphere.app.middleware.access_control import require_role
from clubsphere.app.middleware.auth_middleware import require_auth
from clubsphere.app.models.enums import Role
from clubsphere.app.schemas.club_schema import (
    AdminClubQuerySchema,
    ClubListQuerySchema,
    ClubStatusSchema,
    CreateClubSchema,
    UpdateClubSchema,
)
from clubsphere.app.services import club_service

clubs_bp = Blueprint("clubs", __name__)


@clubs_bp.route("/", methods=["GET"])
def list_clubs():
    """GET /clubs — search, category filter, sort and pagination via query string."""
    query = ClubListQuerySchema().load(request.args.to_dict())
    result = club_service.list_approved_clubs(
        search=query["search"],
        category=query["category"],
        sort=query["sort"],
        order=query["order"],
        page=query["page"],
        limit=query["limit"],
        session=db.session,
    )
    return jsonify({"data": result, "warnings": []}), 200


@clubs_bp.route("/featured", methods=["GET"])
def featured_clubs():
    result = club_service.get_featured_clubs(session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@clubs_bp.route("/<int:club_id>", methods=["GET"])
def get_club(club_id: int):
    result = club_service.get_club(club_id=club_id, session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@clubs_bp.route("/", methods=["POST"])
@require_auth
@require_role(Role.CLUB_MANAGER)
def create_club():
    """POST /clubs — New clubs start pending; the caller becomes manager."""
    data = CreateClubSchema().load(request.get_json(force=True) or {})
    result = club_service.create_club(
        caller=g.identity,
        data=data,
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 201


@clubs_bp.route("/<int:club_id>", methods=["PUT"])
@require_auth
@require_role(Role.CLUB_MANAGER)
def update_club(club_id: int):
    data = UpdateClubSchema().load(request.get_json(force=True) or {})
    result = club_service.update_club(
        caller=g.identity,
        club_id=club_id,
        data=data,
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 200


@clubs_bp.route("/manager/my-clubs", methods=["GET"])
@require_auth
@require_role(Role.CLUB_MANAGER)
def my_clubs():
    result = club_service.list_manager_clubs(caller=g.identity, session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@clubs_bp.route("/admin/all", methods=["GET"])
@require_auth
@require_role(Role.ADMIN)
def admin_list_clubs():
    query = AdminClubQuerySchema().load(request.args.to_dict())
    result = club_service.admin_list_clubs(status=query["status"], session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@clubs_bp.route("/<int:club_id>/status", methods=["PATCH"])
@require_auth
@require_role(Role.ADMIN)
def set_club_status(club_id: int):
    data = ClubStatusSchema().load(request.get_json(force=True) or {})
    result = club_service.set_club_status(
        caller=g.identity,
        club_id=club_id,
        status=data["status"],
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 200
