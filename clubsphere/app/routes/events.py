"""
routes/events.py — Event and registration route handlers.

Endpoints (url_prefix=/api/events):
  GET    /events                            → 200  paginated events of approved clubs
  GET    /events/upcoming                   → 200  next events (public)
  GET    /events/:id                        → 200  one event with club summary
  POST   /events                            → 201  create (clubManager, own club)
  PUT    /events/:id                        → 200  update (clubManager, own club)
  DELETE /events/:id                        → 200  delete + registrations
  GET    /events/manager/my-events          → 200  events of caller's clubs
  POST   /events/:id/register               → 201  register caller (member)
  DELETE /events/:id/register               → 200  unregister caller (member)
  GET    /events/:id/registration-status    → 200  caller's registration or null
"""

from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from clubsphere.app.extensions import db
from clubsphere.app.middleware.access_control import require_role
from clubsphere.app.middleware.auth_middleware import require_auth
from clubsphere.app.models.enums import Role
from clubsphere.app.schemas.event_schema import (
    CreateEventSchema,
    EventListQuerySchema,
    RegisterEventSchema,
    UpdateEventSchema,
)
from clubsphere.app.services import event_service

events_bp = Blueprint("events", __name__)


@events_bp.route("/", methods=["GET"])
def list_events():
    query = EventListQuerySchema().load(request.args.to_dict())
    result = event_service.list_events(
        search=query["search"],
        sort=query["sort"],
        order=query["order"],
        page=query["page"],
        limit=query["limit"],
        session=db.session,
    )
    return jsonify({"data": result, "warnings": []}), 200


@events_bp.route("/upcoming", methods=["GET"])
def upcoming_events():
    result = event_service.get_upcoming_events(session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@events_bp.route("/<int:event_id>", methods=["GET"])
def get_event(event_id: int):
    result = event_service.get_event(event_id=event_id, session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@events_bp.route("/", methods=["POST"])
@require_auth
@require_role(Role.CLUB_MANAGER)
def create_event():
    data = CreateEventSchema().load(request.get_json(force=True) or {})
    result = event_service.create_event(
        caller=g.identity,
        data=data,
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 201


@events_bp.route("/<int:event_id>", methods=["PUT"])
@require_auth
@require_role(Role.CLUB_MANAGER)
def update_event(event_id: int):
    data = UpdateEventSchema().load(request.get_json(force=True) or {})
    result = event_service.update_event(
        caller=g.identity,
        event_id=event_id,
        data=data,
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 200


@events_bp.route("/<int:event_id>", methods=["DELETE"])
@require_auth
@require_role(Role.CLUB_MANAGER)
def delete_event(event_id: int):
    event_service.delete_event(
        caller=g.identity,
        event_id=event_id,
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": {"deleted": True, "id": event_id}, "warnings": []}), 200


@events_bp.route("/manager/my-events", methods=["GET"])
@require_auth
@require_role(Role.CLUB_MANAGER)
def my_events():
    result = event_service.list_manager_events(caller=g.identity, session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@events_bp.route("/<int:event_id>/register", methods=["POST"])
@require_auth
@require_role(Role.MEMBER)
def register(event_id: int):
    """POST /events/:id/register — Members only. Body may be empty."""
    data = RegisterEventSchema().load(request.get_json(silent=True) or {})
    result = event_service.register_for_event(
        caller=g.identity,
        event_id=event_id,
        payment_id=data["payment_id"],
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 201


@events_bp.route("/<int:event_id>/register", methods=["DELETE"])
@require_auth
@require_role(Role.MEMBER)
def unregister(event_id: int):
    result = event_service.unregister_from_event(
        caller=g.identity,
        event_id=event_id,
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 200


@events_bp.route("/<int:event_id>/registration-status", methods=["GET"])
@require_auth
def registration_status(event_id: int):
    result = event_service.get_registration_status(
        caller=g.identity,
        event_id=event_id,
        session=db.session,
    )
    return jsonify({"data": result, "warnings": []}), 200
