"""
routes/users.py — Admin user management.

Endpoints (url_prefix=/api/users, all Role.ADMIN):
  GET    /users            → 200  all users, newest first
  PATCH  /users/:id/role   → 200  change a user's role
  DELETE /users/:id        → 200  delete a user
"""

from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from clubsphere.app.extensions import db
from clubsphere.app.middleware.access_control import require_role
from clubsphere.app.middleware.auth_middleware import require_auth
from clubsphere.app.models.enums import Role
from clubsphere.app.schemas.user_schema import UpdateRoleSchema
from clubsphere.app.services import user_service

users_bp = Blueprint("users", __name__)


@users_bp.route("/", methods=["GET"])
@require_auth
@require_role(Role.ADMIN)
def list_users():
    result = user_service.list_users(session=db.session)
    return jsonify({"data": result, "warnings": []}), 200


@users_bp.route("/<int:user_id>/role", methods=["PATCH"])
@require_auth
@require_role(Role.ADMIN)
def update_role(user_id: int):
    data = UpdateRoleSchema().load(request.get_json(force=True) or {})
    result = user_service.update_role(
        caller=g.identity,
        user_id=user_id,
        role=data["role"],
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": result, "warnings": []}), 200


@users_bp.route("/<int:user_id>", methods=["DELETE"])
@require_auth
@require_role(Role.ADMIN)
def delete_user(user_id: int):
    user_service.delete_user(
        caller=g.identity,
        user_id=user_id,
        session=db.session,
    )
    db.session.commit()
    return jsonify({"data": {"deleted": True, "id": user_id}, "warnings": []}), 200
