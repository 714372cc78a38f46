"""
services/user_service.py — Admin user management.

Routes gate these functions to Role.ADMIN. The service adds the
self-protection rule: an admin can neither change their own role nor delete
their own account.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from clubsphere.app.errors import ErrorCode, invalid_input, not_found
from clubsphere.app.identity import Identity
from clubsphere.app.models.enums import Role
from clubsphere.app.models.user import User
from clubsphere.app.services.auth_service import build_user_dict

logger = logging.getLogger(__name__)


def _get_user_or_404(user_id: int, session: Session) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise not_found(ErrorCode.USER_NOT_FOUND, f"User {user_id} not found.")
    return user


def list_users(session: Session) -> list[dict]:
    users = session.execute(
        select(User).order_by(User.created_at.desc(), User.id.desc())
    ).scalars().all()
    return [build_user_dict(u) for u in users]


def update_role(caller: Identity, user_id: int, role: Role, session: Session) -> dict:
    """
    Raises:
      AppError(CANNOT_MODIFY_SELF, 400) — admin targets their own account
      AppError(USER_NOT_FOUND, 404)
    """
    if user_id == caller.user_id:
        raise invalid_input(ErrorCode.CANNOT_MODIFY_SELF, "You cannot change your own role.")

    user = _get_user_or_404(user_id, session)
    user.role = role
    session.flush()

    logger.info("User %s role set to %s by %s", user_id, role.value, caller.user_id)
    return build_user_dict(user)


def delete_user(caller: Identity, user_id: int, session: Session) -> None:
    """
    Memberships, registrations and payments reference users by email, so
    they are left in place.
    """
    if user_id == caller.user_id:
        raise invalid_input(ErrorCode.CANNOT_MODIFY_SELF, "You cannot delete your own account.")

    user = _get_user_or_404(user_id, session)
    session.delete(user)
    session.flush()

    logger.info("User %s deleted by %s", user_id, caller.user_id)
