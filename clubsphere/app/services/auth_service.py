"""
services/auth_service.py — Account registration, login and token issue.

Responsibilities:
  - User registration (role is always `member` on self-registration)
  - Credential validation
  - JWT access token creation (HS256)
  - Password hashing (bcrypt) and verification

Layer rules:
  - No imports from routes or schemas
  - No use of flask.request, flask.g, or HTTP status codes beyond AppError
  - current_app.config is used ONLY to read the JWT secret/expiry and the
    bcrypt cost factor.

Token design:
  - Access token: JWT, HS256, TTL from JWT_ACCESS_TOKEN_EXPIRES,
    sub = user id (str). email and role are included for clients to read but
    the auth middleware always reloads the role from the database.

Password storage:
  - Hashed with bcrypt (cost factor from config BCRYPT_LOG_ROUNDS, default 12)
  - Raw password is never stored, never logged
"""

from __future__ import annotations

import logging
import secrets

import bcrypt
import jwt
from flask import current_app
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from clubsphere.app.clock import isoformat, utcnow
from clubsphere.app.errors import AppError, ErrorCode, conflict, not_found
from clubsphere.app.models.enums import Role
from clubsphere.app.models.user import User

logger = logging.getLogger(__name__)


# ── Private helpers ────────────────────────────────────────────────────────

def _create_access_token(user: User) -> str:
    """
    Creates a signed JWT access token.
    Payload: sub (user id as str), email, role, iat, exp, jti.
    """
    now = utcnow()
    expiry = now + current_app.config["JWT_ACCESS_TOKEN_EXPIRES"]
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "iat": now,
        "exp": expiry,
        # Guarantees each issued token is unique even if generated in the same second.
        "jti": secrets.token_hex(8),
    }
    return jwt.encode(
        payload,
        current_app.config["JWT_SECRET_KEY"],
        algorithm=current_app.config.get("JWT_ALGORITHM", "HS256"),
    )


def hash_password(password: str) -> str:
    rounds = current_app.config.get("BCRYPT_LOG_ROUNDS", 12)
    return bcrypt.hashpw(
        password.encode("utf-8"),
        bcrypt.gensalt(rounds=rounds),
    ).decode("utf-8")


def build_user_dict(user: User) -> dict:
    """Serialises a User to a plain dict. Never includes the password hash."""
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "photoUrl": user.photo_url,
        "role": user.role.value,
        "createdAt": isoformat(user.created_at),
    }


def _duplicate_email(email: str) -> AppError:
    err = conflict(
        ErrorCode.DUPLICATE_EMAIL,
        f"The email address '{email}' is already registered.",
    )
    err.field = "email"
    return err


# ── Public service functions ───────────────────────────────────────────────

def register_user(
        name: str,
        email: str,
        password: str,
        photo_url: str,
        session: Session,
) -> dict:
    """
    Creates a new member account and issues an access token.

    Raises:
      AppError(DUPLICATE_EMAIL, 409) — email already registered

    Returns: {"user": {...}, "accessToken": "..."}
    """
    existing = session.execute(
        select(User).where(User.email == email)
    ).scalar_one_or_none()
    if existing is not None:
        raise _duplicate_email(email)

    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        photo_url=photo_url,
        role=Role.MEMBER,
    )
    session.add(user)
    try:
        session.flush()  # populate user.id before issuing the token
    except IntegrityError:
        # Lost a race with a concurrent registration of the same email.
        session.rollback()
        raise _duplicate_email(email)

    logger.info("Registered user %s", user.id)

    return {
        "user": build_user_dict(user),
        "accessToken": _create_access_token(user),
    }


def login_user(
        email: str,
        password: str,
        session: Session,
) -> dict:
    """
    Validates credentials and issues a new access token.

    Raises:
      AppError(INVALID_CREDENTIALS, 401) — email not found or password wrong.
      Uses the same error for both to avoid account enumeration.

    Returns: {"user": {...}, "accessToken": "..."}
    """
    user = session.execute(
        select(User).where(User.email == email)
    ).scalar_one_or_none()

    if user is None or not bcrypt.checkpw(
            password.encode("utf-8"),
            user.password_hash.encode("utf-8"),
    ):
        raise AppError(
            ErrorCode.INVALID_CREDENTIALS,
            "The email or password is incorrect.",
            401,
        )

    return {
        "user": build_user_dict(user),
        "accessToken": _create_access_token(user),
    }


def get_current_user(user_id: int, session: Session) -> dict:
    """
    Returns the profile of the currently authenticated user.

    Raises:
      AppError(USER_NOT_FOUND, 404) — user deleted between authentication
        and this lookup.
    """
    user = session.get(User, user_id)
    if user is None:
        raise not_found(ErrorCode.USER_NOT_FOUND, f"User {user_id} not found.")
    return build_user_dict(user)
