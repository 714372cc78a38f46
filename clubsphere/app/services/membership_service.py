"""
services/membership_service.py — Joining clubs and listing members.

Rules enforced here:
  - Only approved clubs can be joined (others look like CLUB_NOT_FOUND).
  - One membership per (user_email, club_id): pre-checked for a friendly
    error, guaranteed by the unique constraint (IntegrityError is mapped to
    the same ALREADY_MEMBER code).
  - A club with membership_fee > 0 requires a payment_id. Only its presence
    is checked; whether that payment succeeded is not verified here.
  - member_count is bumped with an atomic UPDATE ... SET member_count =
    member_count + 1, safe under concurrent joins.

Layer rules:
  - No Flask imports. Commits are the route's responsibility.
"""

from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from clubsphere.app.clock import isoformat
from clubsphere.app.errors import ErrorCode, conflict, forbidden, invalid_input, not_found
from clubsphere.app.identity import Identity
from clubsphere.app.models.club import Club
from clubsphere.app.models.enums import ClubStatus, MembershipStatus
from clubsphere.app.models.membership import Membership
from clubsphere.app.money import to_money_str
from clubsphere.app.services.club_service import get_club_or_404

logger = logging.getLogger(__name__)


def _already_member():
    return conflict(ErrorCode.ALREADY_MEMBER, "You are already a member of this club.")


def build_membership_dict(membership: Membership, include_club: bool = False) -> dict:
    result = {
        "id": membership.id,
        "userEmail": membership.user_email,
        "clubId": membership.club_id,
        "status": membership.status.value,
        "paymentId": membership.payment_id,
        "expiresAt": isoformat(membership.expires_at),
        "createdAt": isoformat(membership.created_at),
    }
    if include_club:
        club = membership.club
        result["club"] = {
            "id": club.id,
            "clubName": club.club_name,
            "location": club.location,
            "category": club.category.value,
            "bannerImage": club.banner_image,
            "membershipFee": to_money_str(club.membership_fee),
        }
    return result


def join_club(
        caller: Identity,
        club_id: int,
        payment_id: str | None,
        session: Session,
) -> dict:
    """
    Creates an active membership for the caller.

    Raises:
      AppError(CLUB_NOT_FOUND, 404)   — missing or not approved
      AppError(ALREADY_MEMBER, 409)
      AppError(PAYMENT_REQUIRED, 400) — paid club and no payment_id
    """
    club = session.get(Club, club_id)
    if club is None or club.status != ClubStatus.APPROVED:
        raise not_found(ErrorCode.CLUB_NOT_FOUND, "Club not found or not approved.")

    existing = session.execute(
        select(Membership).where(
            Membership.user_email == caller.email,
            Membership.club_id == club_id,
        )
    ).scalar_one_or_none()
    if existing is not None:
        raise _already_member()

    if club.membership_fee > 0 and not payment_id:
        raise invalid_input(
            ErrorCode.PAYMENT_REQUIRED,
            "Payment is required to join this club.",
            field="paymentId",
        )

    membership = Membership(
        user_email=caller.email,
        club_id=club_id,
        status=MembershipStatus.ACTIVE,
        payment_id=payment_id,
    )
    session.add(membership)
    try:
        session.flush()
    except IntegrityError:
        session.rollback()
        raise _already_member()

    session.execute(
        update(Club)
        .where(Club.id == club_id)
        .values(member_count=Club.member_count + 1)
        .execution_options(synchronize_session=False)
    )
    session.expire(club, ["member_count"])

    logger.info("%s joined club %s", caller.email, club_id)
    return build_membership_dict(membership)


def list_my_memberships(caller: Identity, session: Session) -> list[dict]:
    memberships = session.execute(
        select(Membership)
        .where(Membership.user_email == caller.email)
        .order_by(Membership.created_at.desc(), Membership.id.desc())
    ).scalars().all()
    return [build_membership_dict(m, include_club=True) for m in memberships]


def list_club_members(caller: Identity, club_id: int, session: Session) -> list[dict]:
    """
    Raises:
      AppError(CLUB_NOT_FOUND, 404)
      AppError(FORBIDDEN, 403) — caller is neither the manager nor an admin
    """
    club = get_club_or_404(club_id, session)
    if not (caller.owns(club.manager_email) or caller.is_admin):
        raise forbidden("Only the club manager or an admin can view club members.")

    memberships = session.execute(
        select(Membership)
        .where(Membership.club_id == club_id)
        .order_by(Membership.created_at.desc(), Membership.id.desc())
    ).scalars().all()
    return [build_membership_dict(m) for m in memberships]
