"""
services/club_service.py — Club lifecycle and approval workflow.

Rules enforced here:
  - A new club always starts `pending`; its manager_email comes from the
    caller's identity, never from the request body.
  - Only the owning manager (exact email match) may update a club.
  - Only `approved` and `rejected` are valid targets of a status change
    (the role gate for that route is Role.ADMIN).
  - Updates are partial: a key absent from `data` leaves the column
    unchanged; a key present with a falsy value (0, "") is applied.

Layer rules:
  - No Flask imports. Pure Python with a SQLAlchemy session parameter.
  - Commits are the route's responsibility — only flush here.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from clubsphere.app.clock import isoformat
from clubsphere.app.errors import ErrorCode, forbidden, invalid_input, not_found
from clubsphere.app.identity import Identity
from clubsphere.app.models.club import Club
from clubsphere.app.models.enums import ClubCategory, ClubStatus
from clubsphere.app.money import to_money_str
from clubsphere.app.services.pagination import paginate

logger = logging.getLogger(__name__)

FEATURED_LIMIT = 6

_SORT_COLUMNS = {
    "createdAt":     Club.created_at,
    "clubName":      Club.club_name,
    "memberCount":   Club.member_count,
    "membershipFee": Club.membership_fee,
}

# Fields a manager may change through PUT /clubs/<id>.
_UPDATABLE_FIELDS = (
    "club_name",
    "description",
    "category",
    "location",
    "banner_image",
    "membership_fee",
)


# ── Private helpers ────────────────────────────────────────────────────────

def get_club_or_404(club_id: int, session: Session) -> Club:
    """Returns the Club or raises CLUB_NOT_FOUND (404)."""
    club = session.get(Club, club_id)
    if club is None:
        raise not_found(ErrorCode.CLUB_NOT_FOUND, f"Club {club_id} does not exist.")
    return club


def require_club_manager(club: Club, caller: Identity, action: str) -> None:
    """Raises FORBIDDEN (403) unless the caller is the club's manager."""
    if not caller.owns(club.manager_email):
        raise forbidden(f"You can only {action} your own clubs.")


def build_club_dict(club: Club) -> dict:
    """Serialises a Club to a plain dict. Fee as a string."""
    return {
        "id": club.id,
        "clubName": club.club_name,
        "description": club.description,
        "category": club.category.value,
        "location": club.location,
        "bannerImage": club.banner_image,
        "membershipFee": to_money_str(club.membership_fee),
        "status": club.status.value,
        "managerEmail": club.manager_email,
        "memberCount": club.member_count,
        "createdAt": isoformat(club.created_at),
        "updatedAt": isoformat(club.updated_at),
    }


def _order_by(sort: str, order: str):
    column = _SORT_COLUMNS.get(sort)
    if column is None:
        raise invalid_input(ErrorCode.INVALID_FIELD, f"Cannot sort clubs by '{sort}'.", field="sort")
    primary = column.asc() if order == "asc" else column.desc()
    # Tie-break on id so pages are stable.
    return primary, Club.id.asc() if order == "asc" else Club.id.desc()


# ── Public read functions ──────────────────────────────────────────────────

def list_approved_clubs(
        search: str | None,
        category: str | None,
        sort: str,
        order: str,
        page: int,
        limit: int,
        session: Session,
) -> dict:
    """
    Paginated listing of approved clubs.

    `search` is a case-insensitive substring match on the club name (LIKE
    wildcards in the input are escaped). `category` of None or "all" means
    no category filter.
    """
    stmt = select(Club).where(Club.status == ClubStatus.APPROVED)

    if search:
        stmt = stmt.where(Club.club_name.icontains(search, autoescape=True))

    if category and category != "all":
        stmt = stmt.where(Club.category == ClubCategory(category))

    stmt = stmt.order_by(*_order_by(sort, order))
    return paginate(stmt, page, limit, build_club_dict, session)


def get_featured_clubs(session: Session) -> list[dict]:
    """Top approved clubs by member count, newest first on ties."""
    clubs = session.execute(
        select(Club)
        .where(Club.status == ClubStatus.APPROVED)
        .order_by(Club.member_count.desc(), Club.created_at.desc(), Club.id.desc())
        .limit(FEATURED_LIMIT)
    ).scalars().all()
    return [build_club_dict(c) for c in clubs]


def get_club(club_id: int, session: Session) -> dict:
    return build_club_dict(get_club_or_404(club_id, session))


def list_manager_clubs(caller: Identity, session: Session) -> list[dict]:
    """All clubs whose manager_email is the caller's, in any status."""
    clubs = session.execute(
        select(Club)
        .where(Club.manager_email == caller.email)
        .order_by(Club.created_at.desc(), Club.id.desc())
    ).scalars().all()
    return [build_club_dict(c) for c in clubs]


def admin_list_clubs(status: ClubStatus | None, session: Session) -> list[dict]:
    stmt = select(Club)
    if status is not None:
        stmt = stmt.where(Club.status == status)
    clubs = session.execute(
        stmt.order_by(Club.created_at.desc(), Club.id.desc())
    ).scalars().all()
    return [build_club_dict(c) for c in clubs]


# ── Public write functions ─────────────────────────────────────────────────

def create_club(caller: Identity, data: dict, session: Session) -> dict:
    """
    Creates a club in `pending` status owned by the caller.

    Args:
        caller: The authenticated club manager.
        data:   Validated dict from CreateClubSchema (snake_case keys).
    """
    club = Club(
        club_name=data["club_name"],
        description=data["description"],
        category=data["category"],
        location=data["location"],
        banner_image=data.get("banner_image", ""),
        membership_fee=data.get("membership_fee", Decimal("0")),
        status=ClubStatus.PENDING,
        manager_email=caller.email,
        member_count=0,
    )
    session.add(club)
    session.flush()

    logger.info("Club %s created by %s (pending approval)", club.id, caller.email)
    return build_club_dict(club)


def update_club(caller: Identity, club_id: int, data: dict, session: Session) -> dict:
    """
    Partially updates a club. Only the owning manager may call this.

    Raises:
      AppError(CLUB_NOT_FOUND, 404)
      AppError(FORBIDDEN, 403) — caller does not manage this club
    """
    club = get_club_or_404(club_id, session)
    require_club_manager(club, caller, "update")

    for field in _UPDATABLE_FIELDS:
        if field in data:
            setattr(club, field, data[field])

    session.flush()
    return build_club_dict(club)


def set_club_status(
        caller: Identity,
        club_id: int,
        status: ClubStatus,
        session: Session,
) -> dict:
    """
    Approves or rejects a club.

    Raises:
      AppError(INVALID_STATUS, 400) — status other than approved/rejected
      AppError(CLUB_NOT_FOUND, 404)
    """
    if status not in (ClubStatus.APPROVED, ClubStatus.REJECTED):
        raise invalid_input(
            ErrorCode.INVALID_STATUS,
            "Status must be 'approved' or 'rejected'.",
            field="status",
        )

    club = get_club_or_404(club_id, session)
    club.status = status
    session.flush()

    logger.info("Club %s %s by %s", club_id, status.value, caller.email)
    return build_club_dict(club)
