"""
services/event_service.py — Event lifecycle and capacity-bounded registration.

Rules enforced here:
  - Only the manager of an event's club may create, update or delete it.
  - event_fee is 0 whenever the resulting is_paid is false.
  - Registration: the event must exist and not be in the past; a capped
    event rejects the (max+1)th registration (EVENT_FULL); a user holds at
    most one registration per event (ALREADY_REGISTERED).
  - current_attendees is recomputed from the live count of `registered`
    rows in ONE UPDATE statement after every register/unregister — never
    incremented or decremented in Python.

Concurrency:
  register() loads the event row FOR UPDATE (a no-op on SQLite), which
  serialises concurrent registrations for the same event until commit and
  keeps the capacity check and the recount consistent. The unique
  constraint on (event_id, user_email) is the final guard against
  duplicates; its IntegrityError is mapped to ALREADY_REGISTERED.

Layer rules:
  - No Flask imports. Commits are the route's responsibility.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from clubsphere.app.clock import ensure_utc, isoformat, utcnow
from clubsphere.app.errors import (
    AppError,
    ErrorCode,
    conflict,
    forbidden,
    invalid_input,
    not_found,
)
from clubsphere.app.identity import Identity
from clubsphere.app.models.club import Club
from clubsphere.app.models.enums import ClubStatus, RegistrationStatus
from clubsphere.app.models.event import Event
from clubsphere.app.models.event_registration import EventRegistration
from clubsphere.app.models.payment import Payment
from clubsphere.app.money import to_money_str
from clubsphere.app.services.pagination import paginate

logger = logging.getLogger(__name__)

UPCOMING_LIMIT = 6

_SORT_COLUMNS = {
    "eventDate": Event.event_date,
    "title":     Event.title,
    "createdAt": Event.created_at,
    "eventFee":  Event.event_fee,
}

# Plain fields copied as-is on update. is_paid/event_fee are handled together.
_UPDATABLE_FIELDS = (
    "title",
    "description",
    "location",
    "max_attendees",
)


# ── Private helpers ────────────────────────────────────────────────────────

def get_event_or_404(event_id: int, session: Session) -> Event:
    """Returns the Event or raises EVENT_NOT_FOUND (404)."""
    event = session.get(Event, event_id)
    if event is None:
        raise not_found(ErrorCode.EVENT_NOT_FOUND, f"Event {event_id} does not exist.")
    return event


def _require_event_manager(event: Event, caller: Identity, action: str) -> None:
    if not caller.owns(event.club.manager_email):
        raise forbidden(f"You can only {action} events for your own clubs.")


def _count_registered(event_id: int, session: Session) -> int:
    return session.execute(
        select(func.count(EventRegistration.id)).where(
            EventRegistration.event_id == event_id,
            EventRegistration.status == RegistrationStatus.REGISTERED,
        )
    ).scalar_one()


def _recompute_attendees(event: Event, session: Session) -> None:
    """
    Stores the live count of `registered` rows on the event in a single
    UPDATE ... SET current_attendees = (SELECT COUNT(*) ...) statement.
    """
    live_count = (
        select(func.count(EventRegistration.id))
        .where(
            EventRegistration.event_id == event.id,
            EventRegistration.status == RegistrationStatus.REGISTERED,
        )
        .scalar_subquery()
    )
    session.execute(
        update(Event)
        .where(Event.id == event.id)
        .values(current_attendees=live_count)
        .execution_options(synchronize_session=False)
    )
    session.refresh(event)


def _club_summary(club: Club, include_manager: bool = False) -> dict:
    summary = {
        "id": club.id,
        "clubName": club.club_name,
        "location": club.location,
    }
    if include_manager:
        summary["managerEmail"] = club.manager_email
    return summary


def build_event_dict(event: Event, include_manager: bool = False) -> dict:
    """Serialises an Event with a summary of its club. Fee as a string."""
    return {
        "id": event.id,
        "clubId": event.club_id,
        "title": event.title,
        "description": event.description,
        "eventDate": isoformat(event.event_date),
        "location": event.location,
        "isPaid": event.is_paid,
        "eventFee": to_money_str(event.event_fee),
        "maxAttendees": event.max_attendees,
        "currentAttendees": event.current_attendees,
        "createdAt": isoformat(event.created_at),
        "updatedAt": isoformat(event.updated_at),
        "club": _club_summary(event.club, include_manager),
    }


def build_registration_dict(registration: EventRegistration) -> dict:
    return {
        "id": registration.id,
        "eventId": registration.event_id,
        "userEmail": registration.user_email,
        "clubId": registration.club_id,
        "status": registration.status.value,
        "paymentId": registration.payment_id,
        "createdAt": isoformat(registration.created_at),
    }


def _approved_events():
    return (
        select(Event)
        .join(Club, Event.club_id == Club.id)
        .where(Club.status == ClubStatus.APPROVED)
    )


def _order_by(sort: str, order: str):
    column = _SORT_COLUMNS.get(sort)
    if column is None:
        raise invalid_input(ErrorCode.INVALID_FIELD, f"Cannot sort events by '{sort}'.", field="sort")
    if order == "asc":
        return column.asc(), Event.id.asc()
    return column.desc(), Event.id.desc()


# ── Public read functions ──────────────────────────────────────────────────

def list_events(
        search: str | None,
        sort: str,
        order: str,
        page: int,
        limit: int,
        session: Session,
) -> dict:
    """Paginated listing of events whose club is approved."""
    stmt = _approved_events()
    if search:
        stmt = stmt.where(Event.title.icontains(search, autoescape=True))
    stmt = stmt.order_by(*_order_by(sort, order))
    return paginate(stmt, page, limit, build_event_dict, session)


def get_upcoming_events(session: Session) -> list[dict]:
    """The next events (date >= now) of approved clubs, soonest first."""
    events = session.execute(
        _approved_events()
        .where(Event.event_date >= utcnow())
        .order_by(Event.event_date.asc(), Event.id.asc())
        .limit(UPCOMING_LIMIT)
    ).scalars().all()
    return [build_event_dict(e) for e in events]


def get_event(event_id: int, session: Session) -> dict:
    return build_event_dict(get_event_or_404(event_id, session), include_manager=True)


def list_manager_events(caller: Identity, session: Session) -> list[dict]:
    """Events of every club the caller manages, latest date first."""
    events = session.execute(
        select(Event)
        .join(Club, Event.club_id == Club.id)
        .where(Club.manager_email == caller.email)
        .order_by(Event.event_date.desc(), Event.id.desc())
    ).scalars().all()
    return [build_event_dict(e) for e in events]


def get_registration_status(caller: Identity, event_id: int, session: Session) -> dict | None:
    """The caller's `registered` row for the event, or None."""
    registration = session.execute(
        select(EventRegistration).where(
            EventRegistration.event_id == event_id,
            EventRegistration.user_email == caller.email,
            EventRegistration.status == RegistrationStatus.REGISTERED,
        )
    ).scalar_one_or_none()
    return build_registration_dict(registration) if registration is not None else None


# ── Public write functions ─────────────────────────────────────────────────

def create_event(caller: Identity, data: dict, session: Session) -> dict:
    """
    Creates an event for a club the caller manages.

    Raises:
      AppError(FORBIDDEN, 403) — club missing or managed by someone else
    """
    club = session.get(Club, data["club_id"])
    if club is None or not caller.owns(club.manager_email):
        raise forbidden("You can only create events for your own clubs.")

    is_paid = data.get("is_paid", False)
    event = Event(
        club_id=club.id,
        title=data["title"],
        description=data["description"],
        event_date=ensure_utc(data["event_date"]),
        location=data["location"],
        is_paid=is_paid,
        event_fee=data.get("event_fee", Decimal("0")) if is_paid else Decimal("0"),
        max_attendees=data.get("max_attendees"),
        current_attendees=0,
    )
    session.add(event)
    session.flush()

    logger.info("Event %s created for club %s by %s", event.id, club.id, caller.email)
    return build_event_dict(event)


def update_event(caller: Identity, event_id: int, data: dict, session: Session) -> dict:
    """
    Partially updates an event. `max_attendees: None` removes the cap.

    Raises:
      AppError(EVENT_NOT_FOUND, 404)
      AppError(FORBIDDEN, 403) — caller does not manage the event's club
    """
    event = get_event_or_404(event_id, session)
    _require_event_manager(event, caller, "update")

    for field in _UPDATABLE_FIELDS:
        if field in data:
            setattr(event, field, data[field])

    if "event_date" in data:
        event.event_date = ensure_utc(data["event_date"])

    if "is_paid" in data:
        event.is_paid = data["is_paid"]

    if not event.is_paid:
        event.event_fee = Decimal("0")
    elif "event_fee" in data:
        event.event_fee = data["event_fee"]

    session.flush()
    return build_event_dict(event)


def delete_event(caller: Identity, event_id: int, session: Session) -> None:
    """
    Deletes an event and all of its registrations. Payments that referenced
    the event keep their row with event_id cleared.
    """
    event = get_event_or_404(event_id, session)
    _require_event_manager(event, caller, "delete")

    session.execute(
        delete(EventRegistration)
        .where(EventRegistration.event_id == event_id)
        .execution_options(synchronize_session=False)
    )
    session.execute(
        update(Payment)
        .where(Payment.event_id == event_id)
        .values(event_id=None)
        .execution_options(synchronize_session=False)
    )
    session.delete(event)
    session.flush()

    logger.info("Event %s deleted by %s", event_id, caller.email)


def register_for_event(
        caller: Identity,
        event_id: int,
        payment_id: str | None,
        session: Session,
) -> dict:
    """
    Registers the caller for an event.

    Raises:
      AppError(EVENT_NOT_FOUND, 404)
      AppError(EVENT_IN_PAST, 422)
      AppError(EVENT_FULL, 409)          — max_attendees reached
      AppError(ALREADY_REGISTERED, 409)

    Returns: {"registration": {...}, "currentAttendees": n}
    """
    event = session.execute(
        select(Event).where(Event.id == event_id).with_for_update()
    ).scalar_one_or_none()
    if event is None:
        raise not_found(ErrorCode.EVENT_NOT_FOUND, f"Event {event_id} does not exist.")

    if ensure_utc(event.event_date) < utcnow():
        raise AppError(
            ErrorCode.EVENT_IN_PAST,
            "Cannot register for past events.",
            422,
        )

    if event.max_attendees is not None:
        if _count_registered(event_id, session) >= event.max_attendees:
            raise conflict(ErrorCode.EVENT_FULL, "This event is full.")

    existing = session.execute(
        select(EventRegistration).where(
            EventRegistration.event_id == event_id,
            EventRegistration.user_email == caller.email,
        )
    ).scalar_one_or_none()
    if existing is not None:
        raise conflict(ErrorCode.ALREADY_REGISTERED, "You are already registered for this event.")

    registration = EventRegistration(
        event_id=event_id,
        user_email=caller.email,
        club_id=event.club_id,
        status=RegistrationStatus.REGISTERED,
        payment_id=payment_id,
    )
    session.add(registration)
    try:
        session.flush()
    except IntegrityError:
        # A concurrent request for the same (event, user) won the insert.
        session.rollback()
        raise conflict(ErrorCode.ALREADY_REGISTERED, "You are already registered for this event.")

    _recompute_attendees(event, session)

    logger.info("%s registered for event %s", caller.email, event_id)
    return {
        "registration": build_registration_dict(registration),
        "currentAttendees": event.current_attendees,
    }


def unregister_from_event(caller: Identity, event_id: int, session: Session) -> dict:
    """
    Deletes the caller's registration and recounts attendees.

    Raises:
      AppError(REGISTRATION_NOT_FOUND, 404)

    Returns: {"eventId": ..., "currentAttendees": n}
    """
    registration = session.execute(
        select(EventRegistration).where(
            EventRegistration.event_id == event_id,
            EventRegistration.user_email == caller.email,
        )
    ).scalar_one_or_none()
    if registration is None:
        raise not_found(
            ErrorCode.REGISTRATION_NOT_FOUND,
            "You are not registered for this event.",
        )

    event = registration.event
    session.delete(registration)
    session.flush()

    _recompute_attendees(event, session)

    logger.info("%s unregistered from event %s", caller.email, event_id)
    return {
        "eventId": event_id,
        "currentAttendees": event.current_attendees,
    }
