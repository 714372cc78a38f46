"""
tests/integration/conftest.py — Fixtures and helpers for all integration tests.

Design:
  - Tests run against the database in TestingConfig (in-memory SQLite unless
    TEST_DATABASE_URL points at a real PostgreSQL database).
  - The app is created once per session using create_app("testing").
  - All tables are created once via db.create_all() at session start.
  - Between tests, all rows are deleted in FK-safe order so tests are isolated.
  - The payment gateway is replaced by FakeGateway for every test, so no test
    ever reaches the real processor.

Helper functions (not fixtures) are provided for common operations:
  - register(client, ...)         → {"user": {...}, "accessToken": "..."}
  - login(client, ...)            → {"user": {...}, "accessToken": "..."}
  - auth_headers(token)           → {"Authorization": "Bearer <token>"}
  - make_user(client, app, ...)   → registered user with the given role
  - make_club(client, token, ...) → club dict (pending)
  - approve_club(...)             → club dict (approved)
  - make_event(...)               → event dict

These are plain functions (not pytest fixtures) so they can be called with
arbitrary arguments in any test.
"""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import text, update

from clubsphere.app import create_app
from clubsphere.app.extensions import db as _db
from clubsphere.app.models.enums import Role
from clubsphere.app.models.user import User
from clubsphere.app.services.payment_gateway import PaymentGatewayError, PaymentIntent


# ═══════════════════════════════════════════════════════════════════════════
# Fake payment processor
# ═══════════════════════════════════════════════════════════════════════════

class FakeGateway:
    """
    In-memory stand-in for StripeGateway.

    New intents start in `requires_payment_method`; tests move them with
    set_status(), optionally with a decline message. Setting `fail = True`
    makes every call raise PaymentGatewayError.
    """

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self.statuses: dict[str, str] = {}
        self.failures: dict[str, str] = {}
        self.created: list[dict] = []
        self.fail = False

    def create_intent(self, amount_minor: int, currency: str, metadata: dict) -> PaymentIntent:
        if self.fail:
            raise PaymentGatewayError("processor down")
        intent_id = f"pi_test_{next(self._ids)}"
        self.statuses[intent_id] = "requires_payment_method"
        self.created.append({
            "id": intent_id,
            "amount": amount_minor,
            "currency": currency,
            "metadata": metadata,
        })
        return PaymentIntent(
            id=intent_id,
            client_secret=f"{intent_id}_secret",
            status="requires_payment_method",
        )

    def retrieve_intent(self, intent_id: str) -> PaymentIntent:
        if self.fail:
            raise PaymentGatewayError("processor down")
        if intent_id not in self.statuses:
            raise PaymentGatewayError(f"unknown intent {intent_id}")
        return PaymentIntent(
            id=intent_id,
            client_secret=None,
            status=self.statuses[intent_id],
            failure_message=self.failures.get(intent_id),
        )

    def set_status(self, intent_id: str, status: str, failure: str | None = None) -> None:
        self.statuses[intent_id] = status
        if failure is None:
            self.failures.pop(intent_id, None)
        else:
            self.failures[intent_id] = failure


# ═══════════════════════════════════════════════════════════════════════════
# Session-scoped app fixture
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture(scope="session")
def app():
    """
    Creates the Flask application in 'testing' mode once for the entire test session.
    Enumerations are VARCHAR + CHECK, so db.create_all() needs no extra types.
    """
    flask_app = create_app("testing")

    with flask_app.app_context():
        _db.create_all()

    yield flask_app

    with flask_app.app_context():
        _db.drop_all()


# ═══════════════════════════════════════════════════════════════════════════
# Function-scoped test isolation
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture(autouse=True)
def clean_tables(app):
    """
    Deletes all rows after every test in FK-safe order:
    registrations and payments before events, events and memberships before clubs.
    """
    yield

    with app.app_context():
        _db.session.rollback()  # discard any uncommitted state from a failed test

        with _db.engine.connect() as conn:
            conn.execute(text("DELETE FROM event_registrations"))
            conn.execute(text("DELETE FROM payments"))
            conn.execute(text("DELETE FROM memberships"))
            conn.execute(text("DELETE FROM events"))
            conn.execute(text("DELETE FROM clubs"))
            conn.execute(text("DELETE FROM users"))
            conn.commit()


@pytest.fixture(autouse=True)
def gateway(app):
    """A fresh FakeGateway for each test, installed where routes look it up."""
    fake = FakeGateway()
    original = app.extensions["payment_gateway"]
    app.extensions["payment_gateway"] = fake
    yield fake
    app.extensions["payment_gateway"] = original


# ═══════════════════════════════════════════════════════════════════════════
# Client fixture
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def client(app):
    """Flask test client. Each test gets a fresh client (function-scoped)."""
    return app.test_client()


# ═══════════════════════════════════════════════════════════════════════════
# Shared helper functions (not fixtures)
# ═══════════════════════════════════════════════════════════════════════════

def register(
    client,
    name: str = "Alice",
    email: str | None = None,
    password: str = "Password1",
) -> dict:
    """
    Registers a new member and returns the response data dict.
    Returns: {"user": {...}, "accessToken": "..."}
    """
    if email is None:
        email = f"{name.lower()}@test.com"
    resp = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert resp.status_code == 201, f"register failed: {resp.get_json()}"
    return resp.get_json()["data"]


def login(client, email: str, password: str = "Password1") -> dict:
    resp = client.post(
        "/api/auth/login",
        json={"email": email, "password": password},
    )
    assert resp.status_code == 200, f"login failed: {resp.get_json()}"
    return resp.get_json()["data"]


def auth_headers(token: str) -> dict:
    """Returns the Authorization header dict for use in test requests."""
    return {"Authorization": f"Bearer {token}"}


def set_role(app, email: str, role: Role) -> None:
    """Changes a role directly in the DB. Tokens stay valid: the role is reloaded per request."""
    with app.app_context():
        _db.session.execute(update(User).where(User.email == email).values(role=role))
        _db.session.commit()


def make_user(client, app, name: str, role: Role = Role.MEMBER) -> dict:
    """
    Registers a user and gives them `role`.
    Returns: {"user": {...}, "accessToken": "...", "token": "..."}
    """
    data = register(client, name=name)
    if role != Role.MEMBER:
        set_role(app, data["user"]["email"], role)
    data["token"] = data["accessToken"]
    return data


def make_club(client, token: str, **overrides) -> dict:
    payload = {
        "clubName": "Photo Walkers",
        "description": "Weekly photo walks around the city.",
        "category": "Photography",
        "location": "New York, NY",
        "bannerImage": "https://example.com/banner.jpg",
        "membershipFee": "0",
    }
    payload.update(overrides)
    resp = client.post("/api/clubs/", json=payload, headers=auth_headers(token))
    assert resp.status_code == 201, f"make_club failed: {resp.get_json()}"
    return resp.get_json()["data"]


def approve_club(client, admin_token: str, club_id: int) -> dict:
    resp = client.patch(
        f"/api/clubs/{club_id}/status",
        json={"status": "approved"},
        headers=auth_headers(admin_token),
    )
    assert resp.status_code == 200, f"approve_club failed: {resp.get_json()}"
    return resp.get_json()["data"]


def future(days: int = 30) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def make_event(client, token: str, club_id: int, **overrides) -> dict:
    payload = {
        "clubId": club_id,
        "title": "Sunrise Shoot",
        "description": "Meet at the pier.",
        "eventDate": future(),
        "location": "Pier 17",
    }
    payload.update(overrides)
    resp = client.post("/api/events/", json=payload, headers=auth_headers(token))
    assert resp.status_code == 201, f"make_event failed: {resp.get_json()}"
    return resp.get_json()["data"]


@pytest.fixture
def admin(client, app):
    return make_user(client, app, "Admin", Role.ADMIN)


@pytest.fixture
def manager(client, app):
    return make_user(client, app, "Manager", Role.CLUB_MANAGER)


@pytest.fixture
def member(client, app):
    return make_user(client, app, "Member")


@pytest.fixture
def approved_club(client, admin, manager):
    """A free, approved club owned by `manager`."""
    club = make_club(client, manager["token"])
    return approve_club(client, admin["token"], club["id"])
