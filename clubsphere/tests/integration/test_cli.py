"""
tests/integration/test_cli.py — `flask seed` demo data command.
"""

from __future__ import annotations

from .conftest import login


def test_seed_creates_accounts_and_clubs(app, client):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["seed", "--password", "Password1"])

    assert result.exit_code == 0
    assert "Created 3 user(s) and 4 club(s)." in result.output

    admin = login(client, "admin@clubsphere.com", "Password1")
    assert admin["user"]["role"] == "admin"

    listing = client.get("/api/clubs/").get_json()["data"]
    # Book Lovers Society is seeded as pending.
    assert listing["total"] == 3
    # No membership rows are seeded, so every count starts at zero.
    assert [c["memberCount"] for c in listing["items"]] == [0, 0, 0]


def test_seed_is_idempotent(app):
    runner = app.test_cli_runner()
    runner.invoke(args=["seed", "--password", "Password1"])

    result = runner.invoke(args=["seed", "--password", "Password1"])

    assert result.exit_code == 0
    assert "Created 0 user(s) and 0 club(s)." in result.output
