"""
tests/integration/test_app.py — Health check, routing errors, envelope shape.
"""

from __future__ import annotations


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"data": {"status": "ok"}, "warnings": []}


def test_unknown_route_returns_route_not_found(client):
    resp = client.get("/api/does-not-exist")
    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "ROUTE_NOT_FOUND"


def test_wrong_method_returns_method_not_allowed(client):
    resp = client.delete("/api/health")
    assert resp.status_code == 405
    assert resp.get_json()["error"]["code"] == "METHOD_NOT_ALLOWED"


def test_cors_headers_in_testing(client):
    resp = client.get("/api/health", headers={"Origin": "http://localhost:5173"})
    assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"
    assert "PUT" in resp.headers["Access-Control-Allow-Methods"]
