"""Integration tests for the health endpoint."""

from __future__ import annotations


def test_health_reports_db_and_token_settings(client):
    resp = client.get("/api/v1/health")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "ok"
    assert body["db"] == "ok"
    assert body["auth"] == {
        "algorithm": "HS256",
        "access_ttl_seconds": 900,
        "refresh_ttl_seconds": 30 * 86400,
    }
    assert "version" in body


def test_health_never_exposes_secrets(client, app):
    text = client.get("/api/v1/health").get_data(as_text=True)
    assert app.config["JWT_ACCESS_SECRET"] not in text
    assert app.config["JWT_REFRESH_SECRET"] not in text


def test_unknown_route_is_problem_json(client):
    resp = client.get("/api/v1/nope")
    assert resp.status_code == 404
    assert resp.mimetype == "application/problem+json"
    assert resp.get_json()["code"] == "not_found"
