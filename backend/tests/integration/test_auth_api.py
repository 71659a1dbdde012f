"""Integration tests for the auth and user endpoints."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from authcore.models import RefreshToken

from tests.factories.user import DEFAULT_PASSWORD, UserFactory

REGISTER = "/api/v1/auth/register"
LOGIN = "/api/v1/auth/login"
REFRESH = "/api/v1/auth/refresh"
ME = "/api/v1/users/me"
ORIGIN = {"Origin": "https://app.example.com"}


def _login(client, email, password=DEFAULT_PASSWORD, headers=None):
    return client.post(LOGIN, json={"email": email, "password": password}, headers=headers or {})


def _refresh_cookie(resp):
    return next(
        (h for h in resp.headers.getlist("Set-Cookie") if h.startswith("refresh_token=")),
        None,
    )


class TestRegisterAndLogin:
    def test_register_returns_user_and_tokens(self, client, session):
        resp = client.post(
            REGISTER,
            json={"name": "Alice", "email": "alice@example.com", "password": "secret1"},
        )

        assert resp.status_code == 201
        data = resp.get_json()["data"]
        assert data["token_type"] == "bearer"
        assert data["access_token"] and data["refresh_token"]
        assert data["user"]["email"] == "alice@example.com"
        assert data["user"]["name"] == "Alice"
        assert "password" not in data["user"]
        assert session.query(RefreshToken).count() == 1

    def test_register_duplicate_is_conflict(self, client):
        UserFactory(email="dup@example.com")
        resp = client.post(
            REGISTER,
            json={"name": "Dup", "email": "dup@example.com", "password": "secret1"},
        )
        assert resp.status_code == 409
        assert resp.get_json()["code"] == "conflict"

    def test_register_validation_error(self, client):
        resp = client.post(REGISTER, json={"email": "bad", "password": "1"})
        assert resp.status_code == 422
        body = resp.get_json()
        assert body["code"] == "validation_error"
        assert {"email", "password", "name"} <= set(body["details"]["errors"])

    def test_login(self, client):
        user = UserFactory(email="bob@example.com")
        resp = _login(client, "bob@example.com")

        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["user"]["id"] == user.id
        assert _refresh_cookie(resp) is None

    def test_login_wrong_password(self, client):
        UserFactory(email="bob@example.com")
        resp = _login(client, "bob@example.com", "nope")

        assert resp.status_code == 401
        assert resp.mimetype == "application/problem+json"
        assert resp.get_json()["code"] == "invalid_credentials"


class TestRefreshEndpoint:
    def test_refresh_via_body(self, client):
        UserFactory(email="c@example.com")
        first = _login(client, "c@example.com").get_json()["data"]

        resp = client.post(REFRESH, json={"refresh_token": first["refresh_token"]})

        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert set(data) == {"access_token", "refresh_token", "token_type"}
        assert data["refresh_token"] != first["refresh_token"]

    def test_refresh_via_cookie(self, client):
        UserFactory(email="c@example.com")
        login = _login(client, "c@example.com", headers=ORIGIN)
        cookie = _refresh_cookie(login)
        assert cookie is not None
        for attr in ("HttpOnly", "Secure", "SameSite=None", "Path=/"):
            assert attr in cookie

        client.set_cookie("refresh_token", login.get_json()["data"]["refresh_token"])
        resp = client.post(REFRESH, headers=ORIGIN)

        assert resp.status_code == 200
        rotated = resp.get_json()["data"]["refresh_token"]
        assert rotated != login.get_json()["data"]["refresh_token"]
        assert f"refresh_token={rotated}" in _refresh_cookie(resp)

    def test_missing_refresh_token(self, client):
        resp = client.post(REFRESH, json={})
        assert resp.status_code == 400
        assert resp.get_json()["code"] == "missing_refresh_token"

    def test_replayed_token_is_opaque_401(self, client):
        UserFactory(email="c@example.com")
        first = _login(client, "c@example.com").get_json()["data"]["refresh_token"]
        assert client.post(REFRESH, json={"refresh_token": first}).status_code == 200

        replay = client.post(REFRESH, json={"refresh_token": first})
        forged = client.post(
            REFRESH,
            json={"refresh_token": first[:-4] + ("AAAA" if not first.endswith("AAAA") else "BBBB")},
        )

        assert replay.status_code == 401
        assert replay.get_json()["code"] == "invalid_session"
        assert forged.status_code == 401
        assert forged.get_json()["code"] == "invalid_token"

    @pytest.mark.parametrize("mode", ["not_found", "user_deleted"])
    def test_session_failures_share_one_response(self, client, components, session, mode):
        user = UserFactory(email="d@example.com")
        token = _login(client, "d@example.com").get_json()["data"]["refresh_token"]
        if mode == "not_found":
            session.query(RefreshToken).delete()
            session.commit()
        else:
            user.deleted_at = datetime.now(UTC)
            session.commit()

        resp = client.post(REFRESH, json={"refresh_token": token})

        assert resp.status_code == 401
        body = resp.get_json()
        assert body["code"] == "invalid_session"
        assert body["detail"] == "Invalid or expired session. Please sign in again."


class TestUsersMe:
    def test_me_requires_token(self, client):
        resp = client.get(ME)
        assert resp.status_code == 401
        assert resp.get_json()["code"] == "missing_token"

    def test_me_rejects_malformed_header(self, client):
        resp = client.get(ME, headers={"Authorization": "Token abc"})
        assert resp.status_code == 401
        assert resp.get_json()["code"] == "missing_token"

    def test_me_rejects_refresh_token(self, client):
        UserFactory(email="e@example.com")
        refresh = _login(client, "e@example.com").get_json()["data"]["refresh_token"]

        resp = client.get(ME, headers={"Authorization": f"Bearer {refresh}"})
        assert resp.status_code == 401
        assert resp.get_json()["code"] == "invalid_token"

    def test_me_returns_profile(self, client):
        user = UserFactory(email="e@example.com", name="Eve")
        access = _login(client, "e@example.com").get_json()["data"]["access_token"]

        resp = client.get(ME, headers={"Authorization": f"bearer {access}"})

        assert resp.status_code == 200
        assert resp.get_json()["data"]["user"]["id"] == user.id
        assert resp.get_json()["data"]["user"]["name"] == "Eve"

    def test_me_for_deleted_account(self, client, session):
        user = UserFactory(email="f@example.com")
        access = _login(client, "f@example.com").get_json()["data"]["access_token"]
        user.deleted_at = datetime.now(UTC)
        session.commit()

        resp = client.get(ME, headers={"Authorization": f"Bearer {access}"})
        assert resp.status_code == 404
