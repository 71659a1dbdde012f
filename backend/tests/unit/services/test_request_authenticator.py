"""Unit tests for bearer extraction and RequestAuthenticator."""

from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace

import pytest
from authcore.core.config import AuthSettings
from authcore.infra.jwt.pyjwt_token_codec import JWTTokenCodec
from authcore.services._shared.errors import AuthErrorKind, InvalidTokenError, NoTokenError
from authcore.services.auth import RequestAuthenticator, extract_bearer
from authcore.services.auth.dto import Identity
from freezegun import freeze_time

from tests.helpers.utils import not_raises

IDENTITY = Identity(id="u1", email="a@b.com")


@pytest.fixture()
def codec():
    return JWTTokenCodec(
        AuthSettings(
            access_secret="authenticator-access-secret-0123456789",
            refresh_secret="authenticator-refresh-secret-0123456789",
            access_ttl=timedelta(minutes=15),
        )
    )


@pytest.fixture()
def authenticator(codec):
    return RequestAuthenticator(token_provider=codec)


def _request(headers):
    return SimpleNamespace(headers=headers)


class TestExtractBearer:
    @pytest.mark.parametrize("header", ["Bearer abc", "bearer abc", "BEARER abc", "  Bearer   abc  "])
    def test_accepts_case_insensitive_scheme(self, header):
        assert extract_bearer(header) == "abc"

    @pytest.mark.parametrize("header", [None, "", "   "])
    def test_missing_header(self, header):
        with pytest.raises(NoTokenError) as excinfo:
            extract_bearer(header)
        assert excinfo.value.kind is AuthErrorKind.NO_TOKEN

    @pytest.mark.parametrize("header", ["Bearer", "Basic abc", "Bearer a b", "Token abc"])
    def test_malformed_header(self, header):
        with pytest.raises(NoTokenError, match="Malformed"):
            extract_bearer(header)


class TestRequestAuthenticator:
    def test_valid_token(self, authenticator, codec):
        token = codec.sign_access(IDENTITY)
        with not_raises(InvalidTokenError):
            identity = authenticator.authenticate(_request({"Authorization": f"Bearer {token}"}))
        assert identity == IDENTITY

    def test_missing_header(self, authenticator):
        with pytest.raises(NoTokenError):
            authenticator.authenticate(_request({}))

    def test_refresh_token_is_not_an_access_token(self, authenticator, codec):
        token = codec.sign_refresh(IDENTITY, "jti")
        with pytest.raises(InvalidTokenError):
            authenticator.authenticate_header(f"Bearer {token}")

    def test_expired_token(self, authenticator, codec):
        with freeze_time("2024-01-01 00:00:00"):
            token = codec.sign_access(IDENTITY)
        with freeze_time("2024-01-01 00:20:00"), pytest.raises(InvalidTokenError):
            authenticator.authenticate_header(f"Bearer {token}")

    def test_stateless_no_database_needed(self, authenticator, codec):
        """Access tokens are verified without any ledger lookup."""
        token = codec.sign_access(Identity(id="ghost", email="ghost@b.com"))
        assert authenticator.authenticate_header(f"Bearer {token}").id == "ghost"
