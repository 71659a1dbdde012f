# authcore/services/auth/authenticator.py
from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from authcore.services._shared.errors import NoTokenError
from authcore.services._shared.ports import TokenProvider
from authcore.services.auth.dto import Identity

BEARER_SCHEME = "bearer"


class SupportsHeaders(Protocol):
    """Anything exposing request headers (Flask/Werkzeug requests included)."""

    @property
    def headers(self) -> Mapping[str, str]: ...


def extract_bearer(header: str | None) -> str:
    """
    Return the token of an ``Authorization: Bearer <token>`` header.

    The scheme is matched case-insensitively and the header must hold exactly
    a scheme and a token separated by whitespace.

    :raises NoTokenError: If the header is absent or malformed.
    """
    if not header or not header.strip():
        raise NoTokenError()
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME:
        raise NoTokenError("Malformed Authorization header")
    return parts[1]


class RequestAuthenticator:
    """
    Turn a bearer access token into a trusted :class:`Identity`.

    Access tokens are stateless: there is no ledger lookup here, so an
    access token stays valid until it expires.
    """

    def __init__(self, *, token_provider: TokenProvider) -> None:
        self.tokens = token_provider

    def authenticate(self, request: SupportsHeaders) -> Identity:
        """
        :raises NoTokenError: No usable bearer credential.
        :raises InvalidTokenError: Signature invalid, expired, or claims missing.
        """
        return self.authenticate_header(request.headers.get("Authorization"))

    def authenticate_header(self, value: str | None) -> Identity:
        return self.tokens.verify_access(extract_bearer(value))
