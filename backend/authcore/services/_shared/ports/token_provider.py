from __future__ import annotations

from datetime import datetime
from typing import Protocol

from authcore.services._shared.dto import Identity, RefreshClaims


class TokenProvider(Protocol):
    """
    Port for signing and verifying access/refresh tokens.

    Access and refresh tokens are signed with distinct secrets, so a token of
    one class never verifies as the other.
    """

    def sign_access(self, identity: Identity) -> str: ...

    def sign_refresh(self, identity: Identity, jti: str) -> str: ...

    def verify_access(self, token: str) -> Identity:
        """:raises InvalidTokenError: bad signature, expired, or missing claims."""
        ...

    def verify_refresh(self, token: str) -> RefreshClaims:
        """:raises InvalidTokenError: bad signature, expired, or missing claims."""
        ...

    def decode_expiry(self, token: str) -> datetime | None:
        """
        Read ``exp`` without verifying the signature.

        Only meant for a token this process has just signed; never for trust decisions.
        """
        ...
