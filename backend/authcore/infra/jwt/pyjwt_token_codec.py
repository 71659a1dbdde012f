# authcore/infra/jwt/pyjwt_token_codec.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import jwt

from authcore.core.config import AuthSettings
from authcore.services._shared.dto import Identity, RefreshClaims
from authcore.services._shared.errors import InvalidTokenError
from authcore.services._shared.ports import TokenProvider


@dataclass(frozen=True, slots=True)
class JWTTokenCodec(TokenProvider):
    """
    PyJWT adapter signing access and refresh tokens with separate HMAC keys.

    Payloads:

    * access: ``{id, email, iat, exp}``
    * refresh: ``{id, email, jti, iat, exp}``

    ``iat``/``exp`` are integer Unix seconds. A token is expired once
    ``now >= exp`` (plus the configured leeway).

    :param settings: Resolved token configuration.
    """

    settings: AuthSettings

    # ------------------------------ signing ---------------------------------

    def _encode(self, claims: dict[str, Any], *, secret: str, ttl_seconds: int) -> str:
        issued_at = int(datetime.now(UTC).timestamp())
        payload = {**claims, "iat": issued_at, "exp": issued_at + ttl_seconds}
        return jwt.encode(payload, secret, algorithm=self.settings.algorithm)

    def sign_access(self, identity: Identity) -> str:
        return self._encode(
            {"id": identity.id, "email": identity.email},
            secret=self.settings.access_secret,
            ttl_seconds=int(self.settings.access_ttl.total_seconds()),
        )

    def sign_refresh(self, identity: Identity, jti: str) -> str:
        return self._encode(
            {"id": identity.id, "email": identity.email, "jti": jti},
            secret=self.settings.refresh_secret,
            ttl_seconds=int(self.settings.refresh_ttl.total_seconds()),
        )

    # ----------------------------- verification -----------------------------

    def _decode(self, token: str, *, secret: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                secret,
                algorithms=[self.settings.algorithm],
                leeway=self.settings.leeway,
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidTokenError("Token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError() from exc

    @staticmethod
    def _claim(payload: dict[str, Any], name: str) -> str:
        value = payload.get(name)
        if not isinstance(value, str) or not value:
            raise InvalidTokenError(f"Token is missing the {name!r} claim")
        return value

    def verify_access(self, token: str) -> Identity:
        payload = self._decode(token, secret=self.settings.access_secret)
        return Identity(id=self._claim(payload, "id"), email=self._claim(payload, "email"))

    def verify_refresh(self, token: str) -> RefreshClaims:
        payload = self._decode(token, secret=self.settings.refresh_secret)
        return RefreshClaims(
            id=self._claim(payload, "id"),
            email=self._claim(payload, "email"),
            jti=self._claim(payload, "jti"),
        )

    def decode_expiry(self, token: str) -> datetime | None:
        """
        Read ``exp`` without verifying the signature.

        :returns: Expiry as an aware UTC datetime, or ``None`` when the claim is
            absent or the token cannot be decoded.
        """
        try:
            payload = jwt.decode(token, options={"verify_signature": False})
        except jwt.DecodeError:
            return None
        exp = payload.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, int | float):
            return None
        return datetime.fromtimestamp(int(exp), tz=UTC)
