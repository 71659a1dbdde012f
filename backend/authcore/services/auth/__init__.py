"""Token core: issuance, rotation and request authentication.

:class:`AuthComponents` wires every service around one token codec built
from :class:`~authcore.core.config.AuthSettings`. The application factory
stores it under ``app.extensions["authcore"]``.
"""

from __future__ import annotations

from dataclasses import dataclass

from authcore.core.config import AuthSettings
from authcore.infra.jwt.pyjwt_token_codec import JWTTokenCodec
from authcore.services._shared.ports import TokenProvider
from authcore.services.auth.authenticator import RequestAuthenticator, extract_bearer
from authcore.services.auth.dto import Identity, RequestMeta, TokenPairOut
from authcore.services.auth.issuance import TokenIssuanceService
from authcore.services.auth.rotation import TokenRotationService
from authcore.services.auth.service import AuthService


@dataclass(frozen=True, slots=True)
class AuthComponents:
    """
    Services sharing one configuration.

    :param settings: Resolved token configuration.
    :param tokens: Token codec.
    :param issuance: Initial pair minting.
    :param rotation: Refresh exchange.
    :param authenticator: Bearer access-token check.
    :param credentials: Register/login/profile flows.
    """

    settings: AuthSettings
    tokens: TokenProvider
    issuance: TokenIssuanceService
    rotation: TokenRotationService
    authenticator: RequestAuthenticator
    credentials: AuthService

    def issue(self, identity: Identity, meta: RequestMeta | None = None) -> TokenPairOut:
        return self.issuance.issue(identity, meta)

    def rotate(self, refresh_token: str, meta: RequestMeta | None = None) -> TokenPairOut:
        return self.rotation.rotate(refresh_token, meta)

    def authenticate(self, request) -> Identity:
        return self.authenticator.authenticate(request)


def build_components(settings: AuthSettings) -> AuthComponents:
    """Construct the token core for ``settings``."""
    tokens = JWTTokenCodec(settings)
    issuance = TokenIssuanceService(token_provider=tokens)
    return AuthComponents(
        settings=settings,
        tokens=tokens,
        issuance=issuance,
        rotation=TokenRotationService(
            token_provider=tokens,
            revoke_on_replay=settings.revoke_on_replay,
        ),
        authenticator=RequestAuthenticator(token_provider=tokens),
        credentials=AuthService(issuance=issuance),
    )


__all__ = [
    "AuthComponents",
    "AuthService",
    "RequestAuthenticator",
    "TokenIssuanceService",
    "TokenRotationService",
    "build_components",
    "extract_bearer",
]
