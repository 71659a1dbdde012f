# authcore/services/auth/issuance.py
from __future__ import annotations

import logging
from datetime import datetime

from authcore.core.security import hash_token, new_jti
from authcore.services._shared.base import BaseService, ServiceContext
from authcore.services._shared.errors import TokenIssueError
from authcore.services._shared.ports import TokenProvider
from authcore.services.auth.dto import Identity, RequestMeta, TokenPairOut

logger = logging.getLogger(__name__)


def refresh_expiry(tokens: TokenProvider, refresh_token: str) -> datetime:
    """
    Read back the expiry of a refresh token this process just signed.

    :raises TokenIssueError: If the signed token carries no readable ``exp``.
    """
    expires_at = tokens.decode_expiry(refresh_token)
    if expires_at is None:
        raise TokenIssueError("Signed refresh token has no expiry")
    return expires_at


class TokenIssuanceService(BaseService):
    """
    Mint the initial access/refresh pair for a verified identity.

    The identity is trusted as given: credential checks happen before this
    service is called.
    """

    def __init__(self, *, token_provider: TokenProvider, ctx: ServiceContext | None = None) -> None:
        """
        :param token_provider: Adapter for signing tokens.
        :param ctx: Optional request-scoped context.
        """
        super().__init__(ctx=ctx)
        self.tokens = token_provider

    def issue(self, identity: Identity, meta: RequestMeta | None = None) -> TokenPairOut:
        """
        Sign a token pair and record the refresh token in the ledger.

        :param identity: Verified identity.
        :param meta: Request provenance stored with the ledger row.
        :returns: Access/Refresh token pair.
        :raises TokenIssueError: If the refresh expiry cannot be read back.
        :raises ConflictError: If the generated ``jti`` already exists.
        """
        meta = meta or RequestMeta()
        jti = new_jti()
        access = self.tokens.sign_access(identity)
        refresh = self.tokens.sign_refresh(identity, jti)
        expires_at = refresh_expiry(self.tokens, refresh)

        with self.rw_uow() as uow:
            uow.refresh_tokens.insert(
                user_id=identity.id,
                jti=jti,
                token_hash=hash_token(refresh),
                meta=meta,
                expires_at=expires_at,
            )

        logger.info("refresh.issued", extra={"user_id": identity.id, "jti": jti})
        return TokenPairOut(access_token=access, refresh_token=refresh)
