# authcore/services/auth/rotation.py
from __future__ import annotations

import logging

from authcore.core.security import hash_token, new_jti, tokens_match
from authcore.models.base import as_utc
from authcore.services._shared.base import BaseService, ServiceContext
from authcore.services._shared.errors import (
    AuthError,
    InvalidTokenError,
    TokenHashMismatchError,
    TokenNotFoundError,
    TokenRevokedError,
    UserNotFoundError,
)
from authcore.services._shared.ports import TokenProvider
from authcore.services.auth.dto import Identity, RefreshClaims, RequestMeta, TokenPairOut
from authcore.services.auth.issuance import refresh_expiry
from authcore.uow.base import UnitOfWork

logger = logging.getLogger(__name__)


class TokenRotationService(BaseService):
    """
    Single-use exchange of a live refresh token for a new pair.

    Two stages, never interleaved:

    1. Signature and claim verification, outside any transaction. A forged
       or expired token never reaches the ledger.
    2. Ledger checks, revoke-and-link of the old row and insert of the
       successor, inside one read-write Unit of Work.

    The revoke is a conditional update; when a concurrent rotation already
    consumed the row, this call fails with :class:`TokenRevokedError` and
    writes nothing.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        revoke_on_replay: bool = False,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        :param token_provider: Adapter for signing/verifying tokens.
        :param revoke_on_replay: Revoke every live refresh token of the user
            when a consumed or tampered token is presented.
        :param ctx: Optional request-scoped context.
        """
        super().__init__(ctx=ctx)
        self.tokens = token_provider
        self.revoke_on_replay = revoke_on_replay

    def rotate(self, refresh_token: str, meta: RequestMeta | None = None) -> TokenPairOut:
        """
        Rotate ``refresh_token``.

        :param refresh_token: Encoded refresh JWT presented by the client.
        :param meta: Request provenance stored with the successor row.
        :returns: New access/refresh pair.
        :raises InvalidTokenError: Bad signature, expired or malformed token.
        :raises TokenNotFoundError: No ledger row for ``(jti, user)``.
        :raises TokenRevokedError: Row already revoked (replay) or lost race.
        :raises TokenHashMismatchError: Stored hash differs from the token.
        :raises UserNotFoundError: Account missing or soft-deleted.
        """
        meta = meta or RequestMeta()
        try:
            claims = self.tokens.verify_refresh(refresh_token)
        except InvalidTokenError as exc:
            logger.warning("refresh.rejected", extra={"reason": exc.kind.value})
            raise

        try:
            with self.rw_uow() as uow:
                pair, successor = self._exchange(uow, claims, refresh_token, meta)
        except (TokenRevokedError, TokenHashMismatchError) as exc:
            self._log_rejection(claims, exc)
            if self.revoke_on_replay:
                self._revoke_all(claims.id)
            raise
        except AuthError as exc:
            self._log_rejection(claims, exc)
            raise

        logger.info(
            "refresh.rotated",
            extra={"user_id": claims.id, "jti": successor, "replaces": claims.jti},
        )
        return pair

    # ------------------------------------------------------------------ #
    # Ledger stage
    # ------------------------------------------------------------------ #

    def _exchange(
        self,
        uow: UnitOfWork,
        claims: RefreshClaims,
        refresh_token: str,
        meta: RequestMeta,
    ) -> tuple[TokenPairOut, str]:
        entry = uow.refresh_tokens.find_by_jti_and_user(claims.jti, claims.id)
        if entry is None:
            raise TokenNotFoundError()
        if entry.is_revoked:
            raise TokenRevokedError()
        if entry.token_hash and not tokens_match(entry.token_hash, refresh_token):
            raise TokenHashMismatchError()
        if as_utc(entry.expires_at) <= self.now_utc():
            raise InvalidTokenError("Refresh token expired")

        user = uow.users.get_active(claims.id)
        if user is None:
            raise UserNotFoundError()
        identity = Identity(id=user.id, email=user.email)

        successor = new_jti()
        refresh = self.tokens.sign_refresh(identity, successor)
        expires_at = refresh_expiry(self.tokens, refresh)

        if not uow.refresh_tokens.revoke_and_link(claims.jti, successor):
            # Another rotation consumed the row after our read
            raise TokenRevokedError()
        uow.refresh_tokens.insert(
            user_id=identity.id,
            jti=successor,
            token_hash=hash_token(refresh),
            meta=meta,
            expires_at=expires_at,
        )

        access = self.tokens.sign_access(identity)
        return TokenPairOut(access_token=access, refresh_token=refresh), successor

    # ------------------------------------------------------------------ #
    # Replay handling
    # ------------------------------------------------------------------ #

    def _revoke_all(self, user_id: str) -> None:
        with self.rw_uow() as uow:
            revoked = uow.refresh_tokens.revoke_all_for_user(user_id)
        logger.warning(
            "refresh.replay_revoked",
            extra={"user_id": user_id, "revoked": revoked},
        )

    @staticmethod
    def _log_rejection(claims: RefreshClaims, exc: AuthError) -> None:
        logger.warning(
            "refresh.rejected",
            extra={"user_id": claims.id, "jti": claims.jti, "reason": exc.kind.value},
        )
