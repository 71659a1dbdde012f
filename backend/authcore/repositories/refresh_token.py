"""Refresh-token ledger repository (SQLAlchemy adapter of the ledger port)."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import false, select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError

from authcore.models.refresh_token import RefreshToken
from authcore.repositories.base import BaseRepository
from authcore.services._shared.dto import RequestMeta
from authcore.services._shared.errors import ConflictError, violates


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only repository for :class:`RefreshToken` rows.

    Every mutation is row-scoped by ``jti`` or ``user_id``. Revocations are
    conditional ``UPDATE`` statements so that concurrent callers are
    linearized by the database, not by application locks.

    Bulk updates run with ``synchronize_session=False``; rows already loaded
    in the session are refreshed when the Unit of Work commits.
    """

    model = RefreshToken

    def insert(
        self,
        *,
        user_id: str,
        jti: str,
        token_hash: str,
        meta: RequestMeta,
        expires_at: datetime,
    ) -> RefreshToken:
        """Create a ledger entry and flush it.

        :param user_id: Owner identifier.
        :type user_id: str
        :param jti: Token identifier embedded in the refresh token.
        :type jti: str
        :param token_hash: SHA-256 hex digest of the refresh token string.
        :type token_hash: str
        :param meta: Request provenance captured at issuance.
        :type meta: RequestMeta
        :param expires_at: Absolute expiry, equal to the token's ``exp``.
        :type expires_at: datetime
        :returns: The persisted row.
        :rtype: RefreshToken
        :raises ConflictError: If ``jti`` is already present.
        """
        row = RefreshToken(
            user_id=user_id,
            jti=jti,
            token_hash=token_hash,
            user_agent=meta.user_agent,
            ip_addr=meta.ip,
            expires_at=expires_at,
            is_revoked=False,
        )
        try:
            return self.add(row)
        except IntegrityError as exc:
            if violates(exc, "uq_refresh_tokens_jti", "refresh_tokens.jti"):
                raise ConflictError("RefreshToken", f"jti already exists: {jti}") from exc
            raise

    def find_by_jti_and_user(self, jti: str, user_id: str) -> RefreshToken | None:
        """Return the row for ``jti`` owned by ``user_id``.

        A ``jti`` that belongs to another user reads as ``None``.
        """
        stmt = select(RefreshToken).where(
            RefreshToken.jti == jti,
            RefreshToken.user_id == user_id,
        )
        return cast(RefreshToken | None, self.session.execute(stmt).scalars().first())

    def revoke_and_link(self, jti: str, successor_jti: str) -> bool:
        """Revoke a live row and link it to its successor.

        :returns: ``True`` when this call performed the transition, ``False``
            when the row was missing or already revoked.
        :rtype: bool
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.jti == jti, RefreshToken.is_revoked == false())
            .values(is_revoked=True, replaced_by=successor_jti)
            .execution_options(synchronize_session=False)
        )
        result = cast(CursorResult, self.session.execute(stmt))
        return result.rowcount == 1

    def revoke_all_for_user(self, user_id: str) -> int:
        """Revoke every live row of a user.

        :returns: Number of rows transitioned to revoked.
        :rtype: int
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.is_revoked == false())
            .values(is_revoked=True)
            .execution_options(synchronize_session=False)
        )
        result = cast(CursorResult, self.session.execute(stmt))
        return int(result.rowcount or 0)

    def list_for_user(self, user_id: str, *, include_revoked: bool = False) -> list[RefreshToken]:
        """List a user's ledger rows in issuance order."""
        stmt = select(RefreshToken).where(RefreshToken.user_id == user_id)
        if not include_revoked:
            stmt = stmt.where(RefreshToken.is_revoked == false())
        stmt = stmt.order_by(RefreshToken.id.asc())
        return list(self.session.execute(stmt).scalars().all())
