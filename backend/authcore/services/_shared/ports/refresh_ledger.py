from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from authcore.services._shared.dto import RequestMeta


class LedgerEntry(Protocol):
    """Read view of a single refresh-token ledger row."""

    user_id: str
    jti: str
    token_hash: str | None
    user_agent: str | None
    ip_addr: str | None
    expires_at: datetime
    is_revoked: bool
    replaced_by: str | None


class RefreshLedger(Protocol):
    """
    Persistent record of every issued refresh token.

    Implementations never commit; the caller's Unit of Work owns the transaction.
    """

    def insert(
        self,
        *,
        user_id: str,
        jti: str,
        token_hash: str,
        meta: RequestMeta,
        expires_at: datetime,
    ) -> LedgerEntry:
        """
        Create a new entry.

        :raises ConflictError: If ``jti`` already exists.
        """
        ...

    def find_by_jti_and_user(self, jti: str, user_id: str) -> LedgerEntry | None:
        """Lookup scoped to the owner; a foreign ``jti`` reads as absent."""
        ...

    def revoke_and_link(self, jti: str, successor_jti: str) -> bool:
        """
        Revoke ``jti`` and point it at ``successor_jti``.

        :returns: ``True`` only for the caller that moved the row from live to revoked.
        """
        ...

    def revoke_all_for_user(self, user_id: str) -> int:
        """:returns: Number of live entries revoked."""
        ...

    def list_for_user(
        self, user_id: str, *, include_revoked: bool = False
    ) -> Sequence[LedgerEntry]: ...
