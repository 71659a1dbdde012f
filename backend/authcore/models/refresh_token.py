"""Refresh-token ledger row."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, UniqueConstraint, false
from sqlalchemy.orm import Mapped, mapped_column

from authcore.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class RefreshToken(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    One row per issued refresh token.

    The signed token proves authenticity; this row proves current validity.
    Rows are never deleted here: a rotated row stays behind, revoked and
    linked forward through ``replaced_by``, so replays can be detected.

    Fields
    ------
    user_id : str
        Owning user id.
    jti : str
        Unique identifier embedded in the token (``uq_refresh_tokens_jti``).
    token_hash : str | None
        SHA-256 hex digest of the token string; the raw token is never stored.
    user_agent, ip_addr : str | None
        Provenance captured at issuance; immutable afterwards.
    expires_at : datetime
        Absolute expiry, equal to the token's signed ``exp``.
    is_revoked : bool
        Flipped to ``True`` exactly once.
    replaced_by : str | None
        Successor ``jti``, set together with ``is_revoked`` on rotation.
    """

    __tablename__ = "refresh_tokens"

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False, index=True
    )
    jti: Mapped[str] = mapped_column(String(64), nullable=False)
    token_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
    ip_addr: Mapped[str | None] = mapped_column(String(64), nullable=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_revoked: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    replaced_by: Mapped[str | None] = mapped_column(String(64), nullable=True)

    __table_args__ = (UniqueConstraint("jti", name="uq_refresh_tokens_jti"),)
