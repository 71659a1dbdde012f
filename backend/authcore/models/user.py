"""User model backing the credential and identity collaborators."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates
from werkzeug.security import check_password_hash, generate_password_hash

from authcore.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin


class User(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Account identity referenced by token claims.

    The token core only reads ``id`` and ``email``; everything else belongs to
    the registration/login flow.

    Fields
    ------
    email : str
        Login email. Stored normalized (lowercase, trimmed).
    password_hash : str
        Hashed password (write-only setter via ``password``).
    name : str | None
        Optional display name.
    deleted_at : datetime | None
        Soft-delete marker. Soft-deleted users cannot refresh sessions.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(254), nullable=False)
    name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        """
        Hash and set the password.

        :param raw: Plain text password to hash.
        :type raw: str
        """
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash.

        :param raw: Plain text password candidate.
        :type raw: str
        :returns: ``True`` if it matches; otherwise ``False``.
        :rtype: bool
        """
        if not self.password_hash:
            return False
        return bool(check_password_hash(self.password_hash, raw))

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v
