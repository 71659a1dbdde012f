"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP directly. They serve as stable contracts between
repositories, the token core, and application services.

Authentication failures form a closed taxonomy: every subclass of
:class:`AuthError` carries an :class:`AuthErrorKind` tag so callers branch on
the kind rather than on message text. The translation to HTTP responses
(RFC 7807) is handled by ``authcore/core/errors.py`` via
``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str, *fallbacks: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL includes the constraint name in the driver message; SQLite only
    reports ``table.column``, so extra needles can be supplied as fallbacks.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').
    fallbacks : str
        Additional substrings that identify the same violation.

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    needles = (constraint_name, *fallbacks)
    return any(needle.lower() in message for needle in needles)


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories or domain logic.
    - The API layer or BaseService will later translate them to APIError.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "RefreshToken").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class InvalidCredentialsError(ServiceError):
    """Raised by the credential collaborator when email/password do not match."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


# --------------------------------------------------------------------------- #
# Token core taxonomy
# --------------------------------------------------------------------------- #


class AuthErrorKind(Enum):
    """Closed set of authentication failure kinds."""

    NO_TOKEN = "no_token"
    INVALID_TOKEN = "invalid_token"
    NOT_FOUND = "not_found"
    REVOKED = "revoked"
    HASH_MISMATCH = "hash_mismatch"
    USER_NOT_FOUND = "user_not_found"
    INTERNAL = "internal"


# Kinds that must be indistinguishable to callers (oracle resistance)
SESSION_KINDS = frozenset(
    {
        AuthErrorKind.NOT_FOUND,
        AuthErrorKind.REVOKED,
        AuthErrorKind.HASH_MISMATCH,
        AuthErrorKind.USER_NOT_FOUND,
    }
)


class AuthError(ServiceError):
    """
    Base class for token-core failures.

    :cvar kind: Tag identifying the failure; subclasses override it.
    """

    kind: AuthErrorKind = AuthErrorKind.INVALID_TOKEN
    default_message = "Authentication failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class NoTokenError(AuthError):
    """No bearer credential was presented."""

    kind = AuthErrorKind.NO_TOKEN
    default_message = "Missing bearer token"


class InvalidTokenError(AuthError):
    """Signature invalid, token expired, or claims malformed."""

    kind = AuthErrorKind.INVALID_TOKEN
    default_message = "Invalid or expired token"


class TokenNotFoundError(AuthError):
    """The refresh token's ``jti`` has no ledger row for the claimed user."""

    kind = AuthErrorKind.NOT_FOUND
    default_message = "Refresh token not found"


class TokenRevokedError(AuthError):
    """The refresh token was already rotated or explicitly revoked (possible replay)."""

    kind = AuthErrorKind.REVOKED
    default_message = "Refresh token revoked"


class TokenHashMismatchError(AuthError):
    """The stored hash disagrees with the presented refresh token."""

    kind = AuthErrorKind.HASH_MISMATCH
    default_message = "Refresh token hash mismatch"


class UserNotFoundError(AuthError):
    """The identity behind a valid token no longer exists or is inactive."""

    kind = AuthErrorKind.USER_NOT_FOUND
    default_message = "User not found"


class TokenIssueError(AuthError):
    """Signing produced a token whose expiry cannot be read back."""

    kind = AuthErrorKind.INTERNAL
    default_message = "Token issuance failed"
