# authcore/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from authcore.services._shared.dto import Identity, RefreshClaims, RequestMeta

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param email: User email.
    :type email: str
    :param password: Raw password (hashed by the model).
    :type password: str
    :param name: Display name.
    :type name: str | None
    """

    email: str
    password: str
    name: str | None = None


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email (normalized).
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    refresh_token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class UserOut:
    """Public view of an account."""

    id: str
    email: str
    name: str | None
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class AuthResultOut:
    """
    Output of a credential flow (register/login).

    :param user: Authenticated account.
    :type user: UserOut
    :param tokens: Freshly issued token pair.
    :type tokens: TokenPairOut
    """

    user: UserOut
    tokens: TokenPairOut


__all__ = [
    "AuthResultOut",
    "Identity",
    "LoginIn",
    "RefreshClaims",
    "RefreshIn",
    "RegisterIn",
    "RequestMeta",
    "TokenPairOut",
    "UserOut",
]
