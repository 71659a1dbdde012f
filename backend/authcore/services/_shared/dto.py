# comments in English; reST docstrings strict
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Minimal trusted claims carried inside both token classes.

    :param id: Opaque user identifier.
    :type id: str
    :param email: User email.
    :type email: str
    """

    id: str
    email: str


@dataclass(frozen=True, slots=True)
class RefreshClaims:
    """
    Verified refresh-token claims.

    :param id: Opaque user identifier.
    :type id: str
    :param email: User email.
    :type email: str
    :param jti: Token identifier correlating the token with its ledger row.
    :type jti: str
    """

    id: str
    email: str
    jti: str

    @property
    def identity(self) -> Identity:
        return Identity(id=self.id, email=self.email)


@dataclass(frozen=True, slots=True)
class RequestMeta:
    """
    Best-effort request provenance, never validated.

    :param user_agent: Client ``User-Agent`` header.
    :type user_agent: str | None
    :param ip: Client address.
    :type ip: str | None
    """

    user_agent: str | None = None
    ip: str | None = None
