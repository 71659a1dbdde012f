# authcore/services/_shared/base.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from authcore.core import errors as api_errors
from authcore.services._shared.errors import (
    SESSION_KINDS,
    AuthError,
    AuthErrorKind,
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    ServiceError,
)
from authcore.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

# Single opaque message for every ledger-state failure (no existence oracle)
INVALID_SESSION_MESSAGE = "Invalid or expired session. Please sign in again."


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data (auth, request ids, etc.).

    :param actor_id: Authenticated user identifier.
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: str | None = None
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide a helper to run read-write units of work.
    * Centralize error translation.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    - Every unit of work re-reads current database state; nothing is cached
      across requests.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        """
        Initialize the base service.

        :param ctx: Optional request-scoped context.
        :type ctx: ServiceContext | None
        """
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    @staticmethod
    def now_utc() -> datetime:
        return datetime.now(UTC)

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, AuthError):
            if exc.kind is AuthErrorKind.NO_TOKEN:
                # → 401, client should prompt for sign-in
                return api_errors.Unauthorized(str(exc), code="missing_token")
            if exc.kind is AuthErrorKind.INVALID_TOKEN:
                # → 401, client may try a refresh
                return api_errors.Unauthorized("Invalid or expired token", code="invalid_token")
            if exc.kind in SESSION_KINDS:
                return api_errors.Unauthorized(INVALID_SESSION_MESSAGE, code="invalid_session")
            # INTERNAL → 500
            return api_errors.APIError(
                message="Unable to issue tokens",
                status_code=500,
                code="internal_server_error",
            )

        if isinstance(exc, InvalidCredentialsError):
            return api_errors.Unauthorized(str(exc), code="invalid_credentials")

        if isinstance(exc, NotFoundError):
            # → 404 Not Found
            return api_errors.NotFound(str(exc))

        if isinstance(exc, ConflictError):
            # → 409 Conflict
            return api_errors.Conflict(str(exc))

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(
                message=str(exc),
                status_code=400,
                code="bad_request",
            )

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
