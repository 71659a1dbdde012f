# authcore/services/auth/service.py
from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from authcore.models.user import User
from authcore.services._shared.base import BaseService, ServiceContext
from authcore.services._shared.errors import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    violates,
)
from authcore.services.auth.dto import (
    AuthResultOut,
    Identity,
    LoginIn,
    RegisterIn,
    RequestMeta,
    UserOut,
)
from authcore.services.auth.issuance import TokenIssuanceService


class AuthService(BaseService):
    """
    Credential flows (register / login / profile).

    Passwords are checked here; token minting is delegated to
    :class:`TokenIssuanceService`, which trusts the identity it receives.
    """

    def __init__(
        self,
        *,
        issuance: TokenIssuanceService,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        :param issuance: Service minting the initial token pair.
        :param ctx: Optional request-scoped context.
        """
        super().__init__(ctx=ctx)
        self.issuance = issuance

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn, meta: RequestMeta | None = None) -> AuthResultOut:
        """
        Create an account and issue its first token pair.

        :param dto: Registration input.
        :param meta: Request provenance for the ledger row.
        :returns: Created user and tokens.
        :raises ConflictError: If the email is already registered.
        """
        try:
            with self.rw_uow() as uow:
                if uow.users.exists_by_email(dto.email):
                    raise ConflictError("User", "email already registered")
                user = User(email=dto.email, name=dto.name)
                user.password = dto.password
                uow.users.add(user)
                out = self._to_user_out(user)
        except IntegrityError as exc:
            if violates(exc, "uq_users_email", "users.email"):
                raise ConflictError("User", "email already registered") from exc
            raise

        tokens = self.issuance.issue(Identity(id=out.id, email=out.email), meta)
        return AuthResultOut(user=out, tokens=tokens)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn, meta: RequestMeta | None = None) -> AuthResultOut:
        """
        Authenticate credentials and issue a fresh token pair.

        :param dto: Login input.
        :param meta: Request provenance for the ledger row.
        :raises InvalidCredentialsError: If credentials are invalid.
        """
        with self.rw_uow() as uow:
            user = uow.users.authenticate(dto.email, dto.password)
            if user is None:
                raise InvalidCredentialsError()
            out = self._to_user_out(user)

        tokens = self.issuance.issue(Identity(id=out.id, email=out.email), meta)
        return AuthResultOut(user=out, tokens=tokens)

    # ------------------------------------------------------------------ #
    # Profile
    # ------------------------------------------------------------------ #

    def profile(self, user_id: str) -> UserOut:
        """
        Return the account behind an authenticated identity.

        :raises NotFoundError: If the user no longer exists.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_active(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return self._to_user_out(user)

    @staticmethod
    def _to_user_out(user: User) -> UserOut:
        return UserOut(id=user.id, email=user.email, name=user.name, created_at=user.created_at)
