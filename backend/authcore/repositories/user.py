"""User repository for persistence and authentication utilities."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from authcore.models.user import User
from authcore.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    This repository focuses on safe lookup and password checks.
    It NEVER handles JWT or session creation, only DB-level user management.
    """

    model = User

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == email.lower().strip())
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when a user with the provided email exists.

        :param email: Email address to normalise and search.
        :type email: str
        :rtype: bool
        """
        stmt = select(User.id).where(User.email == email.lower().strip())
        return bool(self.session.execute(stmt).first())

    def get_active(self, user_id: str) -> User | None:
        """Fetch a user that has not been soft-deleted.

        :param user_id: Identifier carried in token claims.
        :type user_id: str
        :returns: User or ``None`` when missing or soft-deleted.
        :rtype: User | None
        """
        stmt = select(User).where(User.id == user_id, User.deleted_at.is_(None))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def authenticate(self, email: str, password: str) -> User | None:
        """Authenticate an active user by email and password.

        :param email: Email address to authenticate.
        :type email: str
        :param password: Raw password to verify.
        :type password: str
        :returns: Authenticated user or ``None`` when credentials fail.
        :rtype: User | None
        """
        user = self.get_by_email(email)
        if not user or not user.is_active or not user.verify_password(password):
            return None
        return user
