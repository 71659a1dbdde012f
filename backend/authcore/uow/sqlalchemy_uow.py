"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from authcore.core.extensions import db
from authcore.repositories import RefreshTokenRepository, UserRepository
from authcore.uow.base import UnitOfWork


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.refresh_tokens = RefreshTokenRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    SQLAlchemy-backed UoW using the Flask-scoped session.

    The same session is shared across all repositories for a consistent transaction.
    """

    def __init__(self) -> None:
        """Initialise the Unit of Work with a shared SQLAlchemy session.

        All repositories receive the same session instance so that they operate
        within the identical transactional context.
        """
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # No-op: the session is lazily started on the first statement.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
