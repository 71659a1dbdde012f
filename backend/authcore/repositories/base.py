"""Generic repository base for SQLAlchemy 2.x.

Repositories stay persistence-only:

- No business logic.
- No commit/rollback; services own transactions through a Unit of Work.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar, cast

from sqlalchemy import select
from sqlalchemy.orm import InstrumentedAttribute, Session

from authcore.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single aggregate.

    Subclasses MUST define:

    * ``model``: the SQLAlchemy mapped class.

    This class NEVER opens, commits or rolls back transactions.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """Initialise the repository with an optional SQLAlchemy session.

        When no explicit session is provided the repository falls back to the
        Flask-scoped session exposed by ``authcore.core.extensions``.

        :param session: Session shared across the Unit of Work scope.
        :type session: :class:`sqlalchemy.orm.Session` | None
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Return the active SQLAlchemy session.

        :returns: Active session bound to the current Unit of Work.
        :rtype: :class:`sqlalchemy.orm.Session`
        """
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def add(self, instance: E) -> E:
        """Stage a new entity for persistence and flush to materialize the PK.

        :param instance: New entity instance.
        :type instance: E
        :returns: The same instance after ``flush()``.
        :rtype: E
        """
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a single entity by primary key.

        :param entity_id: Primary-key value.
        :type entity_id: Any
        :returns: Entity or ``None``.
        :rtype: E | None
        :raises RuntimeError: If no PK attribute can be detected.
        """
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError("BaseRepository.get requires a detectable PK attribute.")
        result = self.session.execute(select(self.model).where(pk_attr == entity_id))
        return cast(E | None, result.scalars().first())

    def flush(self) -> None:
        """Flush pending changes to the database without committing."""
        self.session.flush()
