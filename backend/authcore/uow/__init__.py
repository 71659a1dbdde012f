"""Unit of Work abstractions and concrete implementations.

This package re-exports the SQLAlchemy-backed unit of work used throughout the
application, alongside the abstract contract that service layers depend on.
"""

from .base import UnitOfWork
from .sqlalchemy_uow import SQLAlchemyUnitOfWork

__all__ = [
    "UnitOfWork",
    "SQLAlchemyUnitOfWork",
]
