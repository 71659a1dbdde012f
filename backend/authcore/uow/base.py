"""
Abstract Unit of Work contracts.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from authcore.repositories.user import UserRepository
from authcore.services._shared.ports import RefreshLedger


class UnitOfWork(ABC):
    """
    Coordinates a transactional boundary for a use-case.

    Responsibilities:
    - Provide access to repositories bound to the same session/transaction.
    - Commit on success, rollback on error.
    """

    users: UserRepository
    refresh_tokens: RefreshLedger

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
