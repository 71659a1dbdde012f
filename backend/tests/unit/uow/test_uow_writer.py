"""
Unit tests for SQLAlchemyUnitOfWork (writer), using factories.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from authcore.models import RefreshToken, User
from authcore.services._shared.dto import RequestMeta
from authcore.uow import SQLAlchemyUnitOfWork

from tests.factories.user import UserFactory


class TestSQLAlchemyUnitOfWorkWriter:
    def test_writer_uow_commits_on_success(self, session):
        """
        GIVEN a writer UoW
        WHEN we create a user via repo inside the context and leave without exception
        THEN the transaction is committed and the row is visible afterwards.
        """
        initial = session.query(User).count()

        with SQLAlchemyUnitOfWork() as uow:
            u = UserFactory.build()  # build = no persist
            uow.users.add(u)

        session.remove()
        assert session.query(User).count() == initial + 1

    def test_writer_uow_rolls_back_on_exception(self, session):
        """
        GIVEN a writer UoW
        WHEN an exception is raised inside the context
        THEN the transaction is rolled back and no rows are persisted.
        """
        initial = session.query(User).count()

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            u = UserFactory.build()
            uow.users.add(u)
            raise RuntimeError("boom")  # forces rollback

        assert session.query(User).count() == initial

    def test_repositories_share_one_transaction(self, session):
        """A failure after writes to both repositories discards both."""
        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            u = UserFactory.build()
            uow.users.add(u)
            uow.refresh_tokens.insert(
                user_id=u.id,
                jti="shared-txn-jti",
                token_hash="0" * 64,
                meta=RequestMeta(),
                expires_at=datetime.now(UTC) + timedelta(days=1),
            )
            raise RuntimeError("boom")

        assert session.query(User).count() == 0
        assert session.query(RefreshToken).count() == 0
