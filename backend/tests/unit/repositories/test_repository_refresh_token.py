"""Unit tests for RefreshTokenRepository (the refresh ledger)."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from authcore.models import RefreshToken
from authcore.repositories.refresh_token import RefreshTokenRepository
from authcore.services._shared.dto import RequestMeta
from authcore.services._shared.errors import ConflictError

from tests.factories.refresh_token import RefreshTokenFactory
from tests.factories.user import UserFactory


class TestRefreshTokenRepository:
    """Ledger persistence and conditional revocation."""

    @pytest.fixture()
    def repo(self, session):
        return RefreshTokenRepository()

    def test_insert_stores_provenance(self, repo, session):
        user = UserFactory()
        expires = datetime.now(UTC) + timedelta(days=30)

        row = repo.insert(
            user_id=user.id,
            jti="jti-insert",
            token_hash="f" * 64,
            meta=RequestMeta(user_agent="pytest-agent", ip="10.0.0.1"),
            expires_at=expires,
        )
        session.commit()

        assert row.id is not None
        assert row.is_revoked is False
        assert row.replaced_by is None
        assert row.user_agent == "pytest-agent"
        assert row.ip_addr == "10.0.0.1"

    def test_insert_duplicate_jti_raises_conflict(self, repo, session):
        existing = RefreshTokenFactory()

        with pytest.raises(ConflictError):
            repo.insert(
                user_id=existing.user_id,
                jti=existing.jti,
                token_hash="0" * 64,
                meta=RequestMeta(),
                expires_at=datetime.now(UTC) + timedelta(days=1),
            )
        session.rollback()

    def test_find_is_scoped_to_user(self, repo):
        row = RefreshTokenFactory()
        other = UserFactory()

        assert repo.find_by_jti_and_user(row.jti, row.user_id).id == row.id
        assert repo.find_by_jti_and_user(row.jti, other.id) is None
        assert repo.find_by_jti_and_user("missing", row.user_id) is None

    def test_revoke_and_link_is_single_shot(self, repo, session):
        row = RefreshTokenFactory()

        assert repo.revoke_and_link(row.jti, "successor-1") is True
        assert repo.revoke_and_link(row.jti, "successor-2") is False
        session.commit()

        session.refresh(row)
        assert row.is_revoked is True
        assert row.replaced_by == "successor-1"

    def test_revoke_and_link_unknown_jti(self, repo):
        assert repo.revoke_and_link("nope", "successor") is False

    def test_revoke_all_for_user_counts_live_rows(self, repo, session):
        user = UserFactory()
        RefreshTokenFactory.create_batch(2, user=user)
        RefreshTokenFactory(user=user, is_revoked=True)
        untouched = RefreshTokenFactory()

        assert repo.revoke_all_for_user(user.id) == 2
        assert repo.revoke_all_for_user(user.id) == 0
        session.commit()

        live = session.query(RefreshToken).filter_by(is_revoked=False).all()
        assert [r.jti for r in live] == [untouched.jti]

    def test_list_for_user(self, repo):
        user = UserFactory()
        first = RefreshTokenFactory(user=user)
        revoked = RefreshTokenFactory(user=user, is_revoked=True)
        RefreshTokenFactory()

        assert [r.jti for r in repo.list_for_user(user.id)] == [first.jti]
        assert [r.jti for r in repo.list_for_user(user.id, include_revoked=True)] == [
            first.jti,
            revoked.jti,
        ]
