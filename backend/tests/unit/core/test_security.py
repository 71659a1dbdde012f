"""Tests for jti generation and refresh-token digests."""

from __future__ import annotations

import hashlib
import uuid

from authcore.core.security import hash_token, new_jti, tokens_match


def test_new_jti_is_unique_uuid():
    first, second = new_jti(), new_jti()
    assert first != second
    assert str(uuid.UUID(first)) == first


def test_hash_token_is_sha256_hex():
    digest = hash_token("abc")
    assert digest == hashlib.sha256(b"abc").hexdigest()
    assert len(digest) == 64


def test_tokens_match():
    stored = hash_token("token-value")
    assert tokens_match(stored, "token-value") is True
    assert tokens_match(stored, "token-valuE") is False
