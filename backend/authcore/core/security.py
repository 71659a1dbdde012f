"""
Security helpers for refresh-token bookkeeping:
- Token identifiers (``jti``) from a CSPRNG-backed UUID4
- One-way SHA-256 digests of refresh tokens
- Constant-time digest comparison
"""

from __future__ import annotations

import hashlib
import hmac
import uuid


def new_jti() -> str:
    """Generate a unique token identifier."""
    return str(uuid.uuid4())


def hash_token(token: str) -> str:
    """Return the SHA-256 hex digest of a token string.

    The ledger stores this digest, never the token itself.
    """
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def tokens_match(stored_hash: str, token: str) -> bool:
    """Compare ``token`` against a stored digest in constant time."""
    return hmac.compare_digest(stored_hash, hash_token(token))
