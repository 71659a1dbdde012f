"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    AuthResultSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
    UserSchema,
)

__all__ = [
    "AuthResultSchema",
    "LoginSchema",
    "RefreshSchema",
    "RegisterSchema",
    "TokenPairSchema",
    "UserSchema",
]
