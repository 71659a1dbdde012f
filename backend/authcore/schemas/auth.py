"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class RegisterSchema(Schema):
    """Input payload for account registration."""

    name = fields.String(required=True, validate=validate.Length(min=1, max=120))
    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=6, max=100))


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=100))


class RefreshSchema(Schema):
    """Input payload for clients that cannot hold the refresh cookie."""

    refresh_token = fields.String(required=True, validate=validate.Length(min=10))


class TokenPairSchema(Schema):
    """Response payload carrying an access/refresh token pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.Constant("bearer", dump_only=True)


class UserSchema(Schema):
    """Public representation of an account."""

    id = fields.String(required=True)
    email = fields.Email(required=True)
    name = fields.String(allow_none=True)
    created_at = fields.DateTime(allow_none=True)


class AuthResultSchema(TokenPairSchema):
    """Response payload of register/login: the user plus its tokens."""

    user = fields.Nested(UserSchema, required=True)
