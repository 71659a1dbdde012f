"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, Response, request
from marshmallow import ValidationError

from authcore.api.deps import get_auth, json_response, request_meta, timing
from authcore.core.errors import APIError
from authcore.schemas import (
    AuthResultSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
)
from authcore.services.auth.dto import AuthResultOut, LoginIn, RegisterIn

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
auth_result_schema = AuthResultSchema()
token_schema = TokenPairSchema()


def _attach_refresh_cookie(response: Response, refresh_token: str) -> Response:
    """Set the refresh cookie for browser clients (requests with ``Origin``)."""

    if not request.headers.get("Origin"):
        return response
    settings = get_auth().settings
    response.set_cookie(
        settings.refresh_cookie_name,
        refresh_token,
        max_age=int(settings.refresh_ttl.total_seconds()),
        path="/",
        secure=True,
        httponly=True,
        samesite="None",
    )
    return response


def _auth_result_response(result: AuthResultOut, *, status: int) -> Response:
    body = {
        "data": auth_result_schema.dump(
            {
                "user": result.user,
                "access_token": result.tokens.access_token,
                "refresh_token": result.tokens.refresh_token,
            }
        )
    }
    return _attach_refresh_cookie(json_response(body, status=status), result.tokens.refresh_token)


@bp.post("/register")
@timing
def register():
    """Create an account and return it together with its first token pair."""

    payload = register_schema.load(request.get_json(silent=True) or {})
    result = get_auth().credentials.register(
        RegisterIn(email=payload["email"], password=payload["password"], name=payload["name"]),
        request_meta(),
    )
    return _auth_result_response(result, status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue a token pair."""

    data = login_schema.load(request.get_json(silent=True) or {})
    result = get_auth().credentials.login(
        LoginIn(email=data["email"], password=data["password"]),
        request_meta(),
    )
    return _auth_result_response(result, status=200)


@bp.post("/refresh")
@timing
def refresh():
    """Exchange a refresh token (cookie first, then JSON body) for a new pair."""

    auth = get_auth()
    token = request.cookies.get(auth.settings.refresh_cookie_name)
    if not token:
        try:
            token = refresh_schema.load(request.get_json(silent=True) or {})["refresh_token"]
        except ValidationError as err:
            raise APIError(
                "Missing refresh token",
                status_code=400,
                code="missing_refresh_token",
                details={"errors": err.messages},
            ) from err

    pair = auth.rotate(token, request_meta())
    response = json_response({"data": token_schema.dump(pair)})
    return _attach_refresh_cookie(response, pair.refresh_token)
