"""User endpoints."""

from __future__ import annotations

from flask import Blueprint

from authcore.api.deps import current_identity, get_auth, json_response, require_auth, timing
from authcore.schemas import UserSchema

bp = Blueprint("users", __name__, url_prefix="/users")

user_schema = UserSchema()


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the profile of the authenticated user."""

    user = get_auth().credentials.profile(current_identity().id)
    return json_response({"data": {"user": user_schema.dump(user)}})
