"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from authcore.api.deps import get_auth, json_response, timing
from authcore.core.extensions import db

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return liveness, database reachability and token-core settings."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        db.session.rollback()
        db_status = "fail"
    settings = get_auth().settings
    payload = {
        "status": "ok" if db_status == "ok" else "degraded",
        "db": db_status,
        "auth": {
            "algorithm": settings.algorithm,
            "access_ttl_seconds": int(settings.access_ttl.total_seconds()),
            "refresh_ttl_seconds": int(settings.refresh_ttl.total_seconds()),
        },
        "version": current_app.config.get("APP_VERSION", "dev"),
    }
    return json_response(payload, status=200 if db_status == "ok" else 503)
