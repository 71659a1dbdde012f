"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

from flask import Response, current_app, g, jsonify, request

from authcore.services.auth import AuthComponents
from authcore.services.auth.dto import Identity, RequestMeta

F = TypeVar("F", bound=Callable[..., Any])

# Matches the ledger column width
MAX_USER_AGENT_LENGTH = 512


def get_auth() -> AuthComponents:
    """Return the token core bound to the current application."""

    return cast(AuthComponents, current_app.extensions["authcore"])


def request_meta() -> RequestMeta:
    """Collect best-effort provenance for ledger rows.

    ``remote_addr`` already reflects ``X-Forwarded-For`` when ProxyFix is on.
    """

    user_agent = request.headers.get("User-Agent") or None
    if user_agent is not None:
        user_agent = user_agent[:MAX_USER_AGENT_LENGTH]
    return RequestMeta(user_agent=user_agent, ip=request.remote_addr or None)


def require_auth(func: F) -> F:
    """Ensure the request carries a valid bearer access token.

    The verified identity is stored on ``flask.g.identity``.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.identity = get_auth().authenticate(request)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_identity() -> Identity:
    """Return the identity set by :func:`require_auth`."""

    return cast(Identity, g.identity)


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
