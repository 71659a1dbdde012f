"""WSGI proxy middleware configuration helper."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Apply :class:`werkzeug.middleware.proxy_fix.ProxyFix` when enabled.

    Parameters
    ----------
    app: flask.Flask
        Application whose WSGI pipeline should respect upstream proxy headers.

    Notes
    -----
    Controlled by ``USE_PROXYFIX`` (defaults to ``True``) and
    ``PROXY_HOPS`` (defaults to ``1``). The refresh ledger records
    ``request.remote_addr`` as provenance, which is the first trusted
    ``X-Forwarded-For`` entry once this middleware is installed.
    """
    if app.config.get("USE_PROXYFIX", True):
        hops = int(app.config.get("PROXY_HOPS", 1))
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops)
