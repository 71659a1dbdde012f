"""Application factory wiring Flask extensions, the token core and blueprints."""

from __future__ import annotations

from flask import Flask

from authcore.core.config import AuthSettings, BaseConfig, get_config
from authcore.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :raises ConfigError: If signing secrets are missing, too short or equal.
        Nothing is registered in that case, so no request can be served.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Fail fast before any route exists
    settings = AuthSettings.from_mapping(app.config)

    # Proxy headers if running behind a reverse proxy
    from authcore.core import proxy

    proxy.init_app(app)

    from authcore.core import extensions

    extensions.init_app(app)

    from authcore.services.auth import build_components

    app.extensions["authcore"] = build_components(settings)

    init_logging(app)

    from authcore.api import init_app as init_api

    init_api(app)

    from authcore.core import errors

    errors.init_app(app)

    from authcore import cli as app_cli

    app_cli.init_app(app)

    return app
