"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from authgate.core.config import BaseConfig, get_config
from authgate.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    Raises
    ------
    RuntimeError
        If no signing secret is configured outside testing.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    if not app.config.get("JWT_SECRET_KEY") and not app.config.get("TESTING"):
        raise RuntimeError("SIGNING_SECRET must be set to sign access and refresh tokens")

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from authgate.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from authgate.core import cors

    cors.init_app(app)

    from authgate.api import init_app as init_api

    init_api(app)

    from authgate.core import errors

    errors.init_app(app)

    from authgate import cli as app_cli

    app_cli.init_app(app)

    return app
