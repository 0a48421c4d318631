"""
Gateway application factory
"""
import os
from typing import Any, Iterable, Optional

from flask import Flask

from gateway.config import config
from gateway.middleware import PlaceholderDump
from placeholder_dump.utils.log_utils import get_logger


def create_app(config_name: Optional[str] = None, emitters: Optional[Iterable[Any]] = None, **overrides) -> Flask:
    """Create the gateway app with the placeholder emitters installed.

    ``overrides`` are applied on top of the selected config class, which
    lets tests point ``PLACEHOLDER_DUMP`` at temporary files.
    """
    env = (config_name or os.getenv("FLASK_ENV", "development")).lower()
    if env not in config:
        env = "default"

    app = Flask(__name__)
    app.config.from_object(config[env])
    app.config.update(overrides)

    get_logger("gateway", app.config.get("LOG_LEVEL"))

    PlaceholderDump(app, emitters=emitters)

    from gateway.api.health import bp as health_bp
    app.register_blueprint(health_bp, url_prefix='/api/health')

    return app
