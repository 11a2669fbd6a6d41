"""Stockfolio application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable

from flask import Flask

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestConfig
from .errors import register_error_handlers
from .logging_config import setup_logging

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    yield "stockfolio.blueprints.users"
    yield "stockfolio.blueprints.portfolios"
    yield "stockfolio.blueprints.stocks"
    yield "stockfolio.blueprints.friends"


def create_app(config_name: str | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_obj = _resolve_config(config_name)()
    app.config.from_object(config_obj)
    app.config["STOCKFOLIO_CONFIG"] = config_obj
    app.json.sort_keys = False

    logger = setup_logging(config_obj)

    _register_blueprints(app)
    register_error_handlers(app)

    from .extensions import init_db

    init_db(app)
    _cli.init_app(app)

    logger.info("Application created", extra={"config": type(config_obj).__name__})
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        app.register_blueprint(getattr(module, "bp"))


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "create_app"]
