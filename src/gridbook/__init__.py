"""Gridbook application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable, Optional

from flask import Flask

from .config import BaseConfig, DevConfig, TestConfig
from .context import EXTENSION_KEY, create_app_context
from .errors import register_error_handlers
from .logging_config import setup_logging
from .services.mailer import Mailer

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
    """Yield blueprint import paths registered on the API."""

    yield "gridbook.blueprints.auth"
    yield "gridbook.blueprints.habits"
    yield "gridbook.blueprints.formulas"
    yield "gridbook.blueprints.finance"
    yield "gridbook.blueprints.sleep"
    yield "gridbook.blueprints.journal"
    yield "gridbook.blueprints.mistakes"
    yield "gridbook.blueprints.todos"


def create_app(
    config_name: str | None = None,
    *,
    config: Optional[BaseConfig] = None,
    mailer: Optional[Mailer] = None,
) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    app.url_map.strict_slashes = False
    config_obj = config or _resolve_config(config_name)()
    app.config.from_object(config_obj)
    app.config["GRIDBOOK_CONFIG"] = config_obj

    setup_logging(config_obj)
    app.extensions[EXTENSION_KEY] = create_app_context(config_obj, mailer=mailer)

    register_error_handlers(app)
    _register_blueprints(app)

    from . import cli

    cli.init_app(app)

    if config_obj.ENABLE_SCHEDULER and not config_obj.TESTING:
        from .scheduler import GridbookScheduler

        scheduler = GridbookScheduler(app.extensions[EXTENSION_KEY])
        scheduler.start()
        app.extensions["gridbook.scheduler"] = scheduler

    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "create_app"]
