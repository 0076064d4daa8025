import logging
import os
from typing import Any

from flask import Flask
from sqlalchemy.pool import StaticPool

from .config import ENV_DIAGNOSTICS, default_sqlite_uri
from .extensions import db
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def create_app(config: dict[str, Any] | None = None) -> Flask:
    app = Flask(__name__)
    os.makedirs(app.instance_path, exist_ok=True)

    _load_base_config(app, config)
    _configure_sqlite_engine_options(app)

    db.init_app(app)

    from .blueprints.api import api_bp

    app.register_blueprint(api_bp)
    from . import models  # noqa: F401  # ensure models registered before create_all

    configure_logging(app)

    from .management import register_commands

    register_commands(app)

    with app.app_context():
        db.create_all()
        _run_optional_seed(app)

    return app


def _load_base_config(app: Flask, config: dict[str, Any] | None) -> None:
    app.config.from_object("stockledger.config.Config")
    if config:
        app.config.update(config)
    app.config["ENV_DIAGNOSTICS"] = ENV_DIAGNOSTICS
    for warning in ENV_DIAGNOSTICS.get("warnings", ()):
        logger.warning("Environment configuration warning: %s", warning)

    if config and "DATABASE_URL" in config:
        app.config["SQLALCHEMY_DATABASE_URI"] = config["DATABASE_URL"]

    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        logger.warning("No DATABASE_URL configured; using the local SQLite file")
        app.config["SQLALCHEMY_DATABASE_URI"] = default_sqlite_uri()


def _configure_sqlite_engine_options(app: Flask) -> None:
    """SQLite rejects server pool arguments; in-memory databases need one shared connection."""
    uri = app.config.get("SQLALCHEMY_DATABASE_URI", "")
    if not uri.startswith("sqlite"):
        return
    opts = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS", {}) or {})
    opts.pop("pool_size", None)
    opts.pop("max_overflow", None)
    if uri == "sqlite:///:memory:":
        opts["poolclass"] = StaticPool
        opts["connect_args"] = {"check_same_thread": False}
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = opts


def _run_optional_seed(app: Flask) -> None:
    if not app.config.get("STOCK_AUTO_SEED"):
        return
    from .seeders import seed_initial_stock

    created = seed_initial_stock()
    if created:
        logger.info("Seeded %s demonstration stock items", created)
