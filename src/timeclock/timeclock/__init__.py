"""Time clock package.

This package is organized by feature modules (directory, entries, reconciliation,
offline, ...) with a thin Flask controller layer and service/repository layers.
The `offline` modules run on the terminal; everything else runs on the server.
"""
from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.logging_utils import configure_logging
from .core.constants import DEFAULT_CLOCK_SKEW_THRESHOLD_MINUTES
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables

logger = logging.getLogger(__name__)


def create_app(container=None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    skew_threshold = float(getattr(settings, "CLOCK_SKEW_THRESHOLD_MINUTES", DEFAULT_CLOCK_SKEW_THRESHOLD_MINUTES))
    configure_logging(app.config["DEBUG"])

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
        )

        database_dir = Path(__file__).resolve().parents[3] / "database"
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=database_dir / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=database_dir / "seed.sql")
            logger.info("demo seed ready")

        from .container import build_container

        container = build_container(db_config=db_config, skew_threshold_minutes=skew_threshold)

    from .directory.controller import register as register_directory
    from .entries.controller import register as register_entries
    from .reconciliation.controller import register as register_reconciliation

    register_directory(app, container)
    register_entries(app, container)
    register_reconciliation(app, container)

    return app
