from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .catalog.controller import register as register_catalog
from .container import Container, build_container
from .cycles.controller import register as register_cycles
from .database.bootstrap import apply_schema, list_tables, seed_collections
from .enrollments.controller import register as register_enrollments
from .payments.controller import register as register_payments
from .reports.controller import register as register_reports

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    backend = getattr(settings, "STORE_BACKEND", "memory")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TIMEZONE_OFFSET_HOURS"] = getattr(settings, "TIMEZONE_OFFSET_HOURS", None)

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info(
        "settings=%s store=%s db=%s@%s:%s/%s",
        settings_module, backend,
        db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
    )

    if container is None:
        if backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        container = build_container(backend=backend, db_config=db_config)
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            seed_collections(container.store)

    register_catalog(app, container)
    register_cycles(app, container)
    register_enrollments(app, container)
    register_payments(app, container)
    register_reports(app, container)

    return app
