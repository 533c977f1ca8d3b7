from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .classyears.controller import register as register_classyears
from .common.logging_config import configure_logging
from .container import Container, build_container
from .core.constants import DEFAULT_DAYCODE_LENGTH
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .smallgroups.controller import register as register_smallgroups
from .students.controller import register as register_students

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def register_all(app: Flask, container: Container) -> None:
    register_students(app, container)
    register_attendance(app, container)
    register_classyears(app, container)
    register_smallgroups(app, container)

    @app.errorhandler(404)
    def not_found(_e):
        return jsonify({"success": False, "message": "Not found"}), 404


def create_app() -> Flask:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
        logger.info("Demo seed ready")

    container = build_container(
        db_config=db_config,
        daycode_length=int(getattr(settings, "DAYCODE_LENGTH", DEFAULT_DAYCODE_LENGTH)),
    )
    register_all(app, container)
    return app
