from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.web import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_admin, list_tables
from .database.connection import DBConfig
from .faculty.controller import register as register_faculty
from .scanners.controller import register as register_scanners
from .sections.controller import register as register_sections
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _prepare_database(settings: Any) -> None:
    db_config = DBConfig.from_mapping(getattr(settings, "DB_CONFIG"))

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
        admin_email = getattr(settings, "ADMIN_EMAIL", "")
        admin_password = getattr(settings, "ADMIN_PASSWORD", "")
        if admin_email and admin_password:
            ensure_admin(db_config, email=admin_email, password=admin_password)
        logger.info("Demo seed ready")


def create_app(settings: Optional[Any] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    if settings is None:
        settings = importlib.import_module(get_settings_module())

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        logger.info("Using database %s", DBConfig.from_mapping(getattr(settings, "DB_CONFIG")).describe())
        _prepare_database(settings)
        container = build_container(settings=settings)

    register_error_handlers(app)
    register_users(app, container)
    register_students(app, container)
    register_faculty(app, container)
    register_sections(app, container)
    register_scanners(app, container)
    register_attendance(app, container)

    return app
