from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .batches.controller import register as register_batches
from .billing.controller import register as register_billing
from .checkins.controller import register as register_checkins
from .checkins.geo import center_configured
from .classes.controller import register as register_classes
from .common.logger import configure_logging, get_service_logger
from .common.signals import views_invalidated
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .siblings.controller import register as register_siblings
from .students.controller import register as register_students

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _log_invalidation(sender, paths=(), **_):
    get_service_logger("views").debug("views invalidated by %s: %s", sender, ", ".join(paths))


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    log = configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    log.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )
    if not center_configured(float(getattr(settings, "CENTER_LAT", 0)), float(getattr(settings, "CENTER_LNG", 0))):
        log.warning("CENTER_LAT/CENTER_LNG not set; every teacher check-in will be flagged outside the geofence")

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            log.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            log.info("demo seed ready")
        container = build_container(db_config=db_config, settings=settings)

    app.extensions["irshad_admin"] = container

    views_invalidated.connect(_log_invalidation)

    register_students(app, container)
    register_batches(app, container)
    register_classes(app, container)
    register_attendance(app, container)
    register_checkins(app, container)
    register_billing(app, container)
    register_siblings(app, container)

    @app.errorhandler(404)
    def not_found(_):
        return jsonify({"success": False, "error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(_):
        return jsonify({"success": False, "error": "Method not allowed"}), 405

    return app
