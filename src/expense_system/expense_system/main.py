from __future__ import annotations

import importlib
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .categories.controller import register as register_categories
from .common.http import error_response
from .container import Container, build_container
from .core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    StaleExpenseError,
    ValidationError,
)
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .expenses.controller import register as register_expenses
from .reports.controller import register as register_reports
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]

_ERROR_STATUS = (
    (StaleExpenseError, 409, "Conflict"),
    (ValidationError, 400, "Bad Request"),
    (AuthenticationError, 401, "Authentication Failed"),
    (AuthorizationError, 403, "Forbidden"),
    (NotFoundError, 404, "Resource Not Found"),
)


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level_name).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("werkzeug").setLevel(logging.WARNING)


def _register_error_handlers(app: Flask) -> None:
    for exc_type, status, title in _ERROR_STATUS:

        def handler(e, status=status, title=title):
            return error_response(status, title, str(e))

        app.register_error_handler(exc_type, handler)

    @app.errorhandler(404)
    def not_found(_e):
        return error_response(404, "Not Found", "No such endpoint")

    @app.errorhandler(405)
    def method_not_allowed(_e):
        return error_response(405, "Method Not Allowed", "Method not allowed for this endpoint")

    @app.errorhandler(500)
    def internal_error(e):
        logger.exception("Unhandled error: %s", getattr(e, "original_exception", e))
        return error_response(500, "Internal Server Error", "An unexpected error occurred")


def _prepare_database(settings, db_config: dict, debug: bool) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
        if debug:
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
        ensure_demo_users(db_config)
        logger.info("Demo seed ready")


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass ``container`` to run against pre-wired repositories (tests); otherwise
    the MySQL container is built from the settings module selected by APP_ENV.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        _prepare_database(settings, db_config, app.config["DEBUG"])
        container = build_container(db_config=db_config)

    app.extensions["container"] = container

    _register_error_handlers(app)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify(
            {
                "status": "UP",
                "timestamp": datetime.now().isoformat(timespec="seconds"),
                "service": "Expense Management API",
                "version": "1.0.0",
            }
        )

    register_users(app, container)
    register_categories(app, container)
    register_expenses(app, container)
    register_reports(app, container)

    return app
