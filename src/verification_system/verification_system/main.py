from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .container import Container, build_container
from .core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .sections.controller import register as register_sections
from .users.controller import register as register_users
from .verification.controller import register as register_verification

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"

ERROR_STATUS = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ValidationError, 400),
)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        for exc_type, status in ERROR_STATUS:
            if isinstance(e, exc_type):
                return jsonify({"error": str(e)}), status
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error")
        return jsonify({"error": "Unknown error"}), 500


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

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

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_users(db_config)
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            logger.info("Demo seed ready")

        container = build_container(db_config=db_config, upload_dir=getattr(settings, "UPLOAD_DIR", "uploads"))

    app.extensions["container"] = container
    register_error_handlers(app)
    register_users(app, container)
    register_sections(app, container)
    register_verification(app, container)

    return app
