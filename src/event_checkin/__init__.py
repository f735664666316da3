"""Event check-in service.

Feature modules (auth, users, qr, setup) each expose a thin Flask controller
on top of service and repository layers.
"""
from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .auth.controller import register as register_auth
from .common.datetime_utils import now_local
from .common.http import error_response
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig
from .logging_config import setup_logging
from .qr.controller import register as register_qr
from .settings import get_settings_module
from .setup.controller import register as register_setup
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(config: Optional[Mapping] = None, *, container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    ``config`` overrides values from the settings module selected by APP_ENV.
    Passing ``container`` skips the MySQL wiring (used by tests).
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    app.config.from_object(settings_module)
    if config:
        app.config.update(config)

    setup_logging(app.config.get("LOG_LEVEL", "INFO"), app.config.get("LOG_TIMEZONE", "UTC"))
    logger.info("Starting with settings=%s", settings_module)

    if container is None:
        db_config = app.config["DB_CONFIG"]
        if app.config.get("AUTO_INIT_DB"):
            apply_schema(db_config)
            logger.info(
                "Schema ready on %s (tables=%d)",
                DBConfig.from_dict(db_config).describe(),
                len(list_tables(db_config)),
            )
        container = build_container(db_config=db_config, config=app.config)

    app.extensions["event_checkin"] = container

    register_auth(app, container)
    register_users(app, container)
    register_qr(app, container)
    register_setup(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({
            "status": "OK",
            "timestamp": now_local().isoformat(),
            "env": os.getenv("APP_ENV", "development"),
        })

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        return error_response(e.description or e.name, e.code or 500)

    return app
