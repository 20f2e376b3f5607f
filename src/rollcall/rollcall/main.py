from __future__ import annotations

import importlib
import logging
import sys
from typing import Any, Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import RequestEntityTooLarge

from config import get_settings_module

from .common.datetime_utils import parse_iso_date
from .container import build_container
from .core.constants import DEFAULT_TIMEZONE
from .database.bootstrap import init_db
from .database.extensions import db
from .attendance.controller import register as register_attendance
from .coordinators.controller import register as register_coordinators
from .event_sessions.controller import register as register_event_sessions
from .labels.controller import register as register_labels
from .people.controller import register as register_people
from .volunteers.controller import register as register_volunteers

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT, handlers=handlers)


def create_app(settings_module: Optional[str] = None, overrides: Optional[dict[str, Any]] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    values = {name: getattr(settings, name) for name in dir(settings) if name.isupper()}
    values.update(overrides or {})

    configure_logging(values.get("LOG_LEVEL", "INFO"), values.get("LOG_FILE"))

    app.secret_key = values["SECRET_KEY"]
    app.config["DEBUG"] = bool(values.get("DEBUG", False))
    app.config["TESTING"] = bool(values.get("TESTING", False))
    app.config["SQLALCHEMY_DATABASE_URI"] = values["DATABASE_URL"]
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["MAX_CONTENT_LENGTH"] = int(values.get("MAX_UPLOAD_MB", 10)) * 1024 * 1024

    db.init_app(app)

    logger.info("Starting with settings=%s", settings_module)
    if values.get("AUTO_INIT_DB"):
        init_db(app)

    container = build_container(
        session_factory=lambda: db.session,
        admin_password=values.get("ADMIN_PASSWORD", ""),
        calendar_start=parse_iso_date(values["CALENDAR_START"]),
        calendar_end=parse_iso_date(values["CALENDAR_END"]),
        tz_name=values.get("TIMEZONE", DEFAULT_TIMEZONE),
    )

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(_e):
        return jsonify({"error": f"File too large (max {values.get('MAX_UPLOAD_MB', 10)} MB)"}), 413

    register_labels(app, container)
    register_attendance(app, container)
    register_people(app, container)
    register_coordinators(app, container)
    register_volunteers(app, container)
    register_event_sessions(app, container)

    return app
