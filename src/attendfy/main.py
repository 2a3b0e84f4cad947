from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .common.http import register_error_handlers, register_request_logging
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_super_admin, list_tables
from .devices.controller import register as register_devices
from .reports.controller import register as register_dashboard
from .settings import get_settings_module
from .users.controller import register as register_users

logger = logging.getLogger("attendfy")

_SETTING_KEYS = (
    "JWT_SECRET",
    "JWT_ALGORITHM",
    "TOKEN_TTL_HOURS",
    "PASSWORD_CHECK_TIMEOUT",
    "DB_CONNECT_TIMEOUT",
    "CORS_ORIGINS",
    "LOGIN_RATE_LIMIT",
    "RATELIMIT_STORAGE_URI",
    "LOG_LEVEL",
)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    for key in _SETTING_KEYS:
        if hasattr(settings, key):
            app.config[key] = getattr(settings, key)

    _configure_logging(app.config.get("LOG_LEVEL", "INFO"))
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            ensure_super_admin(
                db_config,
                email=getattr(settings, "SUPER_ADMIN_EMAIL", ""),
                password=getattr(settings, "SUPER_ADMIN_PASSWORD", ""),
                employee_id=getattr(settings, "SUPER_ADMIN_EMPLOYEE_ID", "SA000001"),
            )

        container = build_container(
            db_config=db_config,
            jwt_secret=app.config["JWT_SECRET"],
            jwt_algorithm=app.config.get("JWT_ALGORITHM", "HS256"),
            token_ttl_hours=int(app.config.get("TOKEN_TTL_HOURS", 24)),
            password_check_timeout=float(app.config.get("PASSWORD_CHECK_TIMEOUT", 5)),
            connect_timeout=int(app.config.get("DB_CONNECT_TIMEOUT", 5)),
        )

    CORS(app, origins=app.config.get("CORS_ORIGINS", []), supports_credentials=True)
    limiter = Limiter(
        get_remote_address,
        app=app,
        storage_uri=app.config.get("RATELIMIT_STORAGE_URI", "memory://"),
    )

    register_error_handlers(app)
    register_request_logging(app)

    register_auth(app, container, limiter)
    register_users(app, container)
    register_attendance(app, container)
    register_devices(app, container)
    register_dashboard(app, container)

    app.extensions["attendfy.container"] = container
    return app
