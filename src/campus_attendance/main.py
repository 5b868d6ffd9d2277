from __future__ import annotations

import importlib
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .config import get_settings_module
from .container import Container, build_container
from .core.constants import DEFAULT_OTP_TTL_MINUTES, DEFAULT_SESSION_HOURS, DEFAULT_SESSION_REMEMBER_DAYS
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .extensions import mail
from .profiles.controller import register as register_profiles
from .users.controller import register as register_users
from .users.session import RememberMeSessionInterface
from .verification.controller import register as register_verification

MAIL_SETTINGS = (
    "MAIL_SERVER",
    "MAIL_PORT",
    "MAIL_USE_TLS",
    "MAIL_USE_SSL",
    "MAIL_USERNAME",
    "MAIL_PASSWORD",
    "MAIL_DEFAULT_SENDER",
    "MAIL_SUPPRESS_SEND",
)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass ``container`` to run the HTTP layer over prebuilt services (tests use
    in-memory repositories); otherwise MySQL-backed services are wired from the
    settings module picked by ``APP_ENV``.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    for key in MAIL_SETTINGS:
        if hasattr(settings, key):
            app.config[key] = getattr(settings, key)

    otp_ttl = int(getattr(settings, "OTP_TTL_MINUTES", DEFAULT_OTP_TTL_MINUTES))
    app.config["SESSION_DEFAULT_HOURS"] = int(getattr(settings, "SESSION_DEFAULT_HOURS", DEFAULT_SESSION_HOURS))
    app.permanent_session_lifetime = timedelta(
        days=int(getattr(settings, "SESSION_REMEMBER_DAYS", DEFAULT_SESSION_REMEMBER_DAYS))
    )
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    app.config["SESSION_COOKIE_SECURE"] = settings_module.endswith(".production")
    app.session_interface = RememberMeSessionInterface()

    mail.init_app(app)

    if app.config["DEBUG"]:
        app.logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            if app.config["DEBUG"]:
                app.logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config)
            ensure_demo_users(db_config)
            if app.config["DEBUG"]:
                app.logger.info("demo seed ready")
        container = build_container(db_config=db_config, otp_ttl_minutes=otp_ttl)

    app.extensions["campus_attendance.container"] = container

    register_users(app, container)
    register_verification(app, container)
    register_profiles(app, container)
    register_attendance(app, container)

    return app
