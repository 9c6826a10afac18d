from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .registrations.controller import register as register_registrations
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> Flask:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    db_config = getattr(settings, "DB_CONFIG")

    logger.info(
        "settings=%s db=%s@%s:%s/%s identity=%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        getattr(settings, "IDENTITY_BACKEND", "local"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        identity_backend=getattr(settings, "IDENTITY_BACKEND", "local"),
        supabase_config=getattr(settings, "SUPABASE_CONFIG", None),
        secret_policy=getattr(settings, "REGISTRATION_SECRET_POLICY", "show_once"),
        pending_limit=int(getattr(settings, "PENDING_LIST_LIMIT", 200)),
    )

    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        admin_email = getattr(settings, "ADMIN_EMAIL", None)
        admin_password = getattr(settings, "ADMIN_PASSWORD", None)
        if admin_email and admin_password:
            container.account_service.ensure_admin(
                name=getattr(settings, "ADMIN_NAME", "Administrator"),
                email=admin_email,
                password=admin_password,
            )
            logger.info("admin account ready (%s)", admin_email)
        else:
            logger.warning("AUTO_SEED_DB is set but ADMIN_EMAIL/ADMIN_PASSWORD are missing")

    register_users(app, container)
    register_registrations(app, container)

    return app
