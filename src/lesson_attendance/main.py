from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.datetime_utils import fixed_offset
from .common.logging_utils import configure_logging
from .container import Container, build_container
from .core.constants import DEFAULT_CIVIL_TZ_OFFSET_MINUTES, DEFAULT_TOKEN_TTL_SECONDS
from .core.enums import DatePolicy
from .database.bootstrap import apply_schema, list_tables
from .tokens.model import QrSettings

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def load_qr_settings(settings) -> QrSettings:
    secret = getattr(settings, "QR_SECRET", None)
    if not secret:
        raise RuntimeError("QR_SECRET is not configured")
    return QrSettings(
        secret=secret.encode("utf-8") if isinstance(secret, str) else bytes(secret),
        ttl_seconds=int(getattr(settings, "QR_TTL_SECONDS", DEFAULT_TOKEN_TTL_SECONDS)),
    )


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

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
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            qr_settings=load_qr_settings(settings),
            civil_tz=fixed_offset(getattr(settings, "CIVIL_TZ_OFFSET_MINUTES", DEFAULT_CIVIL_TZ_OFFSET_MINUTES)),
            date_policy=DatePolicy(getattr(settings, "ATTENDANCE_DATE_POLICY", DatePolicy.SCAN_DATE.value)),
        )

    register_attendance(app, container)
    return app
