from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.datetime_utils import parse_clock_time
from .container import CheckInOptions, Container, build_container
from .core.constants import (
    DEFAULT_FACE_MATCH_THRESHOLD,
    DEFAULT_GEOLOCATION_MAX_AGE_MS,
    DEFAULT_GEOLOCATION_TIMEOUT_MS,
    DEFAULT_LATE_GRACE_MINUTES,
)
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .database.connection import DBConfig
from .reports.controller import register as register_reports
from .users.controller import register as register_users
from .zones.controller import register as register_zones

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def _checkin_options(settings) -> CheckInOptions:
    start = getattr(settings, "SCHOOL_START_TIME", None)
    return CheckInOptions(
        school_start_time=parse_clock_time(start) if start else None,
        late_grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", DEFAULT_LATE_GRACE_MINUTES)),
        face_match_threshold=float(getattr(settings, "FACE_MATCH_THRESHOLD", DEFAULT_FACE_MATCH_THRESHOLD)),
        require_face_match=bool(getattr(settings, "REQUIRE_FACE_MATCH", False)),
    )


def _bootstrap_database(settings, db_config: dict) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
        ensure_demo_users(db_config)
        logger.info("Demo seed ready")


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(logging, str(getattr(settings, "LOG_LEVEL", "INFO")).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["GEOLOCATION_TIMEOUT_MS"] = int(getattr(settings, "GEOLOCATION_TIMEOUT_MS", DEFAULT_GEOLOCATION_TIMEOUT_MS))
    app.config["GEOLOCATION_MAX_AGE_MS"] = int(getattr(settings, "GEOLOCATION_MAX_AGE_MS", DEFAULT_GEOLOCATION_MAX_AGE_MS))
    app.config["GEOLOCATION_HIGH_ACCURACY"] = bool(getattr(settings, "GEOLOCATION_HIGH_ACCURACY", True))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())
        _bootstrap_database(settings, db_config)
        container = build_container(db_config=db_config, options=_checkin_options(settings))

    register_users(app, container)
    register_zones(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app
