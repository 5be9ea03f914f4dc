from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from leaselink.core.config import Settings

logger = logging.getLogger(__name__)
STARTUP_PREFIX = "[STARTUP]"

REQUIRED_TABLES = {"users", "properties", "units", "tenants", "tickets", "comments"}


def validate_database_environment(settings: Settings) -> None:
    if settings.is_prod and settings.database_url.startswith("sqlite"):
        logger.critical("%s SQLite is forbidden in production", STARTUP_PREFIX)
        raise RuntimeError("SQLite is forbidden in production environment")


def ensure_tables_exist(engine: Engine) -> None:
    inspector = inspect(engine)
    missing = [table for table in REQUIRED_TABLES if not inspector.has_table(table)]
    if missing:
        logger.critical("%s tables missing=%s", STARTUP_PREFIX, ",".join(sorted(missing)))
        raise RuntimeError("tables missing")
    logger.info("%s schema verified", STARTUP_PREFIX)
