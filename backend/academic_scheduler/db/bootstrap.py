from __future__ import annotations

import logging

from sqlalchemy import inspect

import academic_scheduler.models  # noqa: F401
from academic_scheduler.db.base import Base
from academic_scheduler.db.session import engine

logger = logging.getLogger(__name__)

REQUIRED_TABLES = {"groups", "lecturers", "subjects", "venues", "timetables", "time_slots"}


def ensure_schema() -> None:
    """Create any missing tables; Alembic owns column-level changes."""
    with engine.begin() as connection:
        existing = set(inspect(connection).get_table_names())
        missing = sorted(REQUIRED_TABLES - existing)
        if not missing:
            return
        logger.info("SCHEMA BOOTSTRAP | creating_tables=%s", ",".join(missing))
        Base.metadata.create_all(bind=connection)
