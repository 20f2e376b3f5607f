from __future__ import annotations

import logging

from flask import Flask
from sqlalchemy import inspect

from .extensions import db
from .tables import AttendanceRow, PersonRow

logger = logging.getLogger(__name__)


def init_db(app: Flask) -> list[str]:
    """Create missing tables (idempotent) and return the table names."""
    with app.app_context():
        db.create_all()
        tables = list_tables(app)
    logger.info("Database schema ready (tables=%d)", len(tables))
    return tables


def list_tables(app: Flask) -> list[str]:
    with app.app_context():
        return sorted(inspect(db.engine).get_table_names())


def clear_attendance_data(app: Flask) -> tuple[int, int]:
    """Delete every attendance mark, then every person.

    Returns (attendance_deleted, people_deleted).
    """
    with app.app_context():
        try:
            attendance_deleted = db.session.query(AttendanceRow).delete(synchronize_session=False)
            people_deleted = db.session.query(PersonRow).delete(synchronize_session=False)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
    logger.info("Cleared %d attendance records and %d people", attendance_deleted, people_deleted)
    return attendance_deleted, people_deleted
