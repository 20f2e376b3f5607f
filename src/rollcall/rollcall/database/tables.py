"""ORM table mappings.

Rows stay inside the repositories; services only see the frozen dataclasses
from each feature's `model.py`.
"""

from __future__ import annotations

from ..common.datetime_utils import utc_now
from .extensions import db


class PersonRow(db.Model):
    __tablename__ = "people"

    id = db.Column(db.Integer, primary_key=True)
    uid = db.Column(db.String(50), unique=True, nullable=True)
    name = db.Column(db.String(255), nullable=False)
    registration_no = db.Column(db.String(100), unique=True, nullable=False, index=True)
    contact_no = db.Column(db.String(50), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    updated_at = db.Column(db.DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    attendance = db.relationship(
        "AttendanceRow",
        backref="person",
        lazy=True,
        cascade="all, delete-orphan",
    )


class AttendanceRow(db.Model):
    __tablename__ = "attendance"
    __table_args__ = (db.UniqueConstraint("person_id", "date", name="uq_attendance_person_date"),)

    id = db.Column(db.Integer, primary_key=True)
    person_id = db.Column(db.Integer, db.ForeignKey("people.id", ondelete="CASCADE"), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)


class CoordinatorRow(db.Model):
    __tablename__ = "coordinators"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(100), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)  # werkzeug hash
    name = db.Column(db.String(255), nullable=False)
    registration_no = db.Column(db.String(100), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    volunteers = db.relationship("VolunteerRow", backref="coordinator", lazy=True)


class VolunteerRow(db.Model):
    __tablename__ = "volunteers"
    __table_args__ = (
        db.UniqueConstraint("coordinator_id", "registration_no", name="uq_volunteer_coordinator_registration"),
    )

    id = db.Column(db.Integer, primary_key=True)
    coordinator_id = db.Column(db.Integer, db.ForeignKey("coordinators.id", ondelete="CASCADE"), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    registration_no = db.Column(db.String(100), nullable=False, index=True)
    contact_no = db.Column(db.String(50), nullable=False)
    uid = db.Column(db.String(50), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)


class EventSessionRow(db.Model):
    __tablename__ = "event_attendance_sessions"

    id = db.Column(db.Integer, primary_key=True)
    coordinator_id = db.Column(db.Integer, db.ForeignKey("coordinators.id", ondelete="CASCADE"), nullable=False)
    session_datetime = db.Column(db.DateTime, nullable=False, default=utc_now)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    coordinator = db.relationship("CoordinatorRow")
    records = db.relationship(
        "EventRecordRow",
        backref="session",
        lazy=True,
        cascade="all, delete-orphan",
    )


class EventRecordRow(db.Model):
    __tablename__ = "event_attendance_records"
    __table_args__ = (db.UniqueConstraint("session_id", "volunteer_id", name="uq_event_record_session_volunteer"),)

    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(
        db.Integer, db.ForeignKey("event_attendance_sessions.id", ondelete="CASCADE"), nullable=False
    )
    volunteer_id = db.Column(db.Integer, db.ForeignKey("volunteers.id", ondelete="CASCADE"), nullable=False)
    is_present = db.Column(db.Boolean, nullable=False, default=False)
    marked_at = db.Column(db.DateTime, nullable=True)

    volunteer = db.relationship("VolunteerRow")
