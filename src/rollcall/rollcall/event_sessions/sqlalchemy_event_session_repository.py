from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy.orm import selectinload

from ..coordinators.sqlalchemy_coordinator_repository import to_coordinator
from ..database.session import SessionFactory, transaction
from ..database.tables import EventRecordRow, EventSessionRow
from ..volunteers.sqlalchemy_volunteer_repository import to_volunteer
from .model import EventRecord, EventSession
from .repository import EventSessionRepository


def _to_record(row: EventRecordRow) -> EventRecord:
    return EventRecord(
        id=int(row.id),
        session_id=int(row.session_id),
        volunteer_id=int(row.volunteer_id),
        is_present=bool(row.is_present),
        marked_at=row.marked_at,
        volunteer=to_volunteer(row.volunteer) if row.volunteer else None,
    )


def _to_session(row: EventSessionRow, *, with_coordinator: bool = False) -> EventSession:
    records = sorted(row.records, key=lambda r: (r.volunteer.name if r.volunteer else "", r.id))
    return EventSession(
        id=int(row.id),
        coordinator_id=int(row.coordinator_id),
        session_datetime=row.session_datetime,
        created_at=row.created_at,
        records=tuple(_to_record(r) for r in records),
        coordinator=to_coordinator(row.coordinator) if with_coordinator and row.coordinator else None,
    )


def _with_records(query):
    return query.options(selectinload(EventSessionRow.records).selectinload(EventRecordRow.volunteer))


class SQLAlchemyEventSessionRepository(EventSessionRepository):
    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    def list_for_coordinator(self, coordinator_id: int) -> Sequence[EventSession]:
        with transaction(self._session_factory) as s:
            rows = (
                _with_records(s.query(EventSessionRow))
                .filter(EventSessionRow.coordinator_id == coordinator_id)
                .order_by(EventSessionRow.session_datetime.desc(), EventSessionRow.id.desc())
                .all()
            )
            return [_to_session(r) for r in rows]

    def create(self, coordinator_id: int, volunteer_ids: Sequence[int], at: datetime) -> EventSession:
        with transaction(self._session_factory) as s:
            row = EventSessionRow(coordinator_id=coordinator_id, session_datetime=at, created_at=at)
            row.records = [EventRecordRow(volunteer_id=vid, is_present=False, marked_at=None) for vid in volunteer_ids]
            s.add(row)
            s.flush()
            return _to_session(row)

    def get(self, session_id: int) -> Optional[EventSession]:
        with transaction(self._session_factory) as s:
            row = _with_records(s.query(EventSessionRow)).filter(EventSessionRow.id == session_id).one_or_none()
            return _to_session(row, with_coordinator=True) if row else None

    def set_presence(self, session_id: int, present_ids: set[int], at: datetime) -> Optional[EventSession]:
        with transaction(self._session_factory) as s:
            row = _with_records(s.query(EventSessionRow)).filter(EventSessionRow.id == session_id).one_or_none()
            if not row:
                return None
            for record in row.records:
                present = int(record.volunteer_id) in present_ids
                record.is_present = present
                record.marked_at = at if present else None
            s.flush()
            return _to_session(row, with_coordinator=True)
