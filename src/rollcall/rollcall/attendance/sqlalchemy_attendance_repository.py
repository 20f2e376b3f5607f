from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from sqlalchemy import distinct, func
from sqlalchemy.exc import IntegrityError

from ..core.exceptions import DuplicateError
from ..database.session import SessionFactory, transaction
from ..database.tables import AttendanceRow, PersonRow
from ..people.model import PersonSummary
from ..people.sqlalchemy_people_repository import to_person
from .model import AttendanceMark, BulkMarkOutcome, DayAttendanceRow
from .repository import AttendanceRepository

ALREADY_MARKED = "Attendance already marked for this person on this date"


def _to_mark(row: AttendanceRow) -> AttendanceMark:
    return AttendanceMark(
        id=int(row.id),
        person_id=int(row.person_id),
        date=row.date,
        created_at=row.created_at,
    )


class SQLAlchemyAttendanceRepository(AttendanceRepository):
    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    def list_for_date(self, work_date: date) -> Sequence[DayAttendanceRow]:
        with transaction(self._session_factory) as s:
            rows = (
                s.query(AttendanceRow, PersonRow)
                .join(PersonRow, AttendanceRow.person_id == PersonRow.id)
                .filter(AttendanceRow.date == work_date)
                .order_by(PersonRow.name.asc(), PersonRow.id.asc())
                .all()
            )
            return [
                DayAttendanceRow(attendance_id=int(a.id), date=a.date, person=to_person(p))
                for a, p in rows
            ]

    def get_for_person_and_date(self, person_id: int, work_date: date) -> Optional[AttendanceMark]:
        with transaction(self._session_factory) as s:
            row = (
                s.query(AttendanceRow)
                .filter(AttendanceRow.person_id == person_id, AttendanceRow.date == work_date)
                .one_or_none()
            )
            return _to_mark(row) if row else None

    def create(self, *, person_id: int, work_date: date) -> AttendanceMark:
        try:
            with transaction(self._session_factory) as s:
                row = AttendanceRow(person_id=person_id, date=work_date)
                s.add(row)
                s.flush()
                return _to_mark(row)
        except IntegrityError as e:
            raise DuplicateError(ALREADY_MARKED) from e

    def delete(self, attendance_id: int) -> bool:
        with transaction(self._session_factory) as s:
            deleted = (
                s.query(AttendanceRow)
                .filter(AttendanceRow.id == attendance_id)
                .delete(synchronize_session=False)
            )
            return deleted > 0

    def mark_many(self, *, person_ids: Sequence[int], work_date: date) -> BulkMarkOutcome:
        if not person_ids:
            return BulkMarkOutcome()

        with transaction(self._session_factory) as s:
            # One lookup for every mark that already exists on this date
            existing = {
                pid
                for (pid,) in s.query(AttendanceRow.person_id)
                .filter(AttendanceRow.person_id.in_(list(person_ids)), AttendanceRow.date == work_date)
                .all()
            }

            duplicates: list[int] = []
            new_ids: list[int] = []
            for pid in person_ids:
                if pid in existing:
                    duplicates.append(pid)
                else:
                    new_ids.append(pid)

            rows = [AttendanceRow(person_id=pid, date=work_date) for pid in new_ids]
            s.add_all(rows)
            s.flush()
            return BulkMarkOutcome(added=[_to_mark(r) for r in rows], duplicate_person_ids=duplicates)

    def counts_by_date(self, *, start_date: date, end_date: date) -> dict[date, int]:
        with transaction(self._session_factory) as s:
            rows = (
                s.query(AttendanceRow.date, func.count(AttendanceRow.id))
                .filter(AttendanceRow.date >= start_date, AttendanceRow.date <= end_date)
                .group_by(AttendanceRow.date)
                .all()
            )
            return {d: int(n) for d, n in rows}

    def report_rows(self) -> Sequence[PersonSummary]:
        with transaction(self._session_factory) as s:
            days = func.count(distinct(AttendanceRow.date)).label("attendance_count")
            rows = (
                s.query(PersonRow, days)
                .outerjoin(AttendanceRow, AttendanceRow.person_id == PersonRow.id)
                .group_by(PersonRow.id)
                .order_by(PersonRow.name.asc(), PersonRow.id.asc())
                .all()
            )
            return [PersonSummary(person=to_person(p), attendance_count=int(n)) for p, n in rows]
