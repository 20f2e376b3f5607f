from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import local_date_string, local_isoformat, local_today
from ..common.validators import optional_date, require_date, require_int
from ..core.constants import DEFAULT_TIMEZONE
from ..core.exceptions import DuplicateError, NotFoundError, ValidationError
from ..people.repository import PeopleRepository
from .calendar import CalendarWindow, MonthGrid, build_calendar
from .export import build_attendance_workbook
from .model import AttendanceMark, DayAttendanceRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content: bytes


class AttendanceService:
    """Use case: mark and review daily attendance (admin)."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        people: PeopleRepository,
        *,
        window: CalendarWindow,
        tz_name: str = DEFAULT_TIMEZONE,
    ):
        self._attendance = attendance
        self._people = people
        self._window = window
        self._tz_name = tz_name

    @property
    def window(self) -> CalendarWindow:
        return self._window

    def today(self) -> date:
        return local_today(self._tz_name)

    def _mark_to_dict(self, mark: AttendanceMark) -> dict[str, Any]:
        return {
            "id": mark.id,
            "person_id": mark.person_id,
            "date": mark.date.strftime("%Y-%m-%d"),
            "created_at": local_isoformat(mark.created_at, self._tz_name),
        }

    def _day_row_to_dict(self, row: DayAttendanceRow) -> dict[str, Any]:
        return {
            "attendance_id": row.attendance_id,
            "date": row.date.strftime("%Y-%m-%d"),
            "id": row.person.id,
            "uid": row.person.uid,
            "name": row.person.name,
            "registration_no": row.person.registration_no,
            "contact_no": row.person.contact_no,
        }

    def _require_markable(self, work_date: date, today: Optional[date]) -> None:
        today = today or self.today()
        if work_date > today:
            raise ValidationError("Cannot mark attendance for a future date")

    def list_for_date(self, date_s: Optional[str]) -> list[dict[str, Any]]:
        work_date = require_date(date_s, "Date is required")
        return [self._day_row_to_dict(r) for r in self._attendance.list_for_date(work_date)]

    def mark(self, *, person_id: Any, date_s: Optional[str], today: Optional[date] = None) -> dict[str, Any]:
        if person_id in (None, "") or not date_s:
            raise ValidationError("Person ID and date are required")
        pid = require_int(person_id, "Invalid person ID")
        work_date = require_date(date_s, "Date is required")
        self._require_markable(work_date, today)

        if not self._people.get_by_id(pid):
            raise NotFoundError("Person not found")
        if self._attendance.get_for_person_and_date(pid, work_date):
            raise DuplicateError("Attendance already marked for this person on this date")

        mark = self._attendance.create(person_id=pid, work_date=work_date)
        logger.info("Marked person id=%s present on %s", pid, work_date)
        return self._mark_to_dict(mark)

    def unmark(self, attendance_id: Any) -> None:
        if attendance_id in (None, ""):
            raise ValidationError("Attendance ID is required")
        aid = require_int(attendance_id, "Invalid attendance ID")
        if self._attendance.delete(aid):
            logger.info("Removed attendance id=%s", aid)

    def mark_bulk(self, *, person_ids: Any, date_s: Optional[str], today: Optional[date] = None) -> dict[str, Any]:
        """Mark many people present on one date.

        Already-marked people come back under "duplicates", unknown ids
        under "errors"; the rest are inserted in a single transaction.
        """
        if not isinstance(person_ids, list) or not date_s:
            raise ValidationError("Person IDs (array) and date are required")
        work_date = require_date(date_s, "Date is required")
        self._require_markable(work_date, today)

        ids: list[int] = []
        for value in person_ids:
            pid = require_int(value, "Person IDs must be integers")
            if pid not in ids:
                ids.append(pid)

        known = self._people.existing_ids(ids)
        errors = [{"person_id": pid, "reason": "Person not found"} for pid in ids if pid not in known]
        outcome = self._attendance.mark_many(person_ids=[pid for pid in ids if pid in known], work_date=work_date)

        date_text = work_date.strftime("%Y-%m-%d")
        logger.info(
            "Bulk attendance for %s: added=%d duplicates=%d errors=%d",
            date_text,
            len(outcome.added),
            len(outcome.duplicate_person_ids),
            len(errors),
        )
        return {
            "added": [self._mark_to_dict(m) for m in outcome.added],
            "duplicates": [{"person_id": pid, "date": date_text} for pid in outcome.duplicate_person_ids],
            "errors": errors,
        }

    def daily_counts(self, *, start_s: Optional[str] = None, end_s: Optional[str] = None) -> dict[str, int]:
        start = optional_date(start_s) or self._window.start
        end = optional_date(end_s) or self._window.end
        if start > end:
            raise ValidationError("start must not be after end")
        counts = self._attendance.counts_by_date(start_date=start, end_date=end)
        return {d.strftime("%Y-%m-%d"): n for d, n in sorted(counts.items())}

    def calendar(self, *, today: Optional[date] = None) -> list[MonthGrid]:
        today = today or self.today()
        counts = self._attendance.counts_by_date(start_date=self._window.start, end_date=self._window.end)
        return build_calendar(self._window, today=today, counts=counts)

    def people_for_day(self, date_s: str) -> tuple[date, Sequence[DayAttendanceRow]]:
        work_date = require_date(date_s, "Date is required")
        return work_date, self._attendance.list_for_date(work_date)

    def export_report(self) -> ExportFile:
        rows = self._attendance.report_rows()
        content = build_attendance_workbook(rows)
        filename = f"attendance_report_{local_date_string(tz_name=self._tz_name)}.xlsx"
        logger.info("Exported attendance report for %d people", len(rows))
        return ExportFile(filename=filename, content=content)
