from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..people.model import PersonSummary
from .model import AttendanceMark, BulkMarkOutcome, DayAttendanceRow


class AttendanceRepository(Protocol):
    def list_for_date(self, work_date: date) -> Sequence[DayAttendanceRow]:
        raise NotImplementedError

    def get_for_person_and_date(self, person_id: int, work_date: date) -> Optional[AttendanceMark]:
        raise NotImplementedError

    def create(self, *, person_id: int, work_date: date) -> AttendanceMark:
        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def mark_many(self, *, person_ids: Sequence[int], work_date: date) -> BulkMarkOutcome:
        """Mark every listed person in one transaction.

        People already marked on `work_date` are reported back instead of
        inserted; any failure rolls the whole batch back.
        """

        raise NotImplementedError

    def counts_by_date(self, *, start_date: date, end_date: date) -> dict[date, int]:
        raise NotImplementedError

    def report_rows(self) -> Sequence[PersonSummary]:
        """Every person with their number of distinct attendance dates, by name."""

        raise NotImplementedError
