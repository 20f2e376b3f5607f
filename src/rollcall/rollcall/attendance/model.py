from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..people.model import Person


@dataclass(frozen=True)
class AttendanceMark:
    """One person marked present on one date."""

    id: int
    person_id: int
    date: date
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class DayAttendanceRow:
    """Read-model for the day view: the mark joined with its person."""

    attendance_id: int
    date: date
    person: Person


@dataclass(frozen=True)
class BulkMarkOutcome:
    added: list[AttendanceMark] = field(default_factory=list)
    duplicate_person_ids: list[int] = field(default_factory=list)
