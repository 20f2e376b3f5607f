"""Month grids for the attendance calendar page."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import Optional

# Sunday-first weeks, as on a wall calendar
_CALENDAR = calendar.Calendar(firstweekday=calendar.SUNDAY)


@dataclass(frozen=True)
class DayCell:
    date: date
    in_range: bool
    is_today: bool
    is_future: bool
    count: int = 0

    @property
    def day(self) -> int:
        return self.date.day

    @property
    def clickable(self) -> bool:
        return self.in_range and not self.is_future


@dataclass(frozen=True)
class MonthGrid:
    year: int
    month: int
    weeks: list[list[Optional[DayCell]]]

    @property
    def label(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True)
class CalendarWindow:
    """Inclusive range of dates on which attendance can be taken."""

    start: date
    end: date

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end

    def months(self) -> list[tuple[int, int]]:
        out: list[tuple[int, int]] = []
        year, month = self.start.year, self.start.month
        while (year, month) <= (self.end.year, self.end.month):
            out.append((year, month))
            month += 1
            if month > 12:
                year, month = year + 1, 1
        return out

    def initial_month(self, today: date) -> tuple[int, int]:
        """Current month, clamped to the window."""
        if today < self.start:
            return self.start.year, self.start.month
        if today > self.end:
            return self.end.year, self.end.month
        return today.year, today.month


def build_month(
    window: CalendarWindow,
    year: int,
    month: int,
    *,
    today: date,
    counts: Optional[dict[date, int]] = None,
) -> MonthGrid:
    counts = counts or {}
    weeks: list[list[Optional[DayCell]]] = []
    for week in _CALENDAR.monthdatescalendar(year, month):
        cells: list[Optional[DayCell]] = []
        for d in week:
            if d.month != month:
                cells.append(None)
                continue
            cells.append(
                DayCell(
                    date=d,
                    in_range=window.contains(d),
                    is_today=d == today,
                    is_future=d > today,
                    count=int(counts.get(d, 0)),
                )
            )
        weeks.append(cells)
    return MonthGrid(year=year, month=month, weeks=weeks)


def build_calendar(window: CalendarWindow, *, today: date, counts: Optional[dict[date, int]] = None) -> list[MonthGrid]:
    return [build_month(window, y, m, today=today, counts=counts) for y, m in window.months()]
