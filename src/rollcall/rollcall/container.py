from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .attendance.calendar import CalendarWindow
from .attendance.service import AttendanceService
from .attendance.sqlalchemy_attendance_repository import SQLAlchemyAttendanceRepository
from .common.admin_gate import AdminGate
from .coordinators.service import CoordinatorService
from .coordinators.sqlalchemy_coordinator_repository import SQLAlchemyCoordinatorRepository
from .core.constants import DEFAULT_TIMEZONE
from .database.session import SessionFactory
from .event_sessions.service import EventSessionService
from .event_sessions.sqlalchemy_event_session_repository import SQLAlchemyEventSessionRepository
from .labels.service import LabelService
from .people.service import PeopleService
from .people.sqlalchemy_people_repository import SQLAlchemyPeopleRepository
from .volunteers.service import VolunteerService
from .volunteers.sqlalchemy_volunteer_repository import SQLAlchemyVolunteerRepository


@dataclass(frozen=True)
class Container:
    admin_gate: AdminGate

    people_repo: SQLAlchemyPeopleRepository
    attendance_repo: SQLAlchemyAttendanceRepository
    coordinators_repo: SQLAlchemyCoordinatorRepository
    volunteers_repo: SQLAlchemyVolunteerRepository
    sessions_repo: SQLAlchemyEventSessionRepository

    people_service: PeopleService
    attendance_service: AttendanceService
    coordinator_service: CoordinatorService
    volunteer_service: VolunteerService
    session_service: EventSessionService
    label_service: LabelService


def build_container(
    *,
    session_factory: SessionFactory,
    admin_password: str,
    calendar_start: date,
    calendar_end: date,
    tz_name: str = DEFAULT_TIMEZONE,
) -> Container:
    admin_gate = AdminGate(admin_password)

    people_repo = SQLAlchemyPeopleRepository(session_factory)
    attendance_repo = SQLAlchemyAttendanceRepository(session_factory)
    coordinators_repo = SQLAlchemyCoordinatorRepository(session_factory)
    volunteers_repo = SQLAlchemyVolunteerRepository(session_factory)
    sessions_repo = SQLAlchemyEventSessionRepository(session_factory)

    people_service = PeopleService(people_repo, tz_name=tz_name)
    attendance_service = AttendanceService(
        attendance_repo,
        people_repo,
        window=CalendarWindow(start=calendar_start, end=calendar_end),
        tz_name=tz_name,
    )
    coordinator_service = CoordinatorService(coordinators_repo, admin_gate)
    volunteer_service = VolunteerService(volunteers_repo, coordinators_repo, people_repo, tz_name=tz_name)
    session_service = EventSessionService(sessions_repo, volunteers_repo, tz_name=tz_name)
    label_service = LabelService()

    return Container(
        admin_gate=admin_gate,
        people_repo=people_repo,
        attendance_repo=attendance_repo,
        coordinators_repo=coordinators_repo,
        volunteers_repo=volunteers_repo,
        sessions_repo=sessions_repo,
        people_service=people_service,
        attendance_service=attendance_service,
        coordinator_service=coordinator_service,
        volunteer_service=volunteer_service,
        session_service=session_service,
        label_service=label_service,
    )
