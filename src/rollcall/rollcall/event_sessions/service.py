from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

from ..common.datetime_utils import local_isoformat, utc_now
from ..common.validators import require_int
from ..coordinators.service import coordinator_to_dict
from ..core.constants import DEFAULT_TIMEZONE
from ..core.exceptions import NotFoundError, ValidationError
from ..volunteers.repository import VolunteerRepository
from .model import EventRecord, EventSession
from .repository import EventSessionRepository

logger = logging.getLogger(__name__)


class EventSessionService:
    """Use case: take and edit roll calls for a coordinator's volunteers."""

    def __init__(
        self,
        sessions: EventSessionRepository,
        volunteers: VolunteerRepository,
        *,
        tz_name: str = DEFAULT_TIMEZONE,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._sessions = sessions
        self._volunteers = volunteers
        self._tz_name = tz_name
        self._clock = clock

    def _record_to_dict(self, record: EventRecord) -> dict[str, Any]:
        volunteer = record.volunteer
        return {
            "id": record.id,
            "sessionId": record.session_id,
            "volunteerId": record.volunteer_id,
            "isPresent": record.is_present,
            "markedAt": local_isoformat(record.marked_at, self._tz_name),
            "volunteer": {
                "id": volunteer.id,
                "name": volunteer.name,
                "registrationNo": volunteer.registration_no,
                "contactNo": volunteer.contact_no,
                "uid": volunteer.uid,
            }
            if volunteer
            else None,
        }

    def session_to_dict(self, session: EventSession) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": session.id,
            "coordinatorId": session.coordinator_id,
            "sessionDateTime": local_isoformat(session.session_datetime, self._tz_name),
            "createdAt": local_isoformat(session.created_at, self._tz_name),
            "attendanceRecords": [self._record_to_dict(r) for r in session.records],
        }
        if session.coordinator:
            out["coordinator"] = coordinator_to_dict(session.coordinator)
        return out

    def list_sessions(self, coordinator_id: int) -> list[dict[str, Any]]:
        return [self.session_to_dict(s) for s in self._sessions.list_for_coordinator(coordinator_id)]

    def create_session(self, coordinator_id: int) -> dict[str, Any]:
        volunteer_ids = [v.id for v in self._volunteers.list_for_coordinator(coordinator_id)]
        session = self._sessions.create(coordinator_id, volunteer_ids, self._clock())
        logger.info(
            "Created session %s for coordinator %s with %d volunteers",
            session.id,
            coordinator_id,
            len(volunteer_ids),
        )
        return self.session_to_dict(session)

    def _owned(self, coordinator_id: int, session_id: Any) -> EventSession:
        session = self._sessions.get(require_int(session_id, "Invalid session ID"))
        # Another coordinator's session is reported as missing
        if not session or session.coordinator_id != coordinator_id:
            raise NotFoundError("Session not found")
        return session

    def get_session(self, coordinator_id: int, session_id: Any) -> dict[str, Any]:
        return self.session_to_dict(self._owned(coordinator_id, session_id))

    def mark_present(self, coordinator_id: int, session_id: Any, volunteer_ids: Any) -> dict[str, Any]:
        if not isinstance(volunteer_ids, list):
            raise ValidationError("volunteerIds must be an array")
        present = {require_int(v, "Invalid volunteer ID") for v in volunteer_ids}

        sid = self._owned(coordinator_id, session_id).id
        session = self._sessions.set_presence(sid, present, self._clock())
        if not session:
            raise NotFoundError("Session not found")
        marked = sum(1 for r in session.records if r.is_present)
        logger.info("Session %s marked: %d of %d present", sid, marked, len(session.records))
        return self.session_to_dict(session)
