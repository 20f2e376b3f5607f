from __future__ import annotations

import logging
from typing import Any, Optional

from ..common.datetime_utils import local_isoformat
from ..core.constants import DEFAULT_TIMEZONE
from ..core.exceptions import NotFoundError
from ..coordinators.repository import CoordinatorRepository
from ..people.repository import PeopleRepository
from ..spreadsheets.importing import ImportResult
from ..spreadsheets.reader import pick, read_rows
from .model import NewVolunteer, Volunteer
from .repository import VolunteerRepository

logger = logging.getLogger(__name__)

NAME_COLUMNS = ("name",)
REGISTRATION_COLUMNS = ("registration no.", "registration_no", "registration number")
CONTACT_COLUMNS = ("contact no.", "contact_no", "contact number")

MISSING_FIELDS = "Missing name, registration number, or contact number"


class VolunteerService:
    """Use case: a coordinator's volunteer list."""

    def __init__(
        self,
        volunteers: VolunteerRepository,
        coordinators: CoordinatorRepository,
        people: PeopleRepository,
        *,
        tz_name: str = DEFAULT_TIMEZONE,
    ):
        self._volunteers = volunteers
        self._coordinators = coordinators
        self._people = people
        self._tz_name = tz_name

    def volunteer_to_dict(self, volunteer: Volunteer) -> dict[str, Any]:
        return {
            "id": volunteer.id,
            "coordinatorId": volunteer.coordinator_id,
            "name": volunteer.name,
            "registrationNo": volunteer.registration_no,
            "contactNo": volunteer.contact_no,
            "uid": volunteer.uid,
            "createdAt": local_isoformat(volunteer.created_at, self._tz_name),
        }

    def list_volunteers(self, coordinator_id: int) -> list[dict[str, Any]]:
        return [self.volunteer_to_dict(v) for v in self._volunteers.list_for_coordinator(coordinator_id)]

    def import_volunteers(
        self,
        coordinator_id: int,
        data: bytes,
        *,
        worksheet: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> ImportResult:
        coordinator = self._coordinators.get_by_id(coordinator_id)
        if not coordinator:
            raise NotFoundError("Coordinator not found")

        sheet = read_rows(data, worksheet=worksheet, filename=filename)
        logger.info(
            "Volunteer upload for coordinator %s: %d rows from sheet %r",
            coordinator.username,
            len(sheet.rows),
            sheet.sheet_name,
        )

        parsed = []
        for row in sheet.rows:
            parsed.append(
                (row, pick(row, NAME_COLUMNS), pick(row, REGISTRATION_COLUMNS), pick(row, CONTACT_COLUMNS))
            )

        registrations = sorted({reg for _, _, reg, _ in parsed if reg})
        own: dict[str, Volunteer] = {}
        foreign: dict[str, str] = {}
        for owner in self._volunteers.owners_by_registration(registrations):
            reg = owner.volunteer.registration_no
            if owner.volunteer.coordinator_id == coordinator_id:
                own[reg] = owner.volunteer
            else:
                foreign.setdefault(reg, owner.coordinator_name)

        queued: dict[str, NewVolunteer] = {}
        result = ImportResult()

        for index, (row, name, registration_no, contact_no) in enumerate(parsed, start=1):
            if not name or not registration_no or not contact_no:
                logger.debug("Row %d rejected: missing fields", index)
                result.reject(row, MISSING_FIELDS)
                continue

            other = foreign.get(registration_no)
            if other is not None:
                logger.debug("Row %d rejected: %s belongs to coordinator %r", index, registration_no, other)
                result.reject(
                    row,
                    f'Volunteer "{name}" ({registration_no}) already exists for coordinator "{other}". '
                    "A volunteer cannot be assigned to multiple coordinators.",
                )
                continue

            incoming = {"name": name, "registrationNo": registration_no, "contactNo": contact_no}

            stored = own.get(registration_no)
            if stored:
                if stored.name != name or stored.contact_no != contact_no:
                    result.duplicates.append({"existing": self.volunteer_to_dict(stored), "new": incoming})
                else:
                    result.skipped += 1
                continue

            earlier = queued.get(registration_no)
            if earlier:
                if earlier.name != name or earlier.contact_no != contact_no:
                    result.duplicates.append(
                        {
                            "existing": {
                                "id": None,
                                "name": earlier.name,
                                "registrationNo": earlier.registration_no,
                                "contactNo": earlier.contact_no,
                            },
                            "new": incoming,
                        }
                    )
                else:
                    result.skipped += 1
                continue

            queued[registration_no] = NewVolunteer(
                coordinator_id=coordinator_id,
                name=name,
                registration_no=registration_no,
                contact_no=contact_no,
            )

        if queued:
            uids = self._people.uids_by_registration(list(queued))
            batch = [
                NewVolunteer(
                    coordinator_id=v.coordinator_id,
                    name=v.name,
                    registration_no=v.registration_no,
                    contact_no=v.contact_no,
                    uid=uids.get(v.registration_no),
                )
                for v in queued.values()
            ]
            try:
                created = self._volunteers.create_many(batch)
                result.added = [self.volunteer_to_dict(v) for v in created]
            except Exception as e:
                logger.error("Batch creation of %d volunteers failed: %s", len(batch), e, exc_info=True)
                result.errors.append({"row": {"batch": True}, "reason": str(e)})

        logger.info(
            "Volunteer upload summary: added=%d duplicates=%d skipped=%d errors=%d",
            len(result.added),
            len(result.duplicates),
            result.skipped,
            len(result.errors),
        )
        return result
