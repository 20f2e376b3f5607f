from __future__ import annotations

import logging
from typing import Any, Optional

from ..common.datetime_utils import local_isoformat
from ..common.validators import optional_date, optional_text, require_int, require_non_empty
from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import PeopleSortField, SortOrder
from ..core.exceptions import DuplicateError, NotFoundError, ValidationError
from ..spreadsheets.importing import ImportResult
from ..spreadsheets.reader import pick, read_rows
from .model import NewPerson, Person, PersonSummary
from .repository import PeopleRepository

logger = logging.getLogger(__name__)

NAME_COLUMNS = ("name",)
REGISTRATION_COLUMNS = ("registration no.", "registration_no")
CONTACT_COLUMNS = ("contact no.", "contact_no")


class PeopleService:
    """Use case: manage the attendance roster (admin)."""

    def __init__(self, people: PeopleRepository, *, tz_name: str = DEFAULT_TIMEZONE):
        self._people = people
        self._tz_name = tz_name

    def person_to_dict(self, person: Person) -> dict[str, Any]:
        return {
            "id": person.id,
            "uid": person.uid,
            "name": person.name,
            "registration_no": person.registration_no,
            "contact_no": person.contact_no,
        }

    def summary_to_dict(self, summary: PersonSummary) -> dict[str, Any]:
        out = self.person_to_dict(summary.person)
        out["created_at"] = local_isoformat(summary.person.created_at, self._tz_name)
        out["updated_at"] = local_isoformat(summary.person.updated_at, self._tz_name)
        out["attendance_count"] = summary.attendance_count
        return out

    def list_people(
        self,
        *,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        cutoff_date: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        try:
            sort = PeopleSortField.parse(sort_by)
            order = SortOrder(sort_order or SortOrder.ASC.value)
        except ValueError:
            raise ValidationError("Invalid sort parameters") from None

        summaries = self._people.list_with_counts(
            search=optional_text(search),
            sort=sort,
            order=order,
            cutoff=optional_date(cutoff_date),
        )
        return [self.summary_to_dict(s) for s in summaries]

    def create_person(self, *, name: Any, registration_no: Any, contact_no: Any = None) -> dict[str, Any]:
        name_s = optional_text(name)
        registration_s = optional_text(registration_no)
        if not name_s or not registration_s:
            raise ValidationError("Name and Registration No. are required")

        existing = self._people.get_by_registration(registration_s)
        if existing:
            raise DuplicateError("duplicate", existing=self.person_to_dict(existing))

        person = self._people.create(
            NewPerson(name=name_s, registration_no=registration_s, contact_no=optional_text(contact_no))
        )
        logger.info("Created person %s (%s)", person.uid, person.registration_no)
        return self.person_to_dict(person)

    def update_person(self, *, person_id: Any, name: Any, contact_no: Any = None) -> dict[str, Any]:
        if person_id in (None, "") or not optional_text(name):
            raise ValidationError("ID and Name are required")
        pid = require_int(person_id, "Invalid person ID")

        person = self._people.update(pid, name=optional_text(name), contact_no=optional_text(contact_no))
        if not person:
            raise NotFoundError("Person not found")
        logger.info("Updated person %s", person.uid)
        return self.person_to_dict(person)

    def delete_person(self, person_id: Any) -> None:
        pid = require_int(require_non_empty(person_id, "ID is required"), "Invalid person ID")
        if not self._people.delete(pid):
            raise NotFoundError("Person not found")
        logger.info("Deleted person id=%s", pid)

    def attendance_dates(self, person_id: Any) -> list[str]:
        pid = require_int(person_id, "Invalid person ID")
        return [d.strftime("%Y-%m-%d") for d in self._people.attendance_dates(pid)]

    def import_people(
        self,
        data: bytes,
        *,
        worksheet: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> ImportResult:
        """Bulk add people from a spreadsheet.

        Rows are matched to the stored roster by registration number: new
        numbers are inserted in one batch, identical rows are skipped and
        rows that differ from the stored person are reported as duplicates
        for the admin to resolve.
        """
        sheet = read_rows(data, worksheet=worksheet, filename=filename)
        logger.info("People upload: %d rows from sheet %r", len(sheet.rows), sheet.sheet_name)

        existing_by_reg = {p.registration_no: p for p in self._people.list_all()}
        queued: dict[str, NewPerson] = {}
        result = ImportResult()

        for index, row in enumerate(sheet.rows, start=1):
            name = pick(row, NAME_COLUMNS)
            registration_no = pick(row, REGISTRATION_COLUMNS)
            contact_no = pick(row, CONTACT_COLUMNS)

            if not name or not registration_no:
                logger.debug("Row %d rejected: missing name or registration", index)
                result.reject(row, "Missing name or registration number")
                continue

            incoming = {"name": name, "registration_no": registration_no, "contact_no": contact_no}

            existing = existing_by_reg.get(registration_no)
            if existing:
                if existing.name != name or (existing.contact_no or "") != contact_no:
                    logger.debug("Row %d differs from stored person %s", index, existing.uid)
                    result.duplicates.append({"existing": self.person_to_dict(existing), "new": incoming})
                else:
                    result.skipped += 1
                continue

            earlier = queued.get(registration_no)
            if earlier:
                if earlier.name != name or (earlier.contact_no or "") != contact_no:
                    result.duplicates.append(
                        {
                            "existing": {
                                "id": None,
                                "uid": None,
                                "name": earlier.name,
                                "registration_no": earlier.registration_no,
                                "contact_no": earlier.contact_no,
                            },
                            "new": incoming,
                        }
                    )
                else:
                    result.skipped += 1
                continue

            queued[registration_no] = NewPerson(name=name, registration_no=registration_no, contact_no=contact_no or None)

        if queued:
            try:
                created = self._people.create_many(list(queued.values()))
                result.added = [self.person_to_dict(p) for p in created]
            except Exception as e:
                logger.error("Batch creation of %d people failed: %s", len(queued), e, exc_info=True)
                result.errors.append({"row": {"batch": True}, "reason": str(e)})

        logger.info(
            "People upload summary: added=%d duplicates=%d skipped=%d errors=%d",
            len(result.added),
            len(result.duplicates),
            result.skipped,
            len(result.errors),
        )
        return result
