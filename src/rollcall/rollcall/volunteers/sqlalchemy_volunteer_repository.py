from __future__ import annotations

from typing import Sequence

from sqlalchemy.exc import IntegrityError

from ..core.exceptions import DuplicateError
from ..database.session import SessionFactory, transaction
from ..database.tables import CoordinatorRow, VolunteerRow
from .model import NewVolunteer, Volunteer, VolunteerOwner
from .repository import VolunteerRepository


def to_volunteer(row: VolunteerRow) -> Volunteer:
    return Volunteer(
        id=int(row.id),
        coordinator_id=int(row.coordinator_id),
        name=row.name,
        registration_no=row.registration_no,
        contact_no=row.contact_no,
        uid=row.uid,
        created_at=row.created_at,
    )


class SQLAlchemyVolunteerRepository(VolunteerRepository):
    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    def list_for_coordinator(self, coordinator_id: int) -> Sequence[Volunteer]:
        with transaction(self._session_factory) as s:
            rows = (
                s.query(VolunteerRow)
                .filter(VolunteerRow.coordinator_id == coordinator_id)
                .order_by(VolunteerRow.name.asc(), VolunteerRow.id.asc())
                .all()
            )
            return [to_volunteer(r) for r in rows]

    def owners_by_registration(self, registration_nos: Sequence[str]) -> Sequence[VolunteerOwner]:
        if not registration_nos:
            return []
        with transaction(self._session_factory) as s:
            rows = (
                s.query(VolunteerRow, CoordinatorRow.name)
                .join(CoordinatorRow, CoordinatorRow.id == VolunteerRow.coordinator_id)
                .filter(VolunteerRow.registration_no.in_(list(registration_nos)))
                .all()
            )
            return [VolunteerOwner(volunteer=to_volunteer(v), coordinator_name=name) for v, name in rows]

    def create_many(self, volunteers: Sequence[NewVolunteer]) -> Sequence[Volunteer]:
        if not volunteers:
            return []
        try:
            with transaction(self._session_factory) as s:
                rows = [
                    VolunteerRow(
                        coordinator_id=v.coordinator_id,
                        name=v.name,
                        registration_no=v.registration_no,
                        contact_no=v.contact_no,
                        uid=v.uid,
                    )
                    for v in volunteers
                ]
                s.add_all(rows)
                s.flush()
                return [to_volunteer(r) for r in rows]
        except IntegrityError as e:
            raise DuplicateError("Volunteer already exists for this coordinator") from e
