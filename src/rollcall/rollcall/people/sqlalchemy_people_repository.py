from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from sqlalchemy import and_, func, or_
from sqlalchemy.exc import IntegrityError

from ..core.constants import UID_PREFIX
from ..core.enums import PeopleSortField, SortOrder
from ..core.exceptions import DuplicateError
from ..database.session import SessionFactory, transaction
from ..database.tables import AttendanceRow, PersonRow
from .model import NewPerson, Person, PersonSummary
from .repository import PeopleRepository


def to_person(row: PersonRow) -> Person:
    return Person(
        id=int(row.id),
        uid=row.uid,
        name=row.name,
        registration_no=row.registration_no,
        contact_no=row.contact_no,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SQLAlchemyPeopleRepository(PeopleRepository):
    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    def list_with_counts(
        self,
        *,
        search: Optional[str] = None,
        sort: PeopleSortField = PeopleSortField.REGISTRATION,
        order: SortOrder = SortOrder.ASC,
        cutoff: Optional[date] = None,
    ) -> Sequence[PersonSummary]:
        with transaction(self._session_factory) as s:
            join_on = AttendanceRow.person_id == PersonRow.id
            if cutoff is not None:
                join_on = and_(join_on, AttendanceRow.date <= cutoff)

            attendance_count = func.count(AttendanceRow.id).label("attendance_count")
            query = (
                s.query(PersonRow, attendance_count)
                .outerjoin(AttendanceRow, join_on)
                .group_by(PersonRow.id)
            )

            if search:
                pattern = f"%{search}%"
                query = query.filter(
                    or_(
                        PersonRow.name.ilike(pattern),
                        PersonRow.registration_no.ilike(pattern),
                        PersonRow.contact_no.ilike(pattern),
                        PersonRow.uid.ilike(pattern),
                    )
                )

            sort_column = {
                PeopleSortField.REGISTRATION: PersonRow.registration_no,
                PeopleSortField.NAME: PersonRow.name,
                PeopleSortField.UID: PersonRow.uid,
                PeopleSortField.ATTENDANCE: attendance_count,
            }[sort]
            primary = sort_column.desc() if order == SortOrder.DESC else sort_column.asc()
            query = query.order_by(primary, PersonRow.id.asc())

            return [PersonSummary(person=to_person(row), attendance_count=int(count)) for row, count in query.all()]

    def list_all(self) -> Sequence[Person]:
        with transaction(self._session_factory) as s:
            return [to_person(r) for r in s.query(PersonRow).order_by(PersonRow.id).all()]

    def get_by_id(self, person_id: int) -> Optional[Person]:
        with transaction(self._session_factory) as s:
            row = s.get(PersonRow, person_id)
            return to_person(row) if row else None

    def get_by_registration(self, registration_no: str) -> Optional[Person]:
        with transaction(self._session_factory) as s:
            row = s.query(PersonRow).filter(PersonRow.registration_no == registration_no).one_or_none()
            return to_person(row) if row else None

    def create(self, person: NewPerson) -> Person:
        return self.create_many([person])[0]

    def create_many(self, people: Sequence[NewPerson]) -> Sequence[Person]:
        if not people:
            return []
        try:
            with transaction(self._session_factory) as s:
                rows = [
                    PersonRow(name=p.name, registration_no=p.registration_no, contact_no=p.contact_no)
                    for p in people
                ]
                s.add_all(rows)
                s.flush()
                # The UID is derived from the generated primary key
                for row in rows:
                    row.uid = f"{UID_PREFIX}{row.id}"
                s.flush()
                return [to_person(r) for r in rows]
        except IntegrityError as e:
            raise DuplicateError("Registration number already exists") from e

    def update(self, person_id: int, *, name: str, contact_no: Optional[str]) -> Optional[Person]:
        with transaction(self._session_factory) as s:
            row = s.get(PersonRow, person_id)
            if not row:
                return None
            row.name = name
            row.contact_no = contact_no
            s.flush()
            return to_person(row)

    def delete(self, person_id: int) -> bool:
        with transaction(self._session_factory) as s:
            row = s.get(PersonRow, person_id)
            if not row:
                return False
            s.delete(row)
            return True

    def attendance_dates(self, person_id: int) -> Sequence[date]:
        with transaction(self._session_factory) as s:
            rows = (
                s.query(AttendanceRow.date)
                .filter(AttendanceRow.person_id == person_id)
                .order_by(AttendanceRow.date.desc())
                .all()
            )
            return [r.date for r in rows]

    def uids_by_registration(self, registration_nos: Sequence[str]) -> dict[str, Optional[str]]:
        if not registration_nos:
            return {}
        with transaction(self._session_factory) as s:
            rows = (
                s.query(PersonRow.registration_no, PersonRow.uid)
                .filter(PersonRow.registration_no.in_(list(registration_nos)))
                .all()
            )
            return {r.registration_no: r.uid for r in rows}

    def existing_ids(self, person_ids: Sequence[int]) -> set[int]:
        if not person_ids:
            return set()
        with transaction(self._session_factory) as s:
            rows = s.query(PersonRow.id).filter(PersonRow.id.in_(list(person_ids))).all()
            return {int(r.id) for r in rows}
