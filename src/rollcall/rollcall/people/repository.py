from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import PeopleSortField, SortOrder
from .model import NewPerson, Person, PersonSummary


class PeopleRepository(Protocol):
    def list_with_counts(
        self,
        *,
        search: Optional[str] = None,
        sort: PeopleSortField = PeopleSortField.REGISTRATION,
        order: SortOrder = SortOrder.ASC,
        cutoff: Optional[date] = None,
    ) -> Sequence[PersonSummary]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Person]:
        raise NotImplementedError

    def get_by_id(self, person_id: int) -> Optional[Person]:
        raise NotImplementedError

    def get_by_registration(self, registration_no: str) -> Optional[Person]:
        raise NotImplementedError

    def create(self, person: NewPerson) -> Person:
        """Insert and assign the UID in the same transaction."""

        raise NotImplementedError

    def create_many(self, people: Sequence[NewPerson]) -> Sequence[Person]:
        raise NotImplementedError

    def update(self, person_id: int, *, name: str, contact_no: Optional[str]) -> Optional[Person]:
        raise NotImplementedError

    def delete(self, person_id: int) -> bool:
        raise NotImplementedError

    def attendance_dates(self, person_id: int) -> Sequence[date]:
        """Dates the person was marked present, newest first."""

        raise NotImplementedError

    def existing_ids(self, person_ids: Sequence[int]) -> set[int]:
        raise NotImplementedError

    def uids_by_registration(self, registration_nos: Sequence[str]) -> dict[str, Optional[str]]:
        raise NotImplementedError
