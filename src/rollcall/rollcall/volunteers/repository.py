from __future__ import annotations

from typing import Protocol, Sequence

from .model import NewVolunteer, Volunteer, VolunteerOwner


class VolunteerRepository(Protocol):
    def list_for_coordinator(self, coordinator_id: int) -> Sequence[Volunteer]:
        raise NotImplementedError

    def owners_by_registration(self, registration_nos: Sequence[str]) -> Sequence[VolunteerOwner]:
        raise NotImplementedError

    def create_many(self, volunteers: Sequence[NewVolunteer]) -> Sequence[Volunteer]:
        raise NotImplementedError
