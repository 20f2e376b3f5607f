from __future__ import annotations

from typing import Optional, Protocol

from .model import Coordinator


class CoordinatorRepository(Protocol):
    def get_by_id(self, coordinator_id: int) -> Optional[Coordinator]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Coordinator]:
        raise NotImplementedError

    def get_by_registration(self, registration_no: str) -> Optional[Coordinator]:
        raise NotImplementedError

    def create(self, *, username: str, password_hash: str, name: str, registration_no: str) -> Coordinator:
        raise NotImplementedError
