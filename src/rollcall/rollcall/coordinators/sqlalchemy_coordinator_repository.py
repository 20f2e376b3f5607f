from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import IntegrityError

from ..core.exceptions import ValidationError
from ..database.session import SessionFactory, transaction
from ..database.tables import CoordinatorRow
from .model import Coordinator
from .repository import CoordinatorRepository


def to_coordinator(row: CoordinatorRow) -> Coordinator:
    return Coordinator(
        id=int(row.id),
        username=row.username,
        password_hash=row.password,
        name=row.name,
        registration_no=row.registration_no,
        created_at=row.created_at,
    )


class SQLAlchemyCoordinatorRepository(CoordinatorRepository):
    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    def get_by_id(self, coordinator_id: int) -> Optional[Coordinator]:
        with transaction(self._session_factory) as s:
            row = s.get(CoordinatorRow, coordinator_id)
            return to_coordinator(row) if row else None

    def get_by_username(self, username: str) -> Optional[Coordinator]:
        with transaction(self._session_factory) as s:
            row = s.query(CoordinatorRow).filter(CoordinatorRow.username == username).one_or_none()
            return to_coordinator(row) if row else None

    def get_by_registration(self, registration_no: str) -> Optional[Coordinator]:
        with transaction(self._session_factory) as s:
            row = s.query(CoordinatorRow).filter(CoordinatorRow.registration_no == registration_no).one_or_none()
            return to_coordinator(row) if row else None

    def create(self, *, username: str, password_hash: str, name: str, registration_no: str) -> Coordinator:
        try:
            with transaction(self._session_factory) as s:
                row = CoordinatorRow(
                    username=username,
                    password=password_hash,
                    name=name,
                    registration_no=registration_no,
                )
                s.add(row)
                s.flush()
                return to_coordinator(row)
        except IntegrityError as e:
            raise ValidationError("Username or registration number already exists") from e
