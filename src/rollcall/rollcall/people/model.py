from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Person:
    """Someone on the attendance roster."""

    id: int
    uid: Optional[str]
    name: str
    registration_no: str
    contact_no: Optional[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class PersonSummary:
    """Read-model for the people table: a person plus their attendance count."""

    person: Person
    attendance_count: int


@dataclass(frozen=True)
class NewPerson:
    name: str
    registration_no: str
    contact_no: Optional[str]
