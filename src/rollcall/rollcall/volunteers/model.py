from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Volunteer:
    id: int
    coordinator_id: int
    name: str
    registration_no: str
    contact_no: str
    uid: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewVolunteer:
    coordinator_id: int
    name: str
    registration_no: str
    contact_no: str
    uid: Optional[str] = None


@dataclass(frozen=True)
class VolunteerOwner:
    """A stored volunteer together with the name of the coordinator that owns it."""

    volunteer: Volunteer
    coordinator_name: str
