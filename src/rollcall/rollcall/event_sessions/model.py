from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..coordinators.model import Coordinator
from ..volunteers.model import Volunteer


@dataclass(frozen=True)
class EventRecord:
    id: int
    session_id: int
    volunteer_id: int
    is_present: bool
    marked_at: Optional[datetime]
    volunteer: Optional[Volunteer] = None


@dataclass(frozen=True)
class EventSession:
    """One roll call taken by a coordinator; holds a record per volunteer."""

    id: int
    coordinator_id: int
    session_datetime: datetime
    created_at: datetime
    records: tuple[EventRecord, ...] = field(default_factory=tuple)
    coordinator: Optional[Coordinator] = None
