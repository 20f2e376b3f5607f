from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import EventSession


class EventSessionRepository(Protocol):
    def list_for_coordinator(self, coordinator_id: int) -> Sequence[EventSession]:
        raise NotImplementedError

    def create(self, coordinator_id: int, volunteer_ids: Sequence[int], at: datetime) -> EventSession:
        raise NotImplementedError

    def get(self, session_id: int) -> Optional[EventSession]:
        raise NotImplementedError

    def set_presence(self, session_id: int, present_ids: set[int], at: datetime) -> Optional[EventSession]:
        raise NotImplementedError
