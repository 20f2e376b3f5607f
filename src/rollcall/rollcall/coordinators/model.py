from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Coordinator:
    """Event coordinator; owns a list of volunteers and their sessions.

    password_hash never leaves the service layer.
    """

    id: int
    username: str
    password_hash: str
    name: str
    registration_no: str
    created_at: Optional[datetime] = None
