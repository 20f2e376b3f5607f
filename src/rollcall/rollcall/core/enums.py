from __future__ import annotations

from enum import Enum


class PeopleSortField(str, Enum):
    """Sort keys accepted by the people listing."""

    REGISTRATION = "registration"
    NAME = "name"
    UID = "uid"
    ATTENDANCE = "attendance"

    @classmethod
    def parse(cls, value: str | None) -> "PeopleSortField":
        if not value:
            return cls.REGISTRATION
        # The admin UI historically sent the ORM field name
        if value == "registrationNo":
            return cls.REGISTRATION
        return cls(value)


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class LabelLayout(str, Enum):
    """How labels are placed on the three label columns of a row."""

    REPEAT = "repeat"
    GRID = "grid"
