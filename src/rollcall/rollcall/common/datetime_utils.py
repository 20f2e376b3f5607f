from __future__ import annotations

from datetime import date, datetime
from typing import Optional

import pytz

from ..core.constants import DEFAULT_TIMEZONE


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def utc_now() -> datetime:
    """Current UTC time as a naive datetime (the form stored in the database)."""
    return datetime.now(pytz.utc).replace(tzinfo=None)


def local_now(tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    return datetime.now(pytz.timezone(tz_name))


def local_today(tz_name: str = DEFAULT_TIMEZONE) -> date:
    return local_now(tz_name).date()


def to_local(value: datetime, tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Convert a stored timestamp to the display timezone.

    Naive values are taken to be UTC.
    """
    if value.tzinfo is None:
        value = pytz.utc.localize(value)
    return value.astimezone(pytz.timezone(tz_name))


def local_isoformat(value: Optional[datetime], tz_name: str = DEFAULT_TIMEZONE) -> Optional[str]:
    if value is None:
        return None
    return to_local(value, tz_name).isoformat()


def local_date_string(value: Optional[datetime] = None, tz_name: str = DEFAULT_TIMEZONE) -> str:
    """YYYY-MM-DD of `value` (or now) in the display timezone."""
    if value is None:
        return local_today(tz_name).strftime("%Y-%m-%d")
    return to_local(value, tz_name).strftime("%Y-%m-%d")
