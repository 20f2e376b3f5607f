from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: Optional[str], message: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(message)
    return str(value).strip()


def optional_text(value: Any) -> Optional[str]:
    """Trimmed text, or None for missing/blank values."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def require_int(value: Any, message: str) -> int:
    if value is None or isinstance(value, bool):
        raise ValidationError(message)
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(message) from None


def require_date(value: Optional[str], message: str) -> date:
    if not value:
        raise ValidationError(message)
    try:
        return parse_iso_date(str(value).strip())
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)") from None


def optional_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    return require_date(value, "Invalid date")
