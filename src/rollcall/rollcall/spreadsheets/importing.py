from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ImportResult:
    """Outcome of a roster upload.

    added: rows inserted; duplicates: rows whose registration number exists
    with different data; errors: rows rejected with a reason; skipped: rows
    identical to what is stored.
    """

    added: list[dict[str, Any]] = field(default_factory=list)
    duplicates: list[dict[str, Any]] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)
    skipped: int = 0

    def reject(self, row: dict[str, Any], reason: str) -> None:
        self.errors.append({"row": _json_row(row), "reason": reason})

    def to_dict(self) -> dict[str, Any]:
        return {
            "added": self.added,
            "duplicates": self.duplicates,
            "errors": self.errors,
            "skipped": self.skipped,
        }


def _json_row(row: dict[str, Any]) -> dict[str, Any]:
    # Spreadsheet cells may hold numpy/pandas scalars that jsonify cannot encode
    out: dict[str, Any] = {}
    for key, value in row.items():
        if isinstance(value, (str, int, float, bool)) or value is None:
            out[str(key)] = value
        else:
            out[str(key)] = str(value)
    return out
