"""Label text and row-height arithmetic for the label sheet."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Sequence

from ..core.constants import LABEL_CELL_COLUMNS, LABEL_COLUMN_WIDTHS, LABEL_LINE_HEIGHT
from ..core.enums import LabelLayout
from ..spreadsheets.reader import pick

NAME_COLUMN = "name"
CONTACT_COLUMN = "ph. no."
ADDRESS_COLUMN = "add."
SENDER_COLUMN = "from"


def label_text(row: dict[str, Any]) -> str:
    name = pick(row, (NAME_COLUMN,))
    contact = pick(row, (CONTACT_COLUMN,))
    address = pick(row, (ADDRESS_COLUMN,))
    sender = pick(row, (SENDER_COLUMN,))
    return f"{name}\n{contact}\n{address}\n\nFrom:{sender}"


def estimate_lines(text: str, column_width: int) -> int:
    """Lines a wrapped cell needs: each hard line wraps every `column_width` chars."""
    if not text:
        return 1
    width = max(1, column_width)
    lines = 0
    for line in re.split(r"\r?\n", str(text)):
        lines += max(1, math.ceil(len(line) / width))
    return max(1, lines)


@dataclass(frozen=True)
class LabelRow:
    values: tuple[str, ...]
    height: float


def row_height(values: Sequence[str]) -> float:
    max_lines = 1
    for index in LABEL_CELL_COLUMNS:
        lines = estimate_lines(values[index], LABEL_COLUMN_WIDTHS[index])
        max_lines = max(max_lines, lines)
    return max_lines * LABEL_LINE_HEIGHT


def plan_rows(labels: Sequence[str], layout: LabelLayout = LabelLayout.REPEAT) -> list[LabelRow]:
    """Place labels on sheet rows.

    REPEAT prints each label three times across one row; GRID fills the
    three label columns left to right.
    """
    width = len(LABEL_COLUMN_WIDTHS)
    rows: list[LabelRow] = []

    if layout == LabelLayout.REPEAT:
        groups = [[label] * len(LABEL_CELL_COLUMNS) for label in labels]
    else:
        per_row = len(LABEL_CELL_COLUMNS)
        groups = [list(labels[i:i + per_row]) for i in range(0, len(labels), per_row)]

    for group in groups:
        values = [""] * width
        for column, label in zip(LABEL_CELL_COLUMNS, group):
            values[column] = label
        rows.append(LabelRow(values=tuple(values), height=row_height(values)))
    return rows
