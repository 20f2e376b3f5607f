from __future__ import annotations

import io
import logging
import time
from dataclasses import dataclass
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.pagebreak import Break

from ..core.constants import (
    LABEL_CELL_COLUMNS,
    LABEL_COLUMN_WIDTHS,
    LABEL_PAGE_HEIGHT,
    LABEL_PAGE_MARGIN,
    LABEL_PRINT_SCALE,
    LABEL_SPACER_HEIGHT,
)
from ..core.enums import LabelLayout
from ..core.exceptions import ValidationError
from ..spreadsheets.reader import list_worksheets, read_rows
from .layout import LabelRow, label_text, plan_rows

logger = logging.getLogger(__name__)

LABEL_SHEET = "Labels"


@dataclass(frozen=True)
class LabelSheet:
    filename: str
    content: bytes
    label_count: int


class LabelService:
    """Use case: turn an address spreadsheet into a printable label sheet."""

    def __init__(self, *, page_height: float = LABEL_PAGE_HEIGHT, scale: int = LABEL_PRINT_SCALE):
        self._scale = scale
        # Row heights are unscaled points, so a printed page holds more of them
        self._page_budget = page_height * 100 / scale

    def build(self, data: bytes, *, filename: Optional[str] = None, layout: Optional[str] = None) -> LabelSheet:
        try:
            label_layout = LabelLayout(layout or LabelLayout.REPEAT.value)
        except ValueError:
            raise ValidationError(f"Unknown label layout: {layout!r}") from None

        sheet = read_rows(data, filename=filename, keep_blank=True)
        labels = [label_text(row) for row in sheet.rows]
        rows = plan_rows(labels, label_layout)

        content = self.render(rows)
        logger.info("Built %d labels (%s layout) from %s", len(labels), label_layout.value, filename or "upload")
        return LabelSheet(
            filename=f"labels-{int(time.time() * 1000)}.xlsx",
            content=content,
            label_count=len(labels),
        )

    def worksheets(self, data: bytes, *, filename: Optional[str] = None) -> list[str]:
        return list_worksheets(data, filename=filename)

    def render(self, rows: list[LabelRow]) -> bytes:
        workbook = Workbook()
        worksheet = workbook.active
        worksheet.title = LABEL_SHEET

        for index, width in enumerate(LABEL_COLUMN_WIDTHS, start=1):
            worksheet.column_dimensions[get_column_letter(index)].width = width

        alignment = Alignment(wrap_text=True, horizontal="center", vertical="center")
        page_used = 0.0
        sheet_row = 0

        for row in rows:
            # Start a new page when this label row would not fit on the current one
            if page_used and page_used + row.height > self._page_budget:
                worksheet.row_breaks.append(Break(id=sheet_row))
                page_used = 0.0

            sheet_row += 1
            for column in LABEL_CELL_COLUMNS:
                cell = worksheet.cell(row=sheet_row, column=column + 1, value=row.values[column])
                cell.alignment = alignment
            worksheet.row_dimensions[sheet_row].height = row.height

            # Thin empty spacer row between labels
            sheet_row += 1
            worksheet.row_dimensions[sheet_row].height = LABEL_SPACER_HEIGHT
            page_used += row.height + LABEL_SPACER_HEIGHT

        worksheet.page_setup.orientation = "portrait"
        worksheet.page_setup.paperSize = worksheet.PAPERSIZE_A4
        # Manual row breaks only apply at a fixed scale, never with fit-to-page
        worksheet.page_setup.scale = self._scale
        for side in ("top", "bottom", "left", "right"):
            setattr(worksheet.page_margins, side, LABEL_PAGE_MARGIN)

        output = io.BytesIO()
        workbook.save(output)
        return output.getvalue()
