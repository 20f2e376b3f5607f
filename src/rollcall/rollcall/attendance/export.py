from __future__ import annotations

import io
from typing import Sequence

import pandas as pd
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from ..core.constants import EXPORT_HEADER_FILL
from ..people.model import PersonSummary

REPORT_SHEET = "Attendance Report"

# (header, width in characters)
REPORT_COLUMNS = (
    ("UID", 15),
    ("Name", 30),
    ("Registration No.", 20),
    ("Contact No.", 20),
    ("Total Attendance Days", 20),
)


def build_attendance_workbook(rows: Sequence[PersonSummary]) -> bytes:
    """Attendance totals per person as an .xlsx file."""
    data = [
        {
            "UID": r.person.uid or "",
            "Name": r.person.name,
            "Registration No.": r.person.registration_no,
            "Contact No.": r.person.contact_no or "",
            "Total Attendance Days": r.attendance_count,
        }
        for r in rows
    ]
    df = pd.DataFrame(data, columns=[header for header, _ in REPORT_COLUMNS])

    # Written in memory, never to disk
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=REPORT_SHEET)
        sheet = writer.sheets[REPORT_SHEET]

        for index, (_, width) in enumerate(REPORT_COLUMNS, start=1):
            sheet.column_dimensions[get_column_letter(index)].width = width

        header_font = Font(bold=True, color="FFFFFFFF")
        header_fill = PatternFill(fill_type="solid", fgColor=f"FF{EXPORT_HEADER_FILL}")
        for cell in sheet[1]:
            cell.font = header_font
            cell.fill = header_fill

    return output.getvalue()
