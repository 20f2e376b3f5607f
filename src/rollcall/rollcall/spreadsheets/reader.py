"""Uploaded spreadsheet reading (pandas; openpyxl for .xlsx, xlrd for legacy .xls)."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Optional

import pandas as pd

from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Legacy .xls workbooks are OLE2 compound documents
OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


@dataclass(frozen=True)
class SheetData:
    sheet_name: str
    rows: list[dict[str, Any]]


def _is_csv(filename: Optional[str]) -> bool:
    return bool(filename) and filename.lower().endswith(".csv")


def excel_engine(data: bytes) -> str:
    return "xlrd" if data.startswith(OLE2_SIGNATURE) else "openpyxl"


def _open_workbook(data: bytes) -> pd.ExcelFile:
    if not data:
        raise ValidationError("Uploaded file is empty")
    try:
        return pd.ExcelFile(io.BytesIO(data), engine=excel_engine(data))
    except Exception as e:
        logger.warning("Unreadable workbook upload: %s", e)
        raise ValidationError(f"Could not read spreadsheet: {e}") from e


def list_worksheets(data: bytes, *, filename: Optional[str] = None) -> list[str]:
    if _is_csv(filename):
        return ["Sheet1"]
    with _open_workbook(data) as workbook:
        return list(workbook.sheet_names)


def read_rows(
    data: bytes,
    *,
    worksheet: Optional[str] = None,
    filename: Optional[str] = None,
    keep_blank: bool = False,
) -> SheetData:
    """Read one sheet as a list of header -> value dicts.

    The named worksheet is used when the workbook has it, otherwise the first
    sheet. Fully blank rows are dropped. Empty cells are left out of the row
    dict unless `keep_blank` is set, in which case they read as "".
    """
    if _is_csv(filename):
        if not data:
            raise ValidationError("Uploaded file is empty")
        try:
            frame = pd.read_csv(io.BytesIO(data), dtype=object)
        except Exception as e:
            raise ValidationError(f"Could not read spreadsheet: {e}") from e
        sheet_name = "Sheet1"
    else:
        with _open_workbook(data) as workbook:
            names = list(workbook.sheet_names)
            if not names:
                raise ValidationError("Worksheet not found")
            sheet_name = worksheet if worksheet and worksheet in names else names[0]
            frame = workbook.parse(sheet_name, dtype=object)

    frame = frame.dropna(how="all")

    rows: list[dict[str, Any]] = []
    for record in frame.to_dict(orient="records"):
        row: dict[str, Any] = {}
        for key, value in record.items():
            if _is_blank(value):
                if keep_blank:
                    row[str(key)] = ""
                continue
            row[str(key)] = value
        rows.append(row)

    logger.debug("Read %d rows from sheet %r", len(rows), sheet_name)
    return SheetData(sheet_name=sheet_name, rows=rows)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def cell_text(value: Any) -> str:
    """Cell value as trimmed text; whole floats lose their '.0'."""
    if _is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d") if value.time() == datetime.min.time() else value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    return str(value).strip()


def _normalize_header(header: str) -> str:
    return str(header).strip().lower()


def pick(row: dict[str, Any], aliases: Iterable[str]) -> str:
    """First non-empty value among the columns named by `aliases`.

    Header matching ignores case and surrounding whitespace.
    """
    normalized = {_normalize_header(k): v for k, v in row.items()}
    for alias in aliases:
        text = cell_text(normalized.get(_normalize_header(alias)))
        if text:
            return text
    return ""
