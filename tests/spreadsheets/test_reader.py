import pandas as pd
import pytest

from src.rollcall.rollcall.core.exceptions import ValidationError
from src.rollcall.rollcall.spreadsheets import reader

LEGACY_XLS = reader.OLE2_SIGNATURE + b"\x00" * 504


class FakeExcelFile:
    """Stands in for pandas.ExcelFile, recording which engine was asked for."""

    engines: list = []

    def __init__(self, source, engine=None):
        FakeExcelFile.engines.append(engine)
        self.sheet_names = ["Legacy"]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def parse(self, sheet_name, dtype=None):
        return pd.DataFrame([{"name": "Asha", "registration_no": "R1"}])


@pytest.fixture
def fake_excel(monkeypatch):
    FakeExcelFile.engines = []
    monkeypatch.setattr(reader.pd, "ExcelFile", FakeExcelFile)
    return FakeExcelFile


def test_engine_from_file_signature(make_xlsx):
    assert reader.excel_engine(LEGACY_XLS) == "xlrd"
    assert reader.excel_engine(make_xlsx({"Sheet1": [{"a": 1}]})) == "openpyxl"


def test_legacy_xls_read_with_xlrd(fake_excel):
    sheet = reader.read_rows(LEGACY_XLS, filename="people.xls")

    assert fake_excel.engines == ["xlrd"]
    assert sheet.sheet_name == "Legacy"
    assert sheet.rows == [{"name": "Asha", "registration_no": "R1"}]


def test_legacy_xls_worksheets(fake_excel):
    assert reader.list_worksheets(LEGACY_XLS, filename="people.xls") == ["Legacy"]
    assert fake_excel.engines == ["xlrd"]


def test_xlsx_named_xls_still_read(make_xlsx):
    data = make_xlsx({"Roster": [{"name": "Ben", "registration_no": "R2"}]})

    sheet = reader.read_rows(data, filename="roster.xls")

    assert sheet.sheet_name == "Roster"
    assert sheet.rows == [{"name": "Ben", "registration_no": "R2"}]


def test_unreadable_workbook_rejected():
    with pytest.raises(ValidationError):
        reader.read_rows(b"not a workbook", filename="junk.xlsx")
