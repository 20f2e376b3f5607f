import io

import pytest
from openpyxl import load_workbook

from src.rollcall.rollcall.core.exceptions import ValidationError
from src.rollcall.rollcall.labels.service import LabelService

ADDRESSES = [
    {"name": "Asha", "ph. no.": "111", "add.": "12 MG Road", "from": "Office"},
    {"name": "Ben", "ph. no.": "222", "add.": "4 Park Street", "from": "Office"},
    {"name": "Cara", "ph. no.": "333", "add.": "9 Lake View", "from": "Office"},
]


def _sheet(content: bytes):
    return load_workbook(io.BytesIO(content))["Labels"]


def test_repeat_layout_writes_label_and_spacer_rows(make_xlsx):
    result = LabelService().build(make_xlsx({"Sheet1": ADDRESSES}), filename="addresses.xlsx")
    sheet = _sheet(result.content)

    assert result.label_count == 3
    assert result.filename.startswith("labels-") and result.filename.endswith(".xlsx")
    # One label row plus one spacer row per label
    assert sheet["A3"].value.startswith("Ben")
    assert sheet["A5"].value.startswith("Cara")
    assert sheet.row_dimensions[6].height == 6
    assert sheet["A1"].value == "Asha\n111\n12 MG Road\n\nFrom:Office"
    assert sheet["C1"].value == sheet["A1"].value
    assert sheet["E1"].value == sheet["A1"].value
    assert sheet["B1"].value is None
    assert sheet["A1"].alignment.wrap_text
    assert sheet["A1"].alignment.horizontal == "center"
    assert sheet.row_dimensions[1].height == 75
    assert sheet.row_dimensions[2].height == 6
    assert [sheet.column_dimensions[c].width for c in "ABCDE"] == [45, 3, 45, 3, 45]


def test_grid_layout(make_xlsx):
    result = LabelService().build(make_xlsx({"Sheet1": ADDRESSES}), layout="grid")
    sheet = _sheet(result.content)

    assert sheet["A1"].value.startswith("Asha")
    assert sheet["A3"].value is None
    assert sheet["C1"].value.startswith("Ben")
    assert sheet["E1"].value.startswith("Cara")


def test_page_breaks_when_rows_overflow(make_xlsx):
    many = [dict(ADDRESSES[0], name=f"Person {i}") for i in range(20)]
    result = LabelService(page_height=200, scale=100).build(make_xlsx({"Sheet1": many}))
    sheet = _sheet(result.content)

    # 75pt label + 6pt spacer: two label rows fit on a 200pt page at 100%
    breaks = [b.id for b in sheet.row_breaks.brk]
    assert breaks[:3] == [4, 8, 12]


def test_page_breaks_follow_print_scale(make_xlsx):
    many = [dict(ADDRESSES[0], name=f"Person {i}") for i in range(40)]
    result = LabelService().build(make_xlsx({"Sheet1": many}))
    sheet = _sheet(result.content)

    setup = sheet.sheet_properties.pageSetUpPr
    assert setup is None or not setup.fitToPage
    assert sheet.page_setup.scale == 65
    assert sheet.page_setup.paperSize == sheet.PAPERSIZE_A4
    assert sheet.page_margins.top == 0.5
    assert sheet.page_margins.bottom == 0.5

    # 14 label rows of 81pt print at 65% in 737pt, a 15th would overflow 770pt
    breaks = [b.id for b in sheet.row_breaks.brk]
    assert breaks == [28, 56]

    last_row = len(many) * 2
    starts = [0] + breaks
    ends = breaks + [last_row]
    for start, end in zip(starts, ends):
        printed = sum(sheet.row_dimensions[r].height for r in range(start + 1, end + 1)) * 0.65
        assert printed <= 770


def test_unknown_layout_rejected(make_xlsx):
    with pytest.raises(ValidationError):
        LabelService().build(make_xlsx({"Sheet1": ADDRESSES}), layout="spiral")


def test_empty_upload_rejected():
    with pytest.raises(ValidationError):
        LabelService().build(b"")


def test_worksheets(make_xlsx):
    data = make_xlsx({"One": ADDRESSES, "Two": ADDRESSES})

    assert LabelService().worksheets(data) == ["One", "Two"]
