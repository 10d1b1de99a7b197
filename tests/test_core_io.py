"""Tests for core.io — format detection, XLSX/CSV decoding, merges, failures."""
from __future__ import annotations

import datetime as dt
import os
from io import BytesIO

import pytest
import xlrd
from openpyxl import Workbook

from core.errors import AppError, DECODE_FAILED, SOURCE_READ_FAILED
import core.io as io_mod
from core.io import CSV_SHEET_NAME, decode, detect_format, load_workbook_file
from core.models import EMPTY, CellValue, MergeRange


def _xlsx_bytes(build) -> bytes:
    wb = Workbook()
    build(wb)
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


def _scenario_book(wb):
    ws = wb.active
    ws.title = "Sales"
    ws.append(["Name", "Q1"])
    ws.append(["Acme", 100])
    ws.append([None, 200])
    ws.merge_cells("A2:A3")
    wb.create_sheet("Blank")


def test_detect_format_by_extension():
    assert detect_format(b"", "a.xlsx") == "xlsx"
    assert detect_format(b"", "a.XLSM") == "xlsx"
    assert detect_format(b"", "a.xls") == "xls"
    assert detect_format(b"", "a.csv") == "csv"


def test_detect_format_by_signature():
    assert detect_format(b"PK\x03\x04rest") == "xlsx"
    assert detect_format(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1rest") == "xls"
    assert detect_format(b"a,b\n1,2\n") == "csv"


def test_detect_format_rejects_unknown_binary():
    with pytest.raises(AppError) as ei:
        detect_format(b"\x00\x01\x02binary", "blob.bin")
    assert ei.value.code == DECODE_FAILED


def test_decode_xlsx_sheets_rows_and_merges():
    wb = decode(_xlsx_bytes(_scenario_book), "report.xlsx")
    assert wb.sheet_names == ["Sales", "Blank"]
    assert wb.file_name == "report.xlsx"

    sales = wb.sheets["Sales"]
    assert sales.rows[0] == [CellValue.text("Name"), CellValue.text("Q1")]
    assert sales.rows[1] == [CellValue.text("Acme"), CellValue.number(100)]
    # Covered cell of the merge decodes as empty.
    assert sales.rows[2][0] == EMPTY
    assert sales.merges == [MergeRange(1, 0, 2, 0)]


def test_decode_xlsx_blank_sheet_has_no_rows():
    wb = decode(_xlsx_bytes(_scenario_book), "report.xlsx")
    blank = wb.sheets["Blank"]
    assert blank.rows == []
    assert blank.merges == []


def test_decode_xlsx_without_extension_sniffs_zip():
    wb = decode(_xlsx_bytes(_scenario_book))
    assert wb.sheet_names[0] == "Sales"


def test_decode_xlsx_merge_beyond_data():
    def build(wb):
        ws = wb.active
        ws.append(["only"])
        ws.merge_cells("D5:F6")
    sheet = decode(_xlsx_bytes(build), "wide.xlsx").sheets["Sheet"]
    assert MergeRange(4, 3, 5, 5) in sheet.merges


def test_decode_csv_single_sheet_ragged_rows():
    data = "\ufeffName,Q1\nAcme,100\nsolo\n".encode("utf-8")
    wb = decode(data, "data.csv")
    assert wb.sheet_names == [CSV_SHEET_NAME]
    sheet = wb.sheets[CSV_SHEET_NAME]
    assert sheet.rows[0][0] == CellValue.text("Name")
    assert sheet.rows[1] == [CellValue.text("Acme"), CellValue.text("100")]
    assert len(sheet.rows[2]) == 1
    assert sheet.merges == []


def test_decode_csv_empty_fields_are_empty_values():
    sheet = decode(b"a,,c\n", "x.csv").sheets[CSV_SHEET_NAME]
    assert sheet.rows[0][1] == EMPTY


def test_decode_empty_bytes_fails():
    with pytest.raises(AppError) as ei:
        decode(b"", "empty.xlsx")
    assert ei.value.code == DECODE_FAILED


def test_decode_corrupt_xlsx_fails_with_decode_error():
    with pytest.raises(AppError) as ei:
        decode(b"PK\x03\x04 definitely not a workbook", "broken.xlsx")
    assert ei.value.code == DECODE_FAILED
    assert ei.value.details["format"] == "xlsx"


def test_decode_corrupt_xls_fails_with_decode_error():
    with pytest.raises(AppError) as ei:
        decode(b"not an ole2 file at all", "legacy.xls")
    assert ei.value.code == DECODE_FAILED


def test_decode_bad_csv_encoding_fails():
    with pytest.raises(AppError) as ei:
        decode(b"\xff\xfe\xfa\xfb", "latin.csv")
    assert ei.value.code == DECODE_FAILED


def test_load_workbook_file_reads_from_disk(tmp_path):
    p = tmp_path / "book.xlsx"
    p.write_bytes(_xlsx_bytes(_scenario_book))
    wb = load_workbook_file(str(p))
    assert wb.file_name == "book.xlsx"
    assert "Sales" in wb.sheets


def test_load_workbook_file_missing(tmp_path):
    with pytest.raises(AppError) as ei:
        load_workbook_file(os.path.join(str(tmp_path), "missing.xlsx"))
    assert ei.value.code == SOURCE_READ_FAILED


# ── Legacy .xls ───────────────────────────────────────────────────────────────

def _xls_bytes() -> bytes:
    xlwt = pytest.importorskip("xlwt")
    book = xlwt.Workbook()
    ws = book.add_sheet("Legacy")
    for c, title in enumerate(["Name", "Q1", "When", "Flag"]):
        ws.write(0, c, title)
    ws.write_merge(1, 2, 0, 1, "Acme")
    ws.write(1, 2, dt.datetime(2024, 1, 15), xlwt.easyxf(num_format_str="YYYY-MM-DD"))
    ws.write(1, 3, True)
    ws.write(2, 2, 200)
    ws.write(2, 3, "")
    buf = BytesIO()
    book.save(buf)
    return buf.getvalue()


def test_decode_xls_merges_are_inclusive():
    sheet = decode(_xls_bytes(), "legacy.xls").sheets["Legacy"]
    # A2:B3 on disk; xlrd reports it half-open as (1, 3, 0, 2).
    assert sheet.merges == [MergeRange(1, 0, 2, 1)]


def test_decode_xls_cell_kinds():
    wb = decode(_xls_bytes(), "legacy.xls")
    assert wb.sheet_names == ["Legacy"]
    rows = wb.sheets["Legacy"].rows
    assert rows[1][0] == CellValue.text("Acme")
    assert rows[1][1] == EMPTY
    assert rows[2][0] == EMPTY
    assert rows[1][2] == CellValue.text("2024-01-15T00:00:00")
    assert rows[1][3] == CellValue.text("TRUE")
    assert rows[2][2] == CellValue.number(200)
    assert rows[2][3] == EMPTY


class _FakeSheet:
    def __init__(self, name, cells, merged_cells):
        self.name = name
        self._cells = cells
        self.nrows = len(cells)
        self.merged_cells = merged_cells

    def row(self, r):
        return self._cells[r]


class _FakeBook:
    datemode = 0

    def __init__(self, *sheets):
        self._sheets = list(sheets)
        self.released = False

    def sheets(self):
        return self._sheets

    def release_resources(self):
        self.released = True


def test_decode_xls_error_cells_and_degenerate_merges(monkeypatch):
    Cell = xlrd.sheet.Cell
    sheet = _FakeSheet(
        "Calc",
        [
            [Cell(xlrd.XL_CELL_TEXT, "Ratio"), Cell(xlrd.XL_CELL_NUMBER, 2.0)],
            [Cell(xlrd.XL_CELL_ERROR, 0x07), Cell(xlrd.XL_CELL_BOOLEAN, 0)],
        ],
        # second tuple is empty (rhi == rlo) and must be skipped
        [(0, 2, 1, 2), (3, 3, 0, 1)],
    )
    book = _FakeBook(sheet)
    monkeypatch.setattr(io_mod.xlrd, "open_workbook", lambda **kw: book)

    decoded = decode(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1", "calc.xls").sheets["Calc"]
    assert decoded.rows[1][0] == CellValue.text("#DIV/0!")
    assert decoded.rows[1][1] == CellValue.text("FALSE")
    assert decoded.merges == [MergeRange(0, 1, 1, 1)]
    assert book.released
