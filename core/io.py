"""
core/io.py — Workbook decoding.

decode(file_bytes, file_name) turns an XLSX/XLS/CSV file into a
DecodedWorkbook: ordered sheet names plus, per sheet, the full row matrix
(as CellValues) and its merge ranges (0-based, inclusive).

  XLSX  openpyxl, data_only=True (formula cells show their cached value)
  XLS   xlrd, formatting_info=True (required for merged_cells)
  CSV   csv module, single sheet "Sheet1", no merges

Every failure surfaces as AppError(DECODE_FAILED).
"""
from __future__ import annotations

import csv
import logging
import os
from io import BytesIO, StringIO
from typing import Any, List, Tuple

import xlrd
from openpyxl import load_workbook

from .errors import AppError, DECODE_FAILED, FILE_LOCKED, SOURCE_READ_FAILED
from .models import DecodedWorkbook, MergeRange, Row, SheetData, from_raw


logger = logging.getLogger(__name__)


XLSX_EXTS = (".xlsx", ".xlsm", ".xltx", ".xltm")
XLS_EXTS = (".xls",)
CSV_EXTS = (".csv",)
SUPPORTED_EXTS = XLSX_EXTS + XLS_EXTS + CSV_EXTS

_ZIP_MAGIC = b"PK\x03\x04"
_OLE_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

CSV_SHEET_NAME = "Sheet1"


def detect_format(file_bytes: bytes, file_name: str = "") -> str:
    """
    Return 'xlsx', 'xls' or 'csv'. Known extensions win; otherwise sniff the
    leading bytes.
    """
    ext = os.path.splitext(file_name or "")[1].lower()
    if ext in XLSX_EXTS:
        return "xlsx"
    if ext in XLS_EXTS:
        return "xls"
    if ext in CSV_EXTS:
        return "csv"

    if file_bytes.startswith(_ZIP_MAGIC):
        return "xlsx"
    if file_bytes.startswith(_OLE_MAGIC):
        return "xls"
    if b"\x00" in file_bytes[:1024]:
        raise AppError(DECODE_FAILED, "Unrecognized binary file format", {"file_name": file_name})
    return "csv"


# ── Per-format decoders ───────────────────────────────────────────────────────

def _decode_xlsx(file_bytes: bytes) -> Tuple[List[str], dict]:
    wb = load_workbook(BytesIO(file_bytes), data_only=True)
    try:
        names: List[str] = []
        sheets = {}
        # Chartsheets have no cells; wb.worksheets skips them.
        for ws in wb.worksheets:
            merges = [MergeRange.from_a1(cr.coord) for cr in ws.merged_cells.ranges]
            # openpyxl reports a blank sheet as a 1x1 range holding None.
            if ws.max_row == 1 and ws.max_column == 1 and ws.cell(1, 1).value in (None, "") and not merges:
                rows: List[Row] = []
            else:
                rows = [[from_raw(v) for v in row] for row in ws.iter_rows(values_only=True)]
            names.append(ws.title)
            sheets[ws.title] = SheetData(rows=rows, merges=merges)
        return names, sheets
    finally:
        wb.close()


def _xls_cell_value(cell: Any, datemode: int) -> Any:
    ctype = cell.ctype
    if ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
        return None
    if ctype == xlrd.XL_CELL_DATE:
        try:
            return xlrd.xldate.xldate_as_datetime(cell.value, datemode)
        except xlrd.xldate.XLDateError:
            return cell.value
    if ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if ctype == xlrd.XL_CELL_ERROR:
        return xlrd.error_text_from_code.get(cell.value, "#ERR")
    return cell.value


def _decode_xls(file_bytes: bytes) -> Tuple[List[str], dict]:
    book = xlrd.open_workbook(file_contents=file_bytes, formatting_info=True)
    try:
        names: List[str] = []
        sheets = {}
        for sh in book.sheets():
            rows = [
                [from_raw(_xls_cell_value(cell, book.datemode)) for cell in sh.row(r)]
                for r in range(sh.nrows)
            ]
            # xlrd merge tuples are half-open: (rlo, rhi, clo, chi)
            merges = [
                MergeRange(rlo, clo, rhi - 1, chi - 1)
                for (rlo, rhi, clo, chi) in sh.merged_cells
                if rhi > rlo and chi > clo
            ]
            names.append(sh.name)
            sheets[sh.name] = SheetData(rows=rows, merges=merges)
        return names, sheets
    finally:
        book.release_resources()


def _decode_csv(file_bytes: bytes) -> Tuple[List[str], dict]:
    text = file_bytes.decode("utf-8-sig")
    reader = csv.reader(StringIO(text, newline=""))
    rows = [[from_raw(v) for v in row] for row in reader]
    return [CSV_SHEET_NAME], {CSV_SHEET_NAME: SheetData(rows=rows, merges=[])}


_DECODERS = {
    "xlsx": _decode_xlsx,
    "xls": _decode_xls,
    "csv": _decode_csv,
}


# ── Public API ────────────────────────────────────────────────────────────────

def decode(file_bytes: bytes, file_name: str = "") -> DecodedWorkbook:
    if not file_bytes:
        raise AppError(DECODE_FAILED, "File parsing failed: No data", {"file_name": file_name})

    fmt = detect_format(file_bytes, file_name)
    try:
        names, sheets = _DECODERS[fmt](file_bytes)
    except AppError:
        raise
    except Exception as e:
        logger.exception("Failed to decode %s as %s", file_name or "<bytes>", fmt)
        raise AppError(DECODE_FAILED, f"Failed to parse workbook: {e}", {"file_name": file_name, "format": fmt})

    if not names:
        raise AppError(DECODE_FAILED, "Workbook has no worksheets", {"file_name": file_name})

    logger.info("Decoded %s (%s): %d sheet(s)", file_name or "<bytes>", fmt, len(names))
    return DecodedWorkbook(sheet_names=names, sheets=sheets, file_name=file_name)


def load_workbook_file(path: str) -> DecodedWorkbook:
    """Read a workbook from disk and decode it."""
    try:
        with open(path, "rb") as f:
            data = f.read()
    except PermissionError:
        raise AppError(FILE_LOCKED, f"File is locked: {path}", {"path": path})
    except OSError as e:
        raise AppError(SOURCE_READ_FAILED, f"Failed to read file: {e}", {"path": path})
    return decode(data, os.path.basename(path))
