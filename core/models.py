from __future__ import annotations

import datetime as _dt
import math
from decimal import Decimal
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Sequence, Union

from .parsing import parse_a1_range


# ---- Cell values ----

CellKind = Literal["text", "number", "empty"]


@dataclass(frozen=True)
class CellValue:
    """
    Tagged cell value: text, number or empty.
    Empty is distinct from number zero and from text "0".
    """
    kind: CellKind = "empty"
    value: Union[str, int, float, None] = None

    @classmethod
    def text(cls, s: str) -> "CellValue":
        return cls("text", s)

    @classmethod
    def number(cls, n: Union[int, float]) -> "CellValue":
        return cls("number", n)

    @property
    def is_empty(self) -> bool:
        return self.kind == "empty"

    def __str__(self) -> str:
        return display_text(self)


EMPTY = CellValue()


def from_raw(raw: Any) -> CellValue:
    """
    Coerce a decoder value (openpyxl / xlrd / csv) into a CellValue.
    """
    if isinstance(raw, CellValue):
        return raw
    if raw is None:
        return EMPTY
    if isinstance(raw, str):
        return EMPTY if raw == "" else CellValue.text(raw)
    # bool is an int subclass; check it first.
    if isinstance(raw, bool):
        return CellValue.text("TRUE" if raw else "FALSE")
    if isinstance(raw, (int, float)):
        return CellValue.number(raw)
    if isinstance(raw, (_dt.datetime, _dt.date, _dt.time)):
        return CellValue.text(raw.isoformat())
    return CellValue.text(str(raw))


def format_number(n: Union[int, float]) -> str:
    """Canonical decimal text: 100.0 -> '100', 1.5 -> '1.5'."""
    if isinstance(n, float):
        if math.isnan(n):
            return "NaN"
        if math.isinf(n):
            return "Infinity" if n > 0 else "-Infinity"
        if n.is_integer() and abs(n) < 1e21:
            return str(int(n))
        text = repr(n)
        if "e" not in text:
            return text
        # Plain decimals down to 1e-6; below that an unpadded exponent (1e-07 -> 1e-7).
        mantissa, exp = text.split("e")
        power = int(exp)
        if power >= -6:
            return format(Decimal(text), "f")
        return f"{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"
    return str(n)


def display_text(value: CellValue) -> str:
    if value.kind == "empty":
        return ""
    if value.kind == "number":
        return format_number(value.value)  # type: ignore[arg-type]
    return str(value.value)


Row = List[CellValue]


def cell_at(rows: Sequence[Sequence[CellValue]], row: int, col: int) -> CellValue:
    """Bounds-safe lookup; anything outside the matrix or a ragged row is EMPTY."""
    if row < 0 or col < 0 or row >= len(rows):
        return EMPTY
    r = rows[row]
    if col >= len(r):
        return EMPTY
    return r[col]


# ---- Sheet model ----

@dataclass(frozen=True)
class MergeRange:
    """
    Inclusive rectangle of cells shown as one. Coordinates are 0-based.
    """
    start_row: int
    start_col: int
    end_row: int
    end_col: int

    @classmethod
    def from_a1(cls, ref: str) -> "MergeRange":
        (r1, c1), (r2, c2) = parse_a1_range(ref)
        return cls(r1, c1, r2, c2)

    @property
    def row_span(self) -> int:
        return self.end_row - self.start_row + 1

    @property
    def col_span(self) -> int:
        return self.end_col - self.start_col + 1

    def contains(self, row: int, col: int) -> bool:
        return self.start_row <= row <= self.end_row and self.start_col <= col <= self.end_col


@dataclass(frozen=True)
class SheetData:
    rows: List[Row] = field(default_factory=list)
    merges: List[MergeRange] = field(default_factory=list)

    @property
    def declared_total_columns(self) -> int:
        return len(self.rows[0]) if self.rows else 0


@dataclass
class DecodedWorkbook:
    """
    Output of core.io.decode. Sheet order follows the workbook's tab order.
    """
    sheet_names: List[str] = field(default_factory=list)
    sheets: Dict[str, SheetData] = field(default_factory=dict)
    file_name: str = ""


@dataclass(frozen=True)
class Page:
    page_rows: List[Row]
    page_start_index: int
    total_pages: int
    page_size: int

    @property
    def page_end_index(self) -> int:
        return self.page_start_index + self.page_size


# ---- Render output ----

CellState = Literal["normal", "merge_anchor", "continuation_anchor", "covered"]


@dataclass(frozen=True)
class RenderCell:
    """
    One drawable grid position. row is relative to the page, col is absolute.
    """
    state: CellState
    row: int
    col: int
    value: CellValue = EMPTY
    row_span: int = 1
    col_span: int = 1

    @property
    def display_text(self) -> str:
        return display_text(self.value)

    @property
    def is_merged(self) -> bool:
        return self.state in ("merge_anchor", "continuation_anchor")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state,
            "row_span": self.row_span,
            "col_span": self.col_span,
            "display_text": self.display_text,
        }


@dataclass(frozen=True)
class PageView:
    """
    Everything the presentation layer needs to draw one page.
    """
    sheet_name: str
    rows: List[List[RenderCell]]
    max_cols: int
    column_labels: List[str]
    page: int
    total_pages: int
    page_start_index: int
    total_rows: int
    row_range_label: str
    sheet_position: str
    has_prev_page: bool
    has_next_page: bool
    has_prev_sheet: bool
    has_next_sheet: bool
    file_name: Optional[str] = None
