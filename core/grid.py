"""
core/grid.py — Merge-aware page renderer.

Given one page of rows, the full row matrix and the sheet's merge list,
resolve every grid position to one of:

  normal               plain cell, value from the page row
  merge_anchor         top-left of a merge starting on this page
  continuation_anchor  stand-in at the page's first row for a merge that
                       started on an earlier page (value from the full matrix)
  covered              hidden under another cell's span; dropped from output

Pure functions only. Nothing here mutates its inputs or raises on ragged
rows / sparse merges.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from .models import MergeRange, Page, RenderCell, Row, cell_at


MIN_COLUMNS = 5


def compute_max_cols(
    page_rows: Sequence[Row],
    merges: Sequence[MergeRange],
    declared_total_columns: int = 0,
    min_columns: int = MIN_COLUMNS,
) -> int:
    """
    Widest of: declared column count, every merge's right edge, every page
    row, and the minimum grid width.
    """
    max_cols = declared_total_columns
    for m in merges:
        if m.end_col + 1 > max_cols:
            max_cols = m.end_col + 1
    for row in page_rows:
        if len(row) > max_cols:
            max_cols = len(row)
    return max(max_cols, min_columns)


def find_merge(merges: Sequence[MergeRange], row: int, col: int) -> Optional[MergeRange]:
    # Merges are assumed not to overlap, so the first hit is the only hit.
    for m in merges:
        if m.contains(row, col):
            return m
    return None


def _clamped_span(start: int, end: int, page_last_row: int, clamp: bool) -> int:
    if clamp and end > page_last_row:
        end = page_last_row
    return end - start + 1


def resolve_cell(
    r: int,
    c: int,
    page_rows: Sequence[Row],
    full_rows: Sequence[Row],
    merges: Sequence[MergeRange],
    page_start_index: int,
    clamp_spans: bool = False,
) -> RenderCell:
    """Render state of relative row r, column c. Rule order matters."""
    abs_row = page_start_index + r
    m = find_merge(merges, abs_row, c)

    if m is None:
        return RenderCell("normal", r, c, cell_at(page_rows, r, c))

    page_last_row = page_start_index + len(page_rows) - 1

    if abs_row == m.start_row and c == m.start_col:
        return RenderCell(
            "merge_anchor", r, c,
            cell_at(page_rows, r, c),
            row_span=_clamped_span(abs_row, m.end_row, page_last_row, clamp_spans),
            col_span=m.col_span,
        )

    if m.start_row < page_start_index and r == 0 and c == m.start_col:
        return RenderCell(
            "continuation_anchor", r, c,
            cell_at(full_rows, m.start_row, m.start_col),
            row_span=_clamped_span(abs_row, m.end_row, page_last_row, clamp_spans),
            col_span=m.col_span,
        )

    return RenderCell("covered", r, c)


def render_page(
    page_rows: Sequence[Row],
    full_rows: Sequence[Row],
    merges: Sequence[MergeRange],
    page_start_index: int,
    declared_total_columns: int = 0,
    clamp_spans: bool = False,
    min_columns: int = MIN_COLUMNS,
) -> List[List[RenderCell]]:
    """
    Resolve every visible position and drop covered ones.
    Returns one list per page row, in column order.
    """
    max_cols = compute_max_cols(page_rows, merges, declared_total_columns, min_columns)
    out: List[List[RenderCell]] = []
    for r in range(len(page_rows)):
        cells: List[RenderCell] = []
        for c in range(max_cols):
            cell = resolve_cell(r, c, page_rows, full_rows, merges, page_start_index, clamp_spans)
            if cell.state != "covered":
                cells.append(cell)
        out.append(cells)
    return out


class GridRenderer:
    """
    Binds the pure functions above to one sheet's full matrix and merges.
    """

    def __init__(
        self,
        full_rows: Sequence[Row],
        merges: Sequence[MergeRange],
        declared_total_columns: Optional[int] = None,
        clamp_spans: bool = False,
        min_columns: int = MIN_COLUMNS,
    ) -> None:
        self.full_rows = full_rows
        self.merges = merges
        if declared_total_columns is None:
            declared_total_columns = len(full_rows[0]) if full_rows else 0
        self.declared_total_columns = declared_total_columns
        self.clamp_spans = clamp_spans
        self.min_columns = min_columns

    def max_cols(self, page: Page) -> int:
        return compute_max_cols(page.page_rows, self.merges, self.declared_total_columns, self.min_columns)

    def render(self, page: Page) -> List[List[RenderCell]]:
        return render_page(
            page.page_rows,
            self.full_rows,
            self.merges,
            page.page_start_index,
            self.declared_total_columns,
            clamp_spans=self.clamp_spans,
            min_columns=self.min_columns,
        )
