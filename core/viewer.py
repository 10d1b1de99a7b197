"""
core/viewer.py — Navigation over a decoded workbook.

ViewerState is immutable; every navigation call swaps in a new state via
dataclasses.replace. WorkbookSession ties the state to a SheetStore and a
GridRenderer and produces a PageView for the presentation layer.

Navigation never raises for boundary moves: next/prev at the first/last
sheet or page is a no-op, and an empty sheet stays on page 1.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from .config import ViewerConfig, parse_page_size
from .errors import AppError, SHEET_NOT_FOUND
from .grid import GridRenderer
from .models import DecodedWorkbook, PageView, SheetData
from .parsing import column_labels
from .store import SheetStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewerState:
    sheet_index: int = 0
    page: int = 1
    page_size: int = 50


def row_range_label(page: int, page_size: int, total_rows: int) -> str:
    """'1-50' style label for the rows on a page; '0-0' for an empty sheet."""
    if total_rows <= 0:
        return "0-0"
    first = (page - 1) * page_size + 1
    last = min(page * page_size, total_rows)
    return f"{first}-{last}"


class WorkbookSession:
    def __init__(self, workbook: DecodedWorkbook, config: Optional[ViewerConfig] = None) -> None:
        self.config = config or ViewerConfig()
        self.workbook = workbook
        self.store = SheetStore(workbook, self.config.exclude_header_from_page_count)
        self.state = ViewerState(page_size=self.config.page_size)
        self._renderer: Optional[GridRenderer] = None
        if workbook.sheet_names:
            self._activate(0)

    # ── Sheet navigation ──────────────────────────────────────────────────────

    @property
    def sheet_names(self):
        return self.store.sheet_names

    @property
    def sheet_name(self) -> Optional[str]:
        return self.store.active_name

    @property
    def sheet(self) -> SheetData:
        return self.store.active

    def _activate(self, index: int) -> None:
        name = self.sheet_names[index]
        data = self.store.select_sheet(name)
        self._renderer = GridRenderer(
            data.rows,
            data.merges,
            data.declared_total_columns,
            clamp_spans=self.config.clamp_spans_to_page,
            min_columns=self.config.min_columns,
        )
        self.state = replace(self.state, sheet_index=index, page=1)

    def goto_sheet(self, name: str) -> ViewerState:
        if name not in self.sheet_names:
            raise AppError(SHEET_NOT_FOUND, f"Sheet not found: {name}", {"sheet": name})
        self._activate(self.sheet_names.index(name))
        logger.info("Showing sheet %r", name)
        return self.state

    def next_sheet(self) -> ViewerState:
        if self.has_next_sheet:
            self._activate(self.state.sheet_index + 1)
        return self.state

    def prev_sheet(self) -> ViewerState:
        if self.has_prev_sheet:
            self._activate(self.state.sheet_index - 1)
        return self.state

    @property
    def has_next_sheet(self) -> bool:
        return self.state.sheet_index < len(self.sheet_names) - 1

    @property
    def has_prev_sheet(self) -> bool:
        return self.state.sheet_index > 0

    # ── Page navigation ───────────────────────────────────────────────────────

    @property
    def total_pages(self) -> int:
        return self.store.total_pages(self.state.page_size)

    @property
    def last_page(self) -> int:
        return max(self.total_pages, 1)

    @property
    def has_next_page(self) -> bool:
        return self.state.page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.state.page > 1

    def next_page(self) -> ViewerState:
        self.state = replace(self.state, page=min(self.last_page, self.state.page + 1))
        return self.state

    def prev_page(self) -> ViewerState:
        self.state = replace(self.state, page=max(1, self.state.page - 1))
        return self.state

    def goto_page(self, page: int) -> ViewerState:
        self.state = replace(self.state, page=min(max(1, int(page)), self.last_page))
        return self.state

    def set_page_size(self, page_size) -> ViewerState:
        n = parse_page_size(page_size)
        self.state = replace(self.state, page_size=n, page=1)
        return self.state

    # ── Rendering ─────────────────────────────────────────────────────────────

    def view(self) -> PageView:
        page = self.store.get_page(self.state.page, self.state.page_size)
        rows = self._renderer.render(page)
        max_cols = self._renderer.max_cols(page)
        total_rows = len(self.sheet.rows)
        return PageView(
            sheet_name=self.sheet_name or "",
            rows=rows,
            max_cols=max_cols,
            column_labels=column_labels(max_cols),
            page=self.state.page,
            total_pages=page.total_pages,
            page_start_index=page.page_start_index,
            total_rows=total_rows,
            row_range_label=row_range_label(self.state.page, self.state.page_size, total_rows),
            sheet_position=f"{self.state.sheet_index + 1} / {len(self.sheet_names)}",
            has_prev_page=self.has_prev_page,
            has_next_page=self.has_next_page,
            has_prev_sheet=self.has_prev_sheet,
            has_next_sheet=self.has_next_sheet,
            file_name=self.workbook.file_name or None,
        )
