"""
core/store.py — Decoded sheets + page slicing.

SheetStore owns the immutable row matrices and merge lists of one decoded
workbook and answers page queries against the active sheet. A new store is
built whenever a new file is loaded.
"""
from __future__ import annotations

import logging
import math
from typing import List, Optional

from .errors import AppError, BAD_PAGE_SIZE, BAD_SPEC, SHEET_NOT_FOUND
from .models import DecodedWorkbook, Page, SheetData


logger = logging.getLogger(__name__)


def count_pages(row_count: int, page_size: int, exclude_header: bool = True) -> int:
    """
    Number of pages for row_count rows.

    With exclude_header (the default) one row is left out of the count, so
    51 rows at 50 per page is still one page.
    """
    if page_size < 1:
        raise AppError(BAD_PAGE_SIZE, f"Page size must be >= 1 (got {page_size})")
    n = max(row_count - 1, 0) if exclude_header else max(row_count, 0)
    return math.ceil(n / page_size)


class SheetStore:
    def __init__(self, workbook: DecodedWorkbook, exclude_header_from_page_count: bool = True) -> None:
        self.workbook = workbook
        self.exclude_header_from_page_count = exclude_header_from_page_count
        self._active_name: Optional[str] = None
        self._active: Optional[SheetData] = None

    @property
    def sheet_names(self) -> List[str]:
        return list(self.workbook.sheet_names)

    @property
    def active_name(self) -> Optional[str]:
        return self._active_name

    @property
    def active(self) -> SheetData:
        if self._active is None:
            raise AppError(SHEET_NOT_FOUND, "No sheet selected")
        return self._active

    @property
    def declared_total_columns(self) -> int:
        return self.active.declared_total_columns

    def select_sheet(self, name: str) -> SheetData:
        if name not in self.workbook.sheet_names:
            raise AppError(SHEET_NOT_FOUND, f"Sheet not found: {name}", {"sheet": name})
        # A listed sheet with no decoded data is an empty sheet, not an error.
        data = self.workbook.sheets.get(name) or SheetData()
        self._active_name = name
        self._active = data
        logger.debug("Selected sheet %r (%d rows, %d merges)", name, len(data.rows), len(data.merges))
        return data

    def total_pages(self, page_size: int) -> int:
        return count_pages(len(self.active.rows), page_size, self.exclude_header_from_page_count)

    def get_page(self, page_number: int, page_size: int) -> Page:
        """
        Slice page `page_number` (1-based) of the active sheet. No clamping:
        a page past the end is an empty slice.
        """
        if page_size < 1:
            raise AppError(BAD_PAGE_SIZE, f"Page size must be >= 1 (got {page_size})")
        if page_number < 1:
            raise AppError(BAD_SPEC, f"Page numbers start at 1 (got {page_number})")
        rows = self.active.rows
        start = (page_number - 1) * page_size
        return Page(
            page_rows=rows[start:start + page_size],
            page_start_index=start,
            total_pages=self.total_pages(page_size),
            page_size=page_size,
        )
