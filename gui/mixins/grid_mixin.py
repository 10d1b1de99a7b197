from __future__ import annotations

import tkinter as tk
from typing import Optional

from core.models import PageView, RenderCell
from core.parsing import col_index_to_letters
from gui.tooltip import add_tooltip


_MAX_CELL_CHARS = 40
_CELL_FONT = ("Segoe UI", 9)
_HEADER_FONT = ("Segoe UI", 9, "bold")
_ROWNUM_FONT = ("Consolas", 8)


def truncate_text(text: str, limit: int = _MAX_CELL_CHARS) -> str:
    """Single-line, at most `limit` chars, ellipsis when cut."""
    first = text.splitlines()[0] if text else ""
    if len(first) > limit or first != text:
        return first[: max(limit - 1, 0)] + "…"
    return first


def cell_address(cell: RenderCell, page_start_index: int) -> str:
    """A1-style address of the cell within the whole sheet."""
    return f"{col_index_to_letters(cell.col + 1)}{page_start_index + cell.row + 1}"


def is_header_like(cell: RenderCell, page_start_index: int) -> bool:
    """Non-empty text in the sheet's first row gets header styling."""
    return page_start_index + cell.row == 0 and cell.value.kind == "text" and cell.display_text != ""


class GridMixin:
    """
    Mixin for ExcelViewerApp: draw a PageView into self.grid_frame.

    Grid layout: row 0 holds column letters, column 0 holds 1-based sheet row
    numbers, and each RenderCell lands at (row + 1, col + 1) with its spans.
    Covered positions never reach this code.
    """

    current_view: Optional[PageView] = None

    def _clear_grid(self) -> None:
        for child in self.grid_frame.winfo_children():
            child.destroy()

    def _draw_page(self, view: PageView) -> None:
        pal = self.palette
        self._clear_grid()
        self.current_view = view

        if view.total_rows == 0:
            self.grid_canvas.grid_remove()
            self.empty_label.grid(row=0, column=0, sticky="nsew")
            return
        self.empty_label.grid_remove()
        self.grid_canvas.grid()

        tk.Label(self.grid_frame, text="", background=pal["header_bg"]).grid(
            row=0, column=0, sticky="nsew", padx=(0, 1), pady=(0, 1)
        )
        for c, label in enumerate(view.column_labels):
            tk.Label(
                self.grid_frame, text=label, font=_HEADER_FONT,
                background=pal["header_bg"], foreground=pal["header_fg"],
                padx=12, pady=3, width=12,
            ).grid(row=0, column=c + 1, sticky="nsew", padx=(0, 1), pady=(0, 1))

        for r, cells in enumerate(view.rows):
            tk.Label(
                self.grid_frame, text=str(view.page_start_index + r + 1), font=_ROWNUM_FONT,
                background=pal["header_bg"], foreground=pal["muted"], padx=6,
            ).grid(row=r + 1, column=0, sticky="nsew", padx=(0, 1), pady=(0, 1))
            for cell in cells:
                self._draw_cell(cell, view.page_start_index)

        self.grid_canvas.xview_moveto(0)
        self.grid_canvas.yview_moveto(0)

    def _draw_cell(self, cell: RenderCell, page_start_index: int) -> tk.Label:
        pal = self.palette
        full = cell.display_text
        shown = truncate_text(full)

        bg, fg, font = pal["cell_bg"], pal["fg"], _CELL_FONT
        if is_header_like(cell, page_start_index):
            bg, fg, font = pal["headerlike_bg"], pal["headerlike_fg"], _HEADER_FONT
        elif cell.is_merged:
            bg = pal["merged_bg"]

        lbl = tk.Label(
            self.grid_frame, text=shown, font=font,
            background=bg, foreground=fg,
            anchor="center" if cell.is_merged else "w",
            padx=8, pady=4,
        )
        lbl.grid(
            row=cell.row + 1, column=cell.col + 1,
            rowspan=cell.row_span, columnspan=cell.col_span,
            sticky="nsew", padx=(0, 1), pady=(0, 1),
        )
        if shown != full:
            add_tooltip(
                lbl, full,
                title=cell_address(cell, page_start_index),
                colors=(pal["header_bg"], pal["fg"]),
            )
        return lbl
