from __future__ import annotations

import logging
import os
import sys
import tkinter as tk
from tkinter import filedialog
from typing import Optional

from gui.mixins import GridMixin, ThrobberMixin
from gui.ui_build import apply_theme, build_ui

from core.config import ViewerConfig
from core.errors import AppError, friendly_message
from core.io import load_workbook_file
from core.loader import LoadTicket, SheetLoader
from core.logging_utils import configure_logging
from core.models import DecodedWorkbook, PageView
from core.viewer import WorkbookSession


logger = logging.getLogger(__name__)


class ExcelViewerApp(ThrobberMixin, GridMixin, tk.Tk):
    """
    Paginated, merge-aware workbook viewer.

    - WorkbookSession is the single source of truth for sheet/page state.
    - File and sheet loads go through SheetLoader: the spinner paints, the
      event loop yields once, then the newest ticket runs (older ones are
      dropped).
    - Page moves are synchronous; they only re-slice and re-render.
    """

    def __init__(self, viewer_config: Optional[ViewerConfig] = None) -> None:
        super().__init__()
        self.title("Excel Pro Viewer")
        self.minsize(960, 620)

        self.viewer_config: ViewerConfig = viewer_config or ViewerConfig()
        self.theme: str = self.viewer_config.theme
        self.session: Optional[WorkbookSession] = None
        self.loader = SheetLoader()

        build_ui(self)
        self._sync_controls(None)

    # ---------------- Loading ----------------

    def open_file(self) -> None:
        path = filedialog.askopenfilename(
            title="Open workbook",
            filetypes=[
                ("Excel workbooks", "*.xlsx *.xlsm *.xls"),
                ("CSV files", "*.csv"),
                ("All files", "*.*"),
            ],
        )
        if path:
            self.load_path(path)

    def load_path(self, path: str) -> LoadTicket:
        self._clear_error()
        ticket = self.loader.begin(f"file:{os.path.basename(path)}")
        self.throbber_start("Loading workbook...")
        self.update_idletasks()
        self.after_idle(self._finish_file_load, ticket, path)
        return ticket

    def _finish_file_load(self, ticket: LoadTicket, path: str) -> None:
        try:
            workbook = self.loader.run(ticket, lambda: load_workbook_file(path))
        except AppError as e:
            logger.warning("Could not open %s: %s", path, e)
            self._show_error(friendly_message(e))
            return
        finally:
            if not self.loader.loading:
                self.throbber_stop()
        if workbook is None:
            return
        self.set_workbook(workbook)

    def set_workbook(self, workbook: DecodedWorkbook) -> None:
        self.session = WorkbookSession(workbook, self.viewer_config)
        self.sheet_combo.configure(values=self.session.sheet_names, state="readonly")
        self.page_size_var.set(str(self.session.state.page_size))
        self.file_name_var.set(workbook.file_name or "Untitled")
        self._refresh_view()

    def select_sheet(self, name: str) -> Optional[LoadTicket]:
        if self.session is None:
            return None
        ticket = self.loader.begin(f"sheet:{name}")
        self.throbber_start("Loading Sheet...")
        self.update_idletasks()
        self.after_idle(self._finish_sheet_load, ticket, name)
        return ticket

    def _finish_sheet_load(self, ticket: LoadTicket, name: str) -> None:
        session = self.session

        def work() -> PageView:
            session.goto_sheet(name)
            return session.view()

        try:
            view = self.loader.run(ticket, work)
        finally:
            if not self.loader.loading:
                self.throbber_stop()
        if view is not None:
            self._show_view(view)

    # ---------------- Navigation ----------------

    def _on_sheet_selected(self, event=None) -> None:
        name = self.sheet_var.get()
        if name and self.session is not None and name != self.session.sheet_name:
            self.select_sheet(name)

    def next_sheet(self) -> None:
        if self.session is not None and self.session.has_next_sheet:
            self.select_sheet(self.session.sheet_names[self.session.state.sheet_index + 1])

    def prev_sheet(self) -> None:
        if self.session is not None and self.session.has_prev_sheet:
            self.select_sheet(self.session.sheet_names[self.session.state.sheet_index - 1])

    def next_page(self) -> None:
        if self.session is not None and self.session.has_next_page:
            self.session.next_page()
            self._refresh_view()

    def prev_page(self) -> None:
        if self.session is not None and self.session.has_prev_page:
            self.session.prev_page()
            self._refresh_view()

    def _on_page_size_selected(self, event=None) -> None:
        if self.session is None:
            return
        try:
            self.session.set_page_size(self.page_size_var.get())
        except AppError as e:
            self._show_error(friendly_message(e))
            return
        self._refresh_view()

    # ---------------- Theme ----------------

    def toggle_theme(self) -> None:
        self.theme = "light" if self.theme == "dark" else "dark"
        apply_theme(self, self.theme)
        self.theme_button.configure(text="Light Mode" if self.theme == "dark" else "Dark Mode")
        if self.current_view is not None:
            self._draw_page(self.current_view)

    # ---------------- View sync ----------------

    def _refresh_view(self) -> None:
        if self.session is None:
            self._sync_controls(None)
            return
        self._show_view(self.session.view())

    def _show_view(self, view: PageView) -> None:
        self._draw_page(view)
        self._sync_controls(view)

    def _sync_controls(self, view: Optional[PageView]) -> None:
        def enable(button, on: bool) -> None:
            button.state(["!disabled"] if on else ["disabled"])

        if view is None:
            for b in (self.prev_page_button, self.next_page_button, self.prev_sheet_button, self.next_sheet_button):
                enable(b, False)
            self.row_range_var.set("0-0")
            self.sheet_position_var.set("")
            self.total_rows_var.set("")
            return

        self.sheet_var.set(view.sheet_name)
        self.row_range_var.set(view.row_range_label)
        self.sheet_position_var.set(view.sheet_position)
        self.total_rows_var.set(f"Total Rows: {view.total_rows}")
        enable(self.prev_page_button, view.has_prev_page)
        enable(self.next_page_button, view.has_next_page)
        enable(self.prev_sheet_button, view.has_prev_sheet)
        enable(self.next_sheet_button, view.has_next_sheet)

    # ---------------- Error banner ----------------

    def _show_error(self, message: str) -> None:
        self.error_var.set(message)
        self.error_label.grid()

    def _clear_error(self) -> None:
        self.error_var.set("")
        self.error_label.grid_remove()


def main() -> None:
    try:
        config = ViewerConfig.from_env()
    except AppError as e:
        raise SystemExit(friendly_message(e))
    configure_logging(debug=config.debug, log_dir=config.log_dir)

    app = ExcelViewerApp(config)
    if len(sys.argv) > 1:
        app.after_idle(app.load_path, sys.argv[1])
    app.mainloop()


if __name__ == "__main__":
    main()
