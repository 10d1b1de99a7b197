"""
gui/tooltip.py — Hover popup with a truncated grid cell's full value.

The popup opens next to the pointer after a short hover, is headed by the
cell address (e.g. "B7"), and takes its colours from the active palette.
Very long values are clipped to MAX_LINES lines.
"""
from __future__ import annotations

import tkinter as tk
from typing import Optional, Tuple


HOVER_DELAY_MS = 450
MAX_LINES = 12
_WRAP_PX = 380
_OFFSET = (14, 18)     # pointer -> popup, px
_BODY_FONT = ("Segoe UI", 9)
_TITLE_FONT = ("Segoe UI", 8, "bold")


def tooltip_text(text: str, max_lines: int = MAX_LINES) -> str:
    lines = (text or "").splitlines() or [""]
    if len(lines) <= max_lines:
        return "\n".join(lines)
    hidden = len(lines) - max_lines
    return "\n".join(lines[:max_lines] + [f"… ({hidden} more lines)"])


class CellTooltip:
    """Popup bound to one grid cell label."""

    def __init__(
        self,
        widget: tk.Widget,
        text: str,
        title: str = "",
        colors: Tuple[str, str] = ("#1e2532", "#e2e8f0"),
    ) -> None:
        self.widget = widget
        self.text = text
        self.title = title
        self.colors = colors
        self.popup: Optional[tk.Toplevel] = None
        self._pending: Optional[str] = None
        self._pointer = (0, 0)

        for seq, handler in (
            ("<Enter>", self._schedule),
            ("<Motion>", self._track),
            ("<Leave>", self.close),
            ("<ButtonPress>", self.close),
            ("<Destroy>", self.close),
        ):
            widget.bind(seq, handler, add="+")

    def _track(self, event) -> None:
        self._pointer = (event.x_root, event.y_root)

    def _schedule(self, event=None) -> None:
        self.close()
        if event is not None:
            self._track(event)
        self._pending = self.widget.after(HOVER_DELAY_MS, self.open)

    def open(self) -> None:
        self._pending = None
        if self.popup is not None or not self.text:
            return
        bg, fg = self.colors
        x, y = self._pointer
        if (x, y) == (0, 0):
            try:
                x, y = self.widget.winfo_rootx(), self.widget.winfo_rooty() + self.widget.winfo_height()
            except tk.TclError:
                return

        popup = tk.Toplevel(self.widget)
        popup.wm_overrideredirect(True)
        popup.wm_geometry(f"+{x + _OFFSET[0]}+{y + _OFFSET[1]}")
        frame = tk.Frame(popup, background=bg, highlightbackground=fg, highlightthickness=1)
        frame.pack()
        if self.title:
            tk.Label(frame, text=self.title, font=_TITLE_FONT, background=bg, foreground=fg,
                     anchor="w", padx=8).pack(fill="x", pady=(4, 0))
        tk.Label(frame, text=tooltip_text(self.text), font=_BODY_FONT, background=bg, foreground=fg,
                 justify="left", wraplength=_WRAP_PX, padx=8, pady=4).pack()
        self.popup = popup

    def close(self, event=None) -> None:
        if self._pending is not None:
            try:
                self.widget.after_cancel(self._pending)
            except tk.TclError:
                pass
            self._pending = None
        if self.popup is not None:
            try:
                self.popup.destroy()
            except tk.TclError:
                pass
            self.popup = None


def add_tooltip(
    widget: tk.Widget,
    text: str,
    title: str = "",
    colors: Optional[Tuple[str, str]] = None,
) -> Optional[CellTooltip]:
    """Attach a CellTooltip; returns None when there is nothing to show."""
    if widget is None or not text:
        return None
    if colors is None:
        return CellTooltip(widget, text, title)
    return CellTooltip(widget, text, title, colors)
