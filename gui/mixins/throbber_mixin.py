"""
gui/mixins/throbber_mixin.py — Busy indicator shown while a workbook or sheet loads.

Throbber is a small canvas with a ring of dots. When idle it shows only the
centre dot; while running one dot is lit and the highlight walks round the
ring every TICK_MS. Colours come from the palette via set_colors().

ThrobberMixin brackets a load with throbber_start(message) / throbber_stop()
and mirrors the message into app.loading_var.
"""
from __future__ import annotations

import math
import tkinter as tk
from typing import Dict, List, Optional


TICK_MS = 80
DOTS = 8
_SIZE = 22
_ORBIT = 7
_DOT_R = 2


def _dot_centres(count: int = DOTS) -> List[tuple]:
    mid = _SIZE / 2
    return [
        (mid + _ORBIT * math.cos(2 * math.pi * i / count),
         mid + _ORBIT * math.sin(2 * math.pi * i / count))
        for i in range(count)
    ]


class Throbber(tk.Canvas):
    def __init__(self, master, **kw):
        for key, default in (("width", _SIZE), ("height", _SIZE), ("highlightthickness", 0), ("borderwidth", 0)):
            kw.setdefault(key, default)
        super().__init__(master, **kw)
        self._colors: Dict[str, str] = {"arc": "#4f46e5", "ring": "#e0e0e0", "idle": "#cccccc"}
        self._phase = 0
        self._after_id: Optional[str] = None
        self._centres = _dot_centres()
        self._redraw()

    @property
    def running(self) -> bool:
        return self._after_id is not None

    def set_colors(self, background: str, arc: str, ring: str, idle: str) -> None:
        self.configure(background=background)
        self._colors.update(arc=arc, ring=ring, idle=idle)
        self._redraw()

    def start(self) -> None:
        if self.running:
            return
        self._phase = 0
        self._advance()

    def stop(self) -> None:
        if self._after_id is not None:
            try:
                self.after_cancel(self._after_id)
            except tk.TclError:
                pass
            self._after_id = None
        self._redraw()

    def _advance(self) -> None:
        self._redraw(spinning=True)
        self._phase = (self._phase + 1) % DOTS
        self._after_id = self.after(TICK_MS, self._advance)

    def _redraw(self, spinning: Optional[bool] = None) -> None:
        if spinning is None:
            spinning = self.running
        self.delete("all")
        if not spinning:
            c = _SIZE / 2
            self.create_oval(c - _DOT_R, c - _DOT_R, c + _DOT_R, c + _DOT_R,
                             fill=self._colors["idle"], outline="")
            return
        for i, (x, y) in enumerate(self._centres):
            color = self._colors["arc"] if i == self._phase else self._colors["ring"]
            self.create_oval(x - _DOT_R, y - _DOT_R, x + _DOT_R, y + _DOT_R, fill=color, outline="")


class ThrobberMixin:
    """
    Mixin for ExcelViewerApp. Uses self.throbber and self.loading_var when
    ui_build.py has created them; otherwise both calls do nothing.
    """

    def _set_busy(self, busy: bool, message: str) -> None:
        throbber = getattr(self, "throbber", None)
        if throbber is not None:
            (throbber.start if busy else throbber.stop)()
        loading_var = getattr(self, "loading_var", None)
        if loading_var is not None:
            loading_var.set(message)

    def throbber_start(self, message: str = "Loading Sheet...") -> None:
        self._set_busy(True, message)

    def throbber_stop(self) -> None:
        self._set_busy(False, "")
