"""
core/loader.py — Sheet load task boundary.

A load is a ticketed unit of work. Starting a new load supersedes (cancels)
the previous ticket, so when two selections race only the newest result is
ever applied: last write wins.

Single-threaded by design: the GUI calls begin(), paints its loading state,
then yields to the event loop and calls run() on the next tick.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class LoadTicket:
    seq: int
    label: str = ""
    cancelled: bool = False
    done: bool = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.done)


class SheetLoader:
    def __init__(self) -> None:
        self._seq = 0
        self._current: Optional[LoadTicket] = None

    @property
    def current(self) -> Optional[LoadTicket]:
        return self._current

    @property
    def loading(self) -> bool:
        return self._current is not None and self._current.pending

    def begin(self, label: str = "") -> LoadTicket:
        """Start a new load; any in-flight ticket is cancelled."""
        if self._current is not None and self._current.pending:
            logger.debug("Load %d (%s) superseded by %r", self._current.seq, self._current.label, label)
            self._current.cancelled = True
        self._seq += 1
        self._current = LoadTicket(seq=self._seq, label=label)
        return self._current

    def is_current(self, ticket: LoadTicket) -> bool:
        return ticket is self._current and not ticket.cancelled

    def cancel(self) -> None:
        if self._current is not None and self._current.pending:
            self._current.cancelled = True

    def run(self, ticket: LoadTicket, work: Callable[[], T]) -> Optional[T]:
        """
        Execute work for ticket. Returns None (and skips the work) if the
        ticket was cancelled or superseded. Exceptions propagate; the ticket
        is marked done either way.
        """
        if not self.is_current(ticket) or ticket.done:
            return None
        try:
            result = work()
        finally:
            ticket.done = True
        # work() may itself have started a newer load.
        if not self.is_current(ticket):
            return None
        return result
