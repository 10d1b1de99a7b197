"""Tests for core.loader — ticketed, last-write-wins sheet loads."""
from __future__ import annotations

import pytest

from core.loader import SheetLoader


def test_begin_marks_loading_until_run():
    loader = SheetLoader()
    assert not loader.loading
    ticket = loader.begin("sheet:A")
    assert loader.loading
    assert loader.run(ticket, lambda: "A") == "A"
    assert ticket.done
    assert not loader.loading


def test_newer_ticket_supersedes_older():
    loader = SheetLoader()
    first = loader.begin("sheet:A")
    second = loader.begin("sheet:B")
    assert first.cancelled
    assert not loader.is_current(first)

    calls = []
    assert loader.run(first, lambda: calls.append("A")) is None
    assert calls == []
    assert loader.run(second, lambda: "B") == "B"


def test_results_arrive_out_of_order_last_write_wins():
    loader = SheetLoader()
    shown = []
    a = loader.begin("sheet:A")
    b = loader.begin("sheet:B")
    # B's callback fires first, then the stale A callback.
    for ticket, value in ((b, "B"), (a, "A")):
        result = loader.run(ticket, lambda v=value: v)
        if result is not None:
            shown.append(result)
    assert shown == ["B"]


def test_cancel_drops_pending_work():
    loader = SheetLoader()
    ticket = loader.begin("file:book.xlsx")
    loader.cancel()
    assert not loader.loading
    assert loader.run(ticket, lambda: "never") is None


def test_ticket_runs_only_once():
    loader = SheetLoader()
    ticket = loader.begin()
    assert loader.run(ticket, lambda: 1) == 1
    assert loader.run(ticket, lambda: 2) is None


def test_work_exception_propagates_and_finishes_ticket():
    loader = SheetLoader()
    ticket = loader.begin()

    def boom():
        raise ValueError("bad sheet")

    with pytest.raises(ValueError):
        loader.run(ticket, boom)
    assert ticket.done
    assert not loader.loading


def test_work_that_starts_a_newer_load_is_discarded():
    loader = SheetLoader()
    ticket = loader.begin("sheet:A")

    def work():
        loader.begin("sheet:B")
        return "A"

    assert loader.run(ticket, work) is None
    assert loader.loading
    assert loader.current.label == "sheet:B"


def test_ticket_sequence_increases():
    loader = SheetLoader()
    assert loader.begin().seq == 1
    assert loader.begin().seq == 2
