"""Tests for core.store — sheet selection, page slicing, page counting."""
from __future__ import annotations

import pytest

from core.errors import AppError, BAD_PAGE_SIZE, BAD_SPEC, SHEET_NOT_FOUND
from core.models import DecodedWorkbook, MergeRange, SheetData, from_raw
from core.store import SheetStore, count_pages


def _sheet(n_rows, merges=None):
    rows = [[from_raw(f"r{i}"), from_raw(i)] for i in range(n_rows)]
    return SheetData(rows=rows, merges=merges or [])


def _store(**kw):
    wb = DecodedWorkbook(
        sheet_names=["Data", "Empty", "Listed"],
        sheets={"Data": _sheet(120, [MergeRange(0, 0, 0, 1)]), "Empty": SheetData()},
        file_name="book.xlsx",
    )
    return SheetStore(wb, **kw)


def test_select_sheet_returns_rows_and_merges():
    store = _store()
    data = store.select_sheet("Data")
    assert len(data.rows) == 120
    assert data.merges == [MergeRange(0, 0, 0, 1)]
    assert store.active_name == "Data"
    assert store.declared_total_columns == 2


def test_select_sheet_unknown_name_raises():
    store = _store()
    with pytest.raises(AppError) as ei:
        store.select_sheet("Nope")
    assert ei.value.code == SHEET_NOT_FOUND


def test_listed_sheet_without_data_is_empty_not_error():
    store = _store()
    data = store.select_sheet("Listed")
    assert data.rows == [] and data.merges == []


def test_get_page_before_select_raises():
    with pytest.raises(AppError) as ei:
        _store().get_page(1, 50)
    assert ei.value.code == SHEET_NOT_FOUND


def test_get_page_slices_and_reports_start():
    store = _store()
    store.select_sheet("Data")
    p1 = store.get_page(1, 50)
    assert p1.page_start_index == 0
    assert len(p1.page_rows) == 50
    assert p1.page_rows[0][0] == from_raw("r0")

    p3 = store.get_page(3, 50)
    assert p3.page_start_index == 100
    assert len(p3.page_rows) == 20
    assert p3.page_end_index == 150


def test_get_page_past_end_is_empty_slice():
    store = _store()
    store.select_sheet("Data")
    page = store.get_page(10, 50)
    assert page.page_rows == []
    assert page.page_start_index == 450


def test_get_page_rejects_bad_arguments():
    store = _store()
    store.select_sheet("Data")
    with pytest.raises(AppError) as ei:
        store.get_page(0, 50)
    assert ei.value.code == BAD_SPEC
    with pytest.raises(AppError) as ei:
        store.get_page(1, 0)
    assert ei.value.code == BAD_PAGE_SIZE


def test_total_pages_excludes_one_row_by_default():
    assert count_pages(120, 50) == 3
    assert count_pages(101, 50) == 2
    assert count_pages(51, 50) == 1
    assert count_pages(1, 50) == 0
    assert count_pages(0, 50) == 0


def test_total_pages_counting_every_row():
    assert count_pages(51, 50, exclude_header=False) == 2
    assert count_pages(1, 50, exclude_header=False) == 1
    assert count_pages(0, 50, exclude_header=False) == 0


def test_empty_sheet_has_zero_pages():
    store = _store()
    store.select_sheet("Empty")
    page = store.get_page(1, 50)
    assert page.page_rows == []
    assert page.total_pages == 0


def test_store_page_count_mode_is_configurable():
    store = _store(exclude_header_from_page_count=False)
    store.select_sheet("Data")
    assert store.total_pages(60) == 2
    assert store.get_page(1, 120).total_pages == 1
