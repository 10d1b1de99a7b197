from __future__ import annotations

import re
from typing import List, Tuple

from .errors import AppError, BAD_SPEC


_COL_RE = re.compile(r"^[A-Z]+$")
_CELL_RE = re.compile(r"^\s*\$?([A-Z]+)\$?(\d+)\s*$")


def col_letters_to_index(col: str) -> int:
    """
    Convert Excel column letters to 1-based index (A->1, Z->26, AA->27).
    """
    s = (col or "").strip().upper()
    if not s or not _COL_RE.match(s):
        raise AppError(BAD_SPEC, f"Bad column: {col!r}")
    n = 0
    for ch in s:
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n


def col_index_to_letters(n: int) -> str:
    """
    Convert 1-based index to Excel column letters (1->A).
    """
    if n <= 0:
        raise AppError(BAD_SPEC, f"Bad column index: {n}")
    out = []
    x = n
    while x:
        x, rem = divmod(x - 1, 26)
        out.append(chr(ord("A") + rem))
    return "".join(reversed(out))


def column_labels(count: int) -> List[str]:
    """Header labels for the first `count` grid columns (A, B, ... AA, ...)."""
    return [col_index_to_letters(i + 1) for i in range(max(count, 0))]


def parse_a1_cell(ref: str) -> Tuple[int, int]:
    """
    Parse an A1-style cell reference into 0-based (row, col).
    Absolute markers ($A$1) are accepted.
    """
    m = _CELL_RE.match((ref or "").upper())
    if not m:
        raise AppError(BAD_SPEC, f"Bad cell reference: {ref!r}")
    row = int(m.group(2))
    if row <= 0:
        raise AppError(BAD_SPEC, f"Row numbers must be >= 1: {ref!r}")
    return row - 1, col_letters_to_index(m.group(1)) - 1


def parse_a1_range(ref: str) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    """
    Parse 'A2:B3' (or a single cell 'C4') into 0-based inclusive
    ((start_row, start_col), (end_row, end_col)), normalized so start <= end.
    """
    s = (ref or "").strip()
    if s == "":
        raise AppError(BAD_SPEC, "Empty range reference")
    parts = s.split(":")
    if len(parts) > 2:
        raise AppError(BAD_SPEC, f"Bad range reference: {ref!r}")
    r1, c1 = parse_a1_cell(parts[0])
    r2, c2 = parse_a1_cell(parts[-1])
    return (min(r1, r2), min(c1, c2)), (max(r1, r2), max(c1, c2))
