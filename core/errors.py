from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class AppError(Exception):
    """
    User-facing error with a short code and structured details.
    Raise AppError from core modules; GUI should display friendly_message(e).
    """
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.message} ({self.details})"
        return f"{self.code}: {self.message}"


# ── Error codes (keep stable for tests and GUI) ───────────────────────────────

DECODE_FAILED      = "DECODE_FAILED"
SHEET_NOT_FOUND    = "SHEET_NOT_FOUND"
SOURCE_READ_FAILED = "SOURCE_READ_FAILED"
FILE_LOCKED        = "FILE_LOCKED"
BAD_PAGE_SIZE      = "BAD_PAGE_SIZE"
BAD_SPEC           = "BAD_SPEC"


# ── Friendly message lookup ───────────────────────────────────────────────────

def friendly_message(e: AppError) -> str:
    """
    Return a plain-English one-liner suitable for display in a GUI banner.
    Never exposes raw tracebacks or internal code paths.
    """
    code = e.code
    msg  = e.message or ""

    if code == DECODE_FAILED:
        return "Failed to parse Excel file. Please ensure it is a valid .xlsx or .xls file."

    if code == FILE_LOCKED:
        fname = ""
        if e.details and "path" in e.details:
            fname = f" ({os.path.basename(e.details['path'])})"
        return f"File is open in another program{fname}. Close it and try again."

    if code == SOURCE_READ_FAILED:
        if "no such file" in msg.lower() or "not found" in msg.lower():
            return "File not found. Check that the file path is correct."
        return f"Could not read the file.\n({msg})"

    if code == SHEET_NOT_FOUND:
        return f"Sheet not found in workbook.\n({msg})"

    if code == BAD_PAGE_SIZE:
        return f"Rows per page must be a whole number (1 or higher).\n({msg})"

    if code == BAD_SPEC:
        return f"Invalid setting — please check your configuration.\n({msg})"

    # Fallback — clean up the raw message, never show raw tracebacks
    clean = msg.splitlines()[0] if msg else "An unexpected error occurred."
    return clean
