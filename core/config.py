from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Literal, Mapping, Optional, Tuple

from .errors import AppError, BAD_PAGE_SIZE, BAD_SPEC


ENV_PAGE_SIZE = "EXCEL_VIEWER_PAGE_SIZE"
ENV_THEME = "EXCEL_VIEWER_THEME"
ENV_CLAMP_SPANS = "EXCEL_VIEWER_CLAMP_SPANS"
ENV_DEBUG = "EXCEL_VIEWER_DEBUG"
ENV_LOG_DIR = "EXCEL_VIEWER_LOG_DIR"

DEFAULT_PAGE_SIZE = 50
PAGE_SIZE_CHOICES = (25, 50, 100, 200)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def parse_page_size(value) -> int:
    """Accept an int or numeric string >= 1."""
    try:
        n = int(str(value).strip())
    except ValueError:
        raise AppError(BAD_PAGE_SIZE, f"Rows per page must be a number (got {value!r})")
    if n < 1:
        raise AppError(BAD_PAGE_SIZE, f"Rows per page must be >= 1 (got {n})")
    return n


def parse_flag(name: str, value: str) -> bool:
    s = (value or "").strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise AppError(BAD_SPEC, f"{name} must be true/false (got {value!r})")


@dataclass(frozen=True)
class ViewerConfig:
    """
    Viewer settings. Nothing here is persisted between sessions.

    exclude_header_from_page_count: leave one row out of the page count
        (51 rows at 50 per page -> 1 page).
    clamp_spans_to_page: cut merge row spans at the page's last row instead
        of letting them run past it.
    """
    page_size: int = DEFAULT_PAGE_SIZE
    page_size_choices: Tuple[int, ...] = field(default=PAGE_SIZE_CHOICES)
    min_columns: int = 5
    exclude_header_from_page_count: bool = True
    clamp_spans_to_page: bool = False
    theme: Literal["dark", "light"] = "dark"
    debug: bool = False
    log_dir: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ViewerConfig":
        env = os.environ if environ is None else environ
        kwargs = {}

        if env.get(ENV_PAGE_SIZE):
            kwargs["page_size"] = parse_page_size(env[ENV_PAGE_SIZE])

        theme = (env.get(ENV_THEME) or "").strip().lower()
        if theme:
            if theme not in ("dark", "light"):
                raise AppError(BAD_SPEC, f"{ENV_THEME} must be 'dark' or 'light' (got {theme!r})")
            kwargs["theme"] = theme

        if ENV_CLAMP_SPANS in env:
            kwargs["clamp_spans_to_page"] = parse_flag(ENV_CLAMP_SPANS, env[ENV_CLAMP_SPANS])
        if ENV_DEBUG in env:
            kwargs["debug"] = parse_flag(ENV_DEBUG, env[ENV_DEBUG])
        if env.get(ENV_LOG_DIR):
            kwargs["log_dir"] = env[ENV_LOG_DIR]

        return cls(**kwargs)
