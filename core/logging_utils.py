from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


_CONFIGURED_ATTR = "_excel_viewer_configured"


def default_log_path(log_dir: Optional[str] = None) -> str:
    """
    ./logs/excel_viewer.log, or under log_dir when given. Falls back to
    ~/.excel_pro_viewer/logs if the working directory isn't writable.
    """
    if log_dir:
        base = Path(log_dir)
        base.mkdir(parents=True, exist_ok=True)
    else:
        base = Path.cwd() / "logs"
        try:
            base.mkdir(parents=True, exist_ok=True)
        except OSError:
            base = Path.home() / ".excel_pro_viewer" / "logs"
            base.mkdir(parents=True, exist_ok=True)
    return str(base / "excel_viewer.log")


def configure_logging(*, debug: bool = False, log_path: Optional[str] = None, log_dir: Optional[str] = None) -> None:
    """Configure app-wide logging.

    - Always logs to a rotating file
    - Also logs to console when debug is enabled
    """
    level = logging.DEBUG if debug else logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Avoid duplicating handlers if called more than once.
    if getattr(root, _CONFIGURED_ATTR, False):
        return

    if log_path is None:
        log_path = default_log_path(log_dir)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    if debug:
        console = logging.StreamHandler()
        console.setLevel(level)
        console.setFormatter(fmt)
        root.addHandler(console)

    setattr(root, _CONFIGURED_ATTR, True)
