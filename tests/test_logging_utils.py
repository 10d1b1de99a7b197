"""Tests for core.logging_utils — rotating file handler setup, idempotence."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

import pytest

from core import logging_utils
from core.logging_utils import configure_logging, default_log_path


@pytest.fixture
def clean_root_logger():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    had_flag = getattr(root, logging_utils._CONFIGURED_ATTR, False)
    if had_flag:
        delattr(root, logging_utils._CONFIGURED_ATTR)
    yield root
    for h in list(root.handlers):
        if h not in saved_handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(saved_level)
    if hasattr(root, logging_utils._CONFIGURED_ATTR):
        delattr(root, logging_utils._CONFIGURED_ATTR)
    if had_flag:
        setattr(root, logging_utils._CONFIGURED_ATTR, True)


def test_default_log_path_uses_log_dir(tmp_path):
    path = default_log_path(str(tmp_path / "logs"))
    assert path.endswith("excel_viewer.log")
    assert (tmp_path / "logs").is_dir()


def test_configure_logging_adds_file_handler_once(clean_root_logger, tmp_path):
    log_file = tmp_path / "viewer.log"
    before = len(clean_root_logger.handlers)

    configure_logging(log_path=str(log_file))
    configure_logging(log_path=str(log_file))

    added = clean_root_logger.handlers[before:]
    assert len(added) == 1
    assert isinstance(added[0], RotatingFileHandler)
    assert clean_root_logger.level == logging.INFO

    logging.getLogger("core.test").info("hello from test")
    added[0].flush()
    assert "hello from test" in log_file.read_text(encoding="utf-8")


def test_configure_logging_debug_adds_console(clean_root_logger, tmp_path):
    before = len(clean_root_logger.handlers)
    configure_logging(debug=True, log_dir=str(tmp_path))
    added = clean_root_logger.handlers[before:]
    assert len(added) == 2
    assert clean_root_logger.level == logging.DEBUG
    assert (tmp_path / "excel_viewer.log").exists()
