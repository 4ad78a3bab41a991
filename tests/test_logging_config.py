from __future__ import annotations

import logging

import pytest

from config.logging_config import LOG_FORMAT, _QUIET_LOGGERS, setup_logging


@pytest.fixture
def restore_root():
    root = logging.getLogger()
    level = root.level
    yield root
    for h in list(root.handlers):
        if getattr(h.formatter, "_fmt", None) == LOG_FORMAT:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)


def test_repeated_setup_does_not_duplicate_handlers(restore_root) -> None:
    setup_logging()
    setup_logging()

    assert len(restore_root.handlers) == 1
    assert restore_root.level == logging.INFO
    assert logging.getLogger("uvicorn").level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING


def test_debug_level_lets_library_loggers_through(restore_root) -> None:
    setup_logging(level=logging.DEBUG)

    assert logging.getLogger("uvicorn.access").level == logging.DEBUG


def test_log_file_receives_records(restore_root, tmp_path) -> None:
    path = tmp_path / "visitor.log"
    setup_logging(log_file=str(path))

    logging.getLogger("grid.preset").info("Loaded preset 'square'")
    for h in restore_root.handlers:
        h.flush()

    text = path.read_text(encoding="utf-8")
    assert "Loaded preset 'square'" in text
    assert "grid.preset" in text
    assert "[MainThread]" in text
