"""Process-wide logging for the visitor (console, optional file)."""

from __future__ import annotations

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(threadName)s] %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"

# Third-party loggers that are chatty at INFO (per-request lines from the bridge and client).
_QUIET_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "httpx", "httpcore")


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configure the root logger once per process.

    - Console output goes to stderr so `tools/timeline_client.py` style JSON on stdout
      stays clean when both run in one shell.
    - The thread name is part of every line: the Qt thread and the "timeline-bridge"
      server thread both write frame changes.
    - Library loggers listed in _QUIET_LOGGERS are held at WARNING unless `level` is DEBUG.
    """
    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    lib_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(lib_level)

    logging.getLogger(__name__).debug("Logging configured (level=%s, file=%s)", logging.getLevelName(level), log_file)
