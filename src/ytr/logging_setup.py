from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from .paths import log_path

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def configure_logging(debug: bool, path: Path | None = None) -> Path | None:
    """Send log records to a rotating file when ``debug`` is set.

    The TUI owns the terminal, so without ``debug`` logging stays disabled.
    Returns the log file path when one was configured.
    """
    if not debug:
        logging.disable(logging.CRITICAL)
        return None

    logging.disable(logging.NOTSET)
    path = path or log_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.DEBUG)
    return path
