"""Log configuration for interactive sessions.

The terminal belongs to the renderer, so records go to a file under the
user log directory instead of stderr.
"""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_log_dir

LOG_FILENAME = "lazyfm.log"
DEFAULT_LOG_PATH = Path(user_log_dir("lazyfm", appauthor=False)) / LOG_FILENAME
LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(threadName)s | %(message)s"


def configure_logging(level: int | str = logging.INFO, log_path: Path | None = None) -> Path | None:
    """Attach a file handler to the ``lazyfm`` logger.

    Returns the log file path, or ``None`` when the file cannot be opened; in
    that case records are discarded rather than written to the terminal.
    """
    logger = logging.getLogger("lazyfm")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    path = log_path if log_path is not None else DEFAULT_LOG_PATH
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(path, encoding="utf-8")
    except OSError:
        logger.addHandler(logging.NullHandler())
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return path


__all__ = ["DEFAULT_LOG_PATH", "configure_logging"]
