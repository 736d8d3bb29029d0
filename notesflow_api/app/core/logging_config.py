"""
Logging setup for the NotesFlow service.

``setup_logging`` is called by ``create_app`` and attaches a console
handler (and a file handler when ``LOG_FILE`` is set) to the root
logger.  It is a no-op when the root logger already has handlers, so
running under uvicorn or building several apps in one test session does
not duplicate output.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# HTTP libraries that log every request at INFO.
QUIET_LOGGERS = ("httpx", "urllib3")


def _handler(handler: logging.Handler) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger once.

    Parameters
    ----------
    level : str
        Level name such as ``"DEBUG"`` or ``"info"``.  Unknown names fall
        back to ``INFO``.
    logfile : Optional[str]
        File to append log records to.  Its directory is created if
        needed.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.addHandler(_handler(logging.StreamHandler()))

    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        root.addHandler(_handler(logging.FileHandler(log_path, encoding="utf-8")))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
