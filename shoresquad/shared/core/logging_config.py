"""Logging setup for the ShoreSquad entry points.

File handler: everything at ``LOG_LEVEL`` (default DEBUG) to
``data/logs/shoresquad.log``. Console handler: WARNING and ERROR only.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

NOISY_LOGGERS = (
    "urllib3",
    "watchdog",
    "streamlit",
    "tornado.access",
    "fsevents",
)


def configure_logging(logs_dir: Optional[Path] = None) -> Path:
    """Install the rotating file handler and the console handler.

    Returns the log file path. Calling it again replaces the handlers
    instead of stacking duplicates.
    """
    logs_dir = logs_dir or Path.cwd() / "data" / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file_path = logs_dir / "shoresquad.log"

    file_log_level = LOG_LEVEL_MAP.get(os.getenv("LOG_LEVEL", "DEBUG").upper(), logging.DEBUG)

    root_logger = logging.getLogger()
    root_logger.setLevel(file_log_level)
    root_logger.handlers.clear()

    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(file_log_level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S")
    )
    root_logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(f"Logging configured: file={log_file_path}, console=WARNING+")
    return log_file_path
