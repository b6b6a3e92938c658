"""
Logging setup shared by the whole application
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from ..config import settings

_configured = False


def setup_logging() -> None:
    """Configure the root logger from settings. Safe to call more than once."""
    global _configured
    if _configured:
        return

    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    formatter = logging.Formatter(settings.log_format)

    if settings.log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    if settings.log_to_file:
        log_dir = os.path.dirname(settings.log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            settings.log_file_path,
            maxBytes=settings.log_max_size_mb * 1024 * 1024,
            backupCount=settings.log_backup_count,
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # SQL echo is controlled by the engine; keep the pool quiet in minimal mode
    if settings.log_verbosity != "full":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def detail_level() -> int:
    """Level for chatty events: INFO in full verbosity, DEBUG otherwise."""
    return logging.INFO if settings.log_verbosity == "full" else logging.DEBUG
