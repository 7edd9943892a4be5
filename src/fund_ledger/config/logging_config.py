"""Logging configuration."""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from fund_ledger.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure logging for the ``fund_ledger`` package.

    Records go to stdout and, when ``log_file`` is set, also to a rotating
    file under the data directory. ``level`` overrides the configured level.
    Calling this again does not add a second file handler.
    """
    settings = get_settings()
    log_level = getattr(logging, (level or settings.log_level).upper())

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    package_logger = logging.getLogger("fund_ledger")
    package_logger.setLevel(log_level)
    if settings.log_file:
        log_path = os.path.abspath(settings.get_data_dir() / settings.log_file)
        if not any(
            isinstance(h, RotatingFileHandler) and h.baseFilename == log_path
            for h in package_logger.handlers
        ):
            handler = RotatingFileHandler(
                log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
            )
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            package_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
