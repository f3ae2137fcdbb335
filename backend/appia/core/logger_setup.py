# appia/core/logger_setup.py
"""
Logging setup for the Appia backend.

Configures Python's standard logging from the application settings:
a console handler plus an optional rotating file handler.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

from appia.core.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(settings: Settings) -> None:
    log_level_str = (settings.log_level or "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Avoid duplicate handlers when the app factory runs more than once (tests, reload)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    if settings.log_file:
        try:
            log_dir = os.path.dirname(settings.log_file)
            if log_dir and not os.path.exists(log_dir):
                os.makedirs(log_dir)
            # 5MB per file, keep 3 backups
            file_handler = RotatingFileHandler(
                settings.log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
            )
            file_handler.setFormatter(formatter)
            file_handler.setLevel(log_level)
            root_logger.addHandler(file_handler)
        except OSError as e:
            logging.error(f"Failed to configure file logging to {settings.log_file}: {e}", exc_info=True)

    # httpx/anthropic are chatty at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.info(f"Logging configured at level {log_level_str}.")
