#!/usr/bin/env python3
"""
Logging configuration for the chat core and the terminal front end.
"""

from __future__ import annotations  # Allows forward references in type annotations
import logging
import sys
from logging.handlers import RotatingFileHandler

# Public API of this module
__all__ = ["LOG", "configure_logging"]

LOG_FILE = "peer_chat.log"


def configure_logging(log_file: str = LOG_FILE) -> logging.Logger:
    """
    Configures a logger named 'peerchat' with both console and file handlers.
    The file handler uses log rotation to manage log file size. Calling it
    again returns the same logger without stacking duplicate handlers.

    Returns:
        logging.Logger: Configured logger instance.
    """
    logger = logging.getLogger("peerchat")
    logger.setLevel(logging.INFO)  # Set logging level to INFO

    if logger.handlers:
        return logger

    # Console output handler
    sh = logging.StreamHandler(sys.stdout)

    # Rotating file handler (1MB max per file, keep 3 backups)
    fh = RotatingFileHandler(
        log_file,
        maxBytes=1_048_576,     # 1 MB
        backupCount=3,          # Keep last 3 log files
        encoding="utf-8",
        delay=True,             # Don't create the file until first record
    )

    # Define a consistent log format for both handlers
    fmt = logging.Formatter("[%(asctime)s] %(levelname)-8s %(message)s", "%H:%M:%S")
    sh.setFormatter(fmt)
    fh.setFormatter(fmt)

    # Attach both handlers to the logger
    logger.addHandler(sh)
    logger.addHandler(fh)

    return logger

# Global logger instance used throughout the application
LOG = configure_logging()
