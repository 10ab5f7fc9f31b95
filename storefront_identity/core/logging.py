# =============================================================================
# STOREFRONT IDENTITY - LOGGING CONFIGURATION
# =============================================================================
# File: core/logging.py
# Description: Root logger setup for the identity core (text or JSON lines)
# =============================================================================

import json
import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record),
            "logger": record.name,
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(
    name: str = "storefront_identity",
    level: str = "INFO",
    log_format: str = "text",
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Setup and configure the package logger.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "text" or "json"
        log_file: Optional file to write logs to

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Clear existing handlers
    logger.handlers.clear()

    if log_format == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(DEFAULT_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
