"""
Logging utilities with structured logging support
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict


class StructuredFormatter(logging.Formatter):
    """JSON structured logging formatter"""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Keyword fields passed through log_info() and friends
        fields = getattr(record, "fields", None)
        if isinstance(fields, dict):
            log_data.update(fields)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logger(name: str, level: str = "") -> logging.Logger:
    """
    Setup a structured logger

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Falls back to LOG_LEVEL, then INFO. An unknown level name
            also resolves to INFO.

    Returns:
        Configured logger instance
    """
    level = level or os.getenv("LOG_LEVEL", "INFO")
    logger = logging.getLogger(name)
    resolved = getattr(logging, level.upper(), None)
    logger.setLevel(resolved if isinstance(resolved, int) else logging.INFO)

    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    return logger


# Global logger instance
logger = setup_logger("ui-pilot")


def log_info(message: str, **kwargs):
    """Log info message with extra fields"""
    logger.info(message, extra={"fields": kwargs})


def log_error(message: str, **kwargs):
    """Log error message with extra fields"""
    logger.error(message, extra={"fields": kwargs})


def log_warning(message: str, **kwargs):
    """Log warning message with extra fields"""
    logger.warning(message, extra={"fields": kwargs})


def log_debug(message: str, **kwargs):
    """Log debug message with extra fields"""
    logger.debug(message, extra={"fields": kwargs})
