# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Structured logging for the package registry.

All registry loggers share the ``pub_registry`` namespace:

    pub_registry.app                application lifecycle
    pub_registry.api                HTTP routes
    pub_registry.service.<name>     services

Modules fetch their logger at import time without configuring it; the app
factory calls configure_logging() once with the Config it was given, and
the level and format apply to every logger through propagation.
"""

import logging
import json
import sys
from datetime import datetime, UTC
from typing import Any

LOGGER_NAMESPACE = "pub_registry"

_RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName",
    "relativeCreated", "thread", "threadName", "exc_info",
    "exc_text", "stack_info", "taskName",
}


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as JSON for easy parsing by log aggregation systems.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_data = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add extra fields
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Simple text formatter for human-readable logs."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )


def configure_logging(log_level: str = "INFO", log_format: str = "json") -> logging.Logger:
    """
    Attach the single console handler for the registry.

    Every registry logger lives under the ``pub_registry`` namespace and
    propagates here, so calling this again with a new level or format
    reconfigures all of them at once.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format type (json or text)

    Returns:
        The namespace logger
    """
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(getattr(logging, log_level.upper()))

    # Remove existing handlers to avoid duplicates
    logger.handlers = []

    if log_format == "json":
        formatter = JSONFormatter()
    else:
        formatter = TextFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    logger.propagate = False

    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    level: str = "INFO",
    **kwargs: Any
) -> None:
    """
    Log structured event with additional fields.

    Args:
        logger: Logger instance
        event: Event name
        level: Log level
        **kwargs: Additional fields to include in log
    """
    log_func = getattr(logger, level.lower())
    log_func(event, extra=kwargs)


def get_app_logger() -> logging.Logger:
    """Get logger for application lifecycle events."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.app")


def get_api_logger() -> logging.Logger:
    """Get logger for API routes."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.api")


def get_service_logger(service_name: str) -> logging.Logger:
    """Get logger for service layer."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.service.{service_name}")
