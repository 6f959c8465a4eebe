"""
Logging configuration for the yamlconfig command.

Library modules only create loggers with logging.getLogger(__name__); handlers
are installed by applications, or by configure_logging() in the CLI.

Format: 2026-01-06T14:05:52Z [source] LEVEL message

The level comes from YAMLCONFIG_LOG_LEVEL ("TRACE", "DEBUG", "INFO" (default),
"WARNING", "ERROR") unless passed explicitly.

Usage:
    from yamlconfig.logging_config import configure_logging, get_logger

    configure_logging(source="yamlconfig")
    logger = get_logger(__name__)
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime

from .settings import get_settings

# Per-field validator output sits below DEBUG
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class ISO8601Formatter(logging.Formatter):
    """Render records as ``<UTC timestamp> [source] LEVEL message``, traceback appended."""

    def __init__(self, source: str = "yamlconfig"):
        super().__init__()
        self.source = source

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        return datetime.fromtimestamp(record.created, UTC).strftime("%Y-%m-%dT%H:%M:%SZ")

    def format(self, record: logging.LogRecord) -> str:
        line = f"{self.formatTime(record)} [{self.source}] {record.levelname} {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _level_from_settings() -> int:
    # TRACE is registered above, so the mapping knows it
    return logging.getLevelNamesMapping()[get_settings().log_level]


def configure_logging(
    source: str = "yamlconfig",
    level: int | None = None,
    debug: bool | None = None,
) -> logging.Logger:
    """Configure root logging for a command-line run.

    Args:
        source: Source identifier shown in brackets
        level: Logging level (defaults to the YAMLCONFIG_LOG_LEVEL setting)
        debug: Enable debug mode (overrides the setting with DEBUG)

    Returns:
        Configured root logger
    """
    if level is None:
        level = logging.DEBUG if debug else _level_from_settings()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ISO8601Formatter(source=source))
    root_logger.addHandler(handler)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name."""
    return logging.getLogger(name)
