"""Logging utilities for the PTU calculator.

This module provides standardized logging functionality for table loading,
pricing lookups and calculations.
"""

import logging
import sys
from enum import Enum
from typing import Any, Dict, Optional, Union

PACKAGE_LOGGER_NAME = "azure_ptu_calculator"


class LogLevel(int, Enum):
    """Log levels for the calculator."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class LogEvent(str, Enum):
    """Event types for calculator logging."""

    PRICING_LOOKUP = "pricing_lookup"
    TABLE_LOAD = "table_load"
    CALCULATION = "calculation"
    VALIDATION = "validation"
    HISTORY = "history"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger nested under the package logger.

    Args:
        name: Module or component name. ``None`` returns the package logger.

    Returns:
        Logger instance
    """
    if not name or name == PACKAGE_LOGGER_NAME:
        return logging.getLogger(PACKAGE_LOGGER_NAME)
    if name.startswith(PACKAGE_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER_NAME}.{name}")


def configure_logging(level: Union[int, str] = logging.WARNING) -> None:
    """Attach a stderr handler to the package logger and set its level.

    Calling this again updates the level and points the handler at the
    current ``sys.stderr``.

    Args:
        level: Level name (``"DEBUG"``) or number
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logger = get_logger()
    logger.setLevel(level)
    handlers = [h for h in logger.handlers if getattr(h, "_apc_handler", False)]
    for existing in handlers:
        existing.stream = sys.stderr  # type: ignore[attr-defined]
    if not handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        handler._apc_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)


def _format_data(data: Dict[str, Any]) -> str:
    return " ".join(f"{key}={value}" for key, value in sorted(data.items()) if value is not None)


def _log(level: LogLevel, event: LogEvent, message: str, data: Dict[str, Any]) -> None:
    """Log an event on the package logger.

    Args:
        level: Severity level
        event: Event type
        message: Human readable message
        data: Dictionary of event data
    """
    logger = get_logger()
    if not logger.isEnabledFor(level):
        return
    suffix = _format_data(data)
    text = f"[{event.value}] {message}" + (f" ({suffix})" if suffix else "")
    logger.log(level, text, extra={"event": event.value, "event_data": data})


def log_debug(event: LogEvent, message: str, **data: Any) -> None:
    """Log a debug-level event."""
    _log(LogLevel.DEBUG, event, message, data)


def log_info(event: LogEvent, message: str, **data: Any) -> None:
    """Log an info-level event."""
    _log(LogLevel.INFO, event, message, data)


def log_warning(event: LogEvent, message: str, **data: Any) -> None:
    """Log a warning-level event."""
    _log(LogLevel.WARNING, event, message, data)


def log_error(event: LogEvent, message: str, **data: Any) -> None:
    """Log an error-level event."""
    _log(LogLevel.ERROR, event, message, data)
