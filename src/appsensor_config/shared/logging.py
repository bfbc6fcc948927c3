"""Structured logging utilities for server configuration reading.

This module provides correlation-aware logging so that every record emitted
during a read carries the component and correlation ID of the operation.
"""

import logging
from typing import Any, Dict, Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(component)s] %(name)s: %(message)s"


class _ComponentDefaults(logging.Filter):
    """Fill in structured fields for records emitted outside CorrelationLogger."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "component"):
            record.component = record.name.split(".")[-1]
        if not hasattr(record, "correlation_id"):
            record.correlation_id = None
        return True


class CorrelationLogger:
    """Logger that automatically includes correlation ID and component information."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for request tracking
            component: Component name for structured logging
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        if extra:
            combined_extra.update(extra)
        return combined_extra

    def _log(
        self,
        level: int,
        message: str,
        extra: Optional[Dict[str, Any]],
        exc_info: bool
    ) -> None:
        if self.logger.isEnabledFor(level):
            self.logger.log(level, message, extra=self._get_extra(extra), exc_info=exc_info)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log debug message with correlation info."""
        self._log(logging.DEBUG, message, extra, False)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log info message with correlation info."""
        self._log(logging.INFO, message, extra, False)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log warning message with correlation info."""
        self._log(logging.WARNING, message, extra, False)

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log error message with correlation info."""
        self._log(logging.ERROR, message, extra, exc_info)

    def exception(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log error message with correlation info and traceback."""
        self._log(logging.ERROR, message, extra, True)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)


def configure_logging(level: str = "INFO", stream: Optional[Any] = None) -> logging.Handler:
    """Attach a structured handler to the package logger.

    Args:
        level: Standard logging level name
        stream: Destination stream (defaults to stderr)

    Returns:
        The installed handler
    """
    package_logger = logging.getLogger("appsensor_config")
    for existing in list(package_logger.handlers):
        if getattr(existing, "_appsensor_config", False):
            package_logger.removeHandler(existing)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(_ComponentDefaults())
    handler._appsensor_config = True  # type: ignore[attr-defined]
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return handler
