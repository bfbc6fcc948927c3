"""Shared utilities for server configuration reading.

This module provides the configuration object, failure types, diagnostics
and logging helpers used across the tokenization, tree and API layers.
"""

from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParseMetrics,
)
from .config import (
    CONFIG_NAMESPACE,
    CONFIG_PREFIX,
    ConfigError,
    ConfigValidationError,
    ReaderConfig,
)
from .exceptions import (
    CoercionFailure,
    ConfigurationParseError,
    SchemaViolation,
    StreamFailure,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)

__all__ = [
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "ParseMetrics",
    "CONFIG_NAMESPACE",
    "CONFIG_PREFIX",
    "ConfigError",
    "ConfigValidationError",
    "ReaderConfig",
    "CoercionFailure",
    "ConfigurationParseError",
    "SchemaViolation",
    "StreamFailure",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
]
