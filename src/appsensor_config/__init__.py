"""AppSensor server configuration reader.

Streams a namespace-qualified server configuration document into a typed
object graph of detection points, correlation sets and engine
implementations.

Progressive API Disclosure:
- Level 1: Simple functions - read(), read_file(), read_string(), read_default()
- Level 2: Configured reader - ServerConfigurationReader class
- Level 3: Sub-parsers over a custom TokenCursor - see appsensor_config.tree
"""

__version__ = "0.1.0"
__author__ = "AppSensor Config Team"

from .api import (
    ServerConfigurationReader,
    read,
    read_default,
    read_file,
    read_string,
    read_with_diagnostics,
)
from .shared.config import ReaderConfig
from .shared.exceptions import (
    CoercionFailure,
    ConfigurationParseError,
    SchemaViolation,
    StreamFailure,
)
from .tree import (
    CorrelationSet,
    DetectionPoint,
    Interval,
    ReadResult,
    Response,
    ServerConfiguration,
    Threshold,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple reading functions
    "read",
    "read_default",
    "read_file",
    "read_string",
    "read_with_diagnostics",

    # Level 2: Configured reader
    "ServerConfigurationReader",
    "ReaderConfig",

    # Result objects and data structures
    "ReadResult",
    "ServerConfiguration",
    "CorrelationSet",
    "DetectionPoint",
    "Threshold",
    "Response",
    "Interval",

    # Failures
    "ConfigurationParseError",
    "StreamFailure",
    "CoercionFailure",
    "SchemaViolation",
]
