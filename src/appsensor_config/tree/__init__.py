"""Configuration object graph and the sub-parsers that build it.

Key Components:
    ServerConfigurationBuilder: Runs the root sub-parser over a token cursor
    ServerConfiguration: Root aggregate of a server configuration document
    DetectionPoint, Threshold, Response, Interval, CorrelationSet: Model types
    ReadResult: Configuration plus diagnostics and metrics
"""

from .builder import (
    ParseContext,
    ReadResult,
    ServerConfigurationBuilder,
    read_correlation_sets,
    read_detection_point,
    read_observers,
    read_response,
    read_server_configuration,
    read_threshold,
)
from .model import (
    CorrelationSet,
    DetectionPoint,
    Interval,
    Response,
    ServerConfiguration,
    Threshold,
)

__all__ = [
    "CorrelationSet",
    "DetectionPoint",
    "Interval",
    "ParseContext",
    "ReadResult",
    "Response",
    "ServerConfiguration",
    "ServerConfigurationBuilder",
    "Threshold",
    "read_correlation_sets",
    "read_detection_point",
    "read_observers",
    "read_response",
    "read_server_configuration",
    "read_threshold",
]
