"""Recursive-descent reading of server configuration documents.

Each nested construct of the document has its own sub-parser. A sub-parser
runs a local loop over the shared cursor until it sees its own end tag,
delegates nested constructs to the matching sub-parser and skips elements it
does not recognize. It returns the value it built and leaves the cursor on
its own end tag.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from appsensor_config.shared import (
    ConfigurationParseError,
    CorrelationLogger,
    DiagnosticEntry,
    DiagnosticSeverity,
    ParseMetrics,
    ReaderConfig,
    SchemaViolation,
    StreamFailure,
    get_logger,
)
from appsensor_config.tokenization import EventKind, NamespaceResolver, TokenCursor

from .coercion import read_int, read_text, required_attribute
from .model import (
    CorrelationSet,
    DetectionPoint,
    Interval,
    Response,
    ServerConfiguration,
    Threshold,
)

ROOT_TAG = "config:appsensor-server-config"
HEADER_NAME_TAG = "config:client-application-identification-header-name"
CORRELATION_CONFIG_TAG = "config:correlation-config"
CORRELATED_CLIENT_SET_TAG = "config:correlated-client-set"
CLIENT_APPLICATION_NAME_TAG = "config:client-application-name"
OBSERVER_TAG = "config:observer"
DETECTION_POINT_TAG = "config:detection-point"
ID_TAG = "config:id"
THRESHOLD_TAG = "config:threshold"
RESPONSE_TAG = "config:response"
COUNT_TAG = "config:count"
ACTION_TAG = "config:action"
INTERVAL_TAG = "config:interval"

CLASS_ATTRIBUTE = "class"
UNIT_ATTRIBUTE = "unit"

# Leaf elements whose class attribute names an engine implementation
IMPLEMENTATION_TAGS: Dict[str, str] = {
    "config:event-analyzer": "event_analysis_engine_implementation",
    "config:attack-analyzer": "attack_analysis_engine_implementation",
    "config:response-analyzer": "response_analysis_engine_implementation",
    "config:event-store": "event_store_implementation",
    "config:attack-store": "attack_store_implementation",
    "config:response-store": "response_store_implementation",
    "config:logger": "logger_implementation",
    "config:response-handler": "response_handler_implementation",
}

# Observer lists share one element shape and differ only by their tag
OBSERVER_LIST_TAGS: Dict[str, str] = {
    "config:event-store-observers": "event_store_observer_implementations",
    "config:attack-store-observers": "attack_store_observer_implementations",
    "config:response-store-observers": "response_store_observer_implementations",
}


@dataclass
class ParseContext:
    """State shared by the sub-parsers of a single read."""

    cursor: TokenCursor
    resolver: NamespaceResolver
    config: ReaderConfig
    logger: CorrelationLogger
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: ParseMetrics = field(default_factory=ParseMetrics)

    def name(self) -> Optional[str]:
        """Dispatch key of the current event."""
        cursor = self.cursor
        return self.resolver.qualified_name(cursor.namespace, cursor.local_name)

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component="configuration_builder",
                position=self.cursor.line,
                details=details,
                correlation_id=self.config.correlation_id,
            )
        )

    def skip(self, name: Optional[str], scope: str) -> None:
        """Record an unrecognized element start. Never raises."""
        self.metrics.elements_skipped += 1
        self.logger.debug(
            "Skipping unrecognized element",
            extra={"element": name, "scope": scope, "line": self.cursor.line}
        )
        if self.config.record_skipped_elements:
            self.add_diagnostic(
                DiagnosticSeverity.DEBUG,
                f"Skipped unrecognized element {name}",
                details={"element": name, "scope": scope},
            )

    def assign_once(self, seen: Set[str], field_name: str, scope: str) -> None:
        """Track a singleton child; the last occurrence wins unless rejected."""
        if field_name not in seen:
            seen.add(field_name)
            return
        if self.config.reject_repeated_singletons:
            raise SchemaViolation(
                f"Repeated singleton element '{field_name}'",
                field_name=field_name,
                scope=scope,
                position=self.cursor.line,
            )
        self.metrics.singletons_overwritten += 1
        self.logger.debug(
            "Repeated singleton overwrites earlier value",
            extra={"field": field_name, "scope": scope, "line": self.cursor.line}
        )
        self.add_diagnostic(
            DiagnosticSeverity.WARNING,
            f"Repeated {field_name} overwrote an earlier value",
            details={"field": field_name, "scope": scope},
        )

    def end_of_stream(self, scope: str) -> None:
        """Handle stream exhaustion before ``scope`` closed."""
        if self.config.strict_end_of_document:
            raise StreamFailure(
                "Document ended before closing tag",
                scope=scope,
                position=self.cursor.line,
            )
        self.logger.debug(
            "Document ended before closing tag; returning partial value",
            extra={"scope": scope}
        )
        self.add_diagnostic(
            DiagnosticSeverity.WARNING,
            f"Document ended before {scope} closed",
            details={"scope": scope},
        )


def read_server_configuration(context: ParseContext) -> ServerConfiguration:
    """Read the root scope into a ServerConfiguration."""
    configuration = ServerConfiguration()
    cursor = context.cursor

    while cursor.advance():
        name = context.name()
        if cursor.kind is EventKind.ELEMENT_START:
            if name == ROOT_TAG:
                continue
            if name == HEADER_NAME_TAG:
                configuration.client_application_identification_header_name = (
                    read_text(cursor)
                )
            elif name == CORRELATION_CONFIG_TAG:
                configuration.correlation_sets.extend(read_correlation_sets(context))
            elif name in IMPLEMENTATION_TAGS:
                field_name = IMPLEMENTATION_TAGS[name]
                setattr(
                    configuration,
                    field_name,
                    required_attribute(cursor, CLASS_ATTRIBUTE, field_name, ROOT_TAG),
                )
            elif name in OBSERVER_LIST_TAGS:
                observers = getattr(configuration, OBSERVER_LIST_TAGS[name])
                observers.extend(read_observers(context, name))
            elif name == DETECTION_POINT_TAG:
                configuration.detection_points.append(read_detection_point(context))
            else:
                context.skip(name, ROOT_TAG)
        elif cursor.kind is EventKind.ELEMENT_END and name == ROOT_TAG:
            return configuration

    context.end_of_stream(ROOT_TAG)
    return configuration


def read_correlation_sets(context: ParseContext) -> List[CorrelationSet]:
    """Read a correlation-config scope into its correlation sets."""
    correlation_sets: List[CorrelationSet] = []
    current: Optional[CorrelationSet] = None
    cursor = context.cursor

    while cursor.advance():
        name = context.name()
        if cursor.kind is EventKind.ELEMENT_START:
            if name == CORRELATED_CLIENT_SET_TAG:
                current = CorrelationSet()
            elif name == CLIENT_APPLICATION_NAME_TAG:
                if current is None:
                    raise SchemaViolation(
                        "Client application name outside a correlated client set",
                        field_name="client_applications",
                        scope=CORRELATION_CONFIG_TAG,
                        position=cursor.line,
                    )
                current.client_applications.append(read_text(cursor))
            else:
                context.skip(name, CORRELATION_CONFIG_TAG)
        elif cursor.kind is EventKind.ELEMENT_END:
            if name == CORRELATED_CLIENT_SET_TAG and current is not None:
                correlation_sets.append(current)
                current = None
            elif name == CORRELATION_CONFIG_TAG:
                return correlation_sets

    context.end_of_stream(CORRELATION_CONFIG_TAG)
    return correlation_sets


def read_observers(context: ParseContext, end_tag: str) -> List[str]:
    """Read an observer list closed by ``end_tag``."""
    observers: List[str] = []
    field_name = OBSERVER_LIST_TAGS.get(end_tag, "observers")
    cursor = context.cursor

    while cursor.advance():
        name = context.name()
        if cursor.kind is EventKind.ELEMENT_START:
            if name == OBSERVER_TAG:
                observers.append(
                    required_attribute(cursor, CLASS_ATTRIBUTE, field_name, end_tag)
                )
            else:
                context.skip(name, end_tag)
        elif cursor.kind is EventKind.ELEMENT_END and name == end_tag:
            return observers

    context.end_of_stream(end_tag)
    return observers


def read_detection_point(context: ParseContext) -> DetectionPoint:
    """Read a detection-point scope."""
    detection_point = DetectionPoint()
    seen: Set[str] = set()
    cursor = context.cursor

    while cursor.advance():
        name = context.name()
        if cursor.kind is EventKind.ELEMENT_START:
            if name == ID_TAG:
                context.assign_once(seen, "id", DETECTION_POINT_TAG)
                detection_point.id = read_text(cursor)
            elif name == THRESHOLD_TAG:
                context.assign_once(seen, "threshold", DETECTION_POINT_TAG)
                detection_point.threshold = read_threshold(context)
            elif name == RESPONSE_TAG:
                detection_point.responses.append(read_response(context))
            else:
                context.skip(name, DETECTION_POINT_TAG)
        elif cursor.kind is EventKind.ELEMENT_END and name == DETECTION_POINT_TAG:
            return detection_point

    context.end_of_stream(DETECTION_POINT_TAG)
    return detection_point


def read_threshold(context: ParseContext) -> Threshold:
    """Read a threshold scope."""
    threshold = Threshold()
    seen: Set[str] = set()
    cursor = context.cursor

    while cursor.advance():
        name = context.name()
        if cursor.kind is EventKind.ELEMENT_START:
            if name == COUNT_TAG:
                context.assign_once(seen, "count", THRESHOLD_TAG)
                threshold.count = read_int(cursor, "count", THRESHOLD_TAG)
            elif name == INTERVAL_TAG:
                context.assign_once(seen, "interval", THRESHOLD_TAG)
                threshold.interval = read_interval(context, THRESHOLD_TAG)
            else:
                context.skip(name, THRESHOLD_TAG)
        elif cursor.kind is EventKind.ELEMENT_END and name == THRESHOLD_TAG:
            return threshold

    context.end_of_stream(THRESHOLD_TAG)
    return threshold


def read_response(context: ParseContext) -> Response:
    """Read a response scope."""
    response = Response()
    seen: Set[str] = set()
    cursor = context.cursor

    while cursor.advance():
        name = context.name()
        if cursor.kind is EventKind.ELEMENT_START:
            if name == ACTION_TAG:
                context.assign_once(seen, "action", RESPONSE_TAG)
                response.action = read_text(cursor)
            elif name == INTERVAL_TAG:
                context.assign_once(seen, "interval", RESPONSE_TAG)
                response.interval = read_interval(context, RESPONSE_TAG)
            else:
                context.skip(name, RESPONSE_TAG)
        elif cursor.kind is EventKind.ELEMENT_END and name == RESPONSE_TAG:
            return response

    context.end_of_stream(RESPONSE_TAG)
    return response


def read_interval(context: ParseContext, scope: str) -> Interval:
    """Read an interval leaf: ``unit`` attribute plus integer duration text."""
    cursor = context.cursor
    unit = required_attribute(cursor, UNIT_ATTRIBUTE, "interval.unit", scope)
    duration = read_int(cursor, "interval.duration", scope)
    return Interval(duration=duration, unit=unit)


@dataclass
class ReadResult:
    """A read configuration together with its diagnostics and metrics."""

    configuration: ServerConfiguration
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: ParseMetrics = field(default_factory=ParseMetrics)
    source: Optional[str] = None
    correlation_id: Optional[str] = None

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def summary(self) -> Dict[str, Any]:
        """Get a compact summary of the read."""
        configuration = self.configuration
        return {
            "source": self.source,
            "detection_points": len(configuration.detection_points),
            "responses": sum(
                len(point.responses) for point in configuration.detection_points
            ),
            "correlation_sets": len(configuration.correlation_sets),
            "configured_implementations": sum(
                1 for value in configuration.implementations.values() if value
            ),
            "diagnostics": len(self.diagnostics),
            **self.metrics.to_dict(),
        }


class ServerConfigurationBuilder:
    """Builds a ServerConfiguration from a token cursor.

    The namespace resolver is created once from the reader configuration and
    reused for every build.
    """

    def __init__(
        self,
        config: Optional[ReaderConfig] = None,
        resolver: Optional[NamespaceResolver] = None,
    ) -> None:
        """Initialize configuration builder.

        Args:
            config: Reader configuration (defaults to the permissive preset)
            resolver: Namespace resolver (defaults to one built from config)
        """
        self.config = config or ReaderConfig.permissive()
        self.resolver = resolver or NamespaceResolver(self.config.namespaces)
        self.logger = get_logger(
            __name__, self.config.correlation_id, "configuration_builder"
        )

    def build(self, cursor: TokenCursor, source: Optional[str] = None) -> ReadResult:
        """Run the root sub-parser over ``cursor``.

        Args:
            cursor: Fresh cursor positioned before the first event
            source: Description of the document for logs and results

        Returns:
            ReadResult holding the configuration, diagnostics and metrics

        Raises:
            ConfigurationParseError: On the first stream, coercion or schema
                failure; no partial configuration is returned
        """
        start_time = time.time()
        context = ParseContext(
            cursor=cursor,
            resolver=self.resolver,
            config=self.config,
            logger=self.logger,
        )

        try:
            configuration = read_server_configuration(context)
        except ConfigurationParseError as e:
            self.logger.error(
                "Server configuration read failed",
                extra={
                    "source": source,
                    "kind": e.kind,
                    "field": e.field_name,
                    "scope": e.scope,
                    "line": e.position,
                    "events_processed": cursor.events_processed,
                }
            )
            raise

        context.metrics.events_processed = cursor.events_processed
        context.metrics.processing_time_ms = (time.time() - start_time) * 1000

        result = ReadResult(
            configuration=configuration,
            diagnostics=context.diagnostics,
            metrics=context.metrics,
            source=source,
            correlation_id=self.config.correlation_id,
        )
        self.logger.info(
            "Server configuration read completed",
            extra={
                "source": source,
                "detection_points": len(configuration.detection_points),
                "elements_skipped": context.metrics.elements_skipped,
                "processing_time_ms": context.metrics.processing_time_ms,
            }
        )
        return result
