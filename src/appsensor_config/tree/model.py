"""Server configuration object graph.

The model is a strict tree: a ServerConfiguration owns its correlation sets
and detection points, a detection point owns its threshold and responses,
and thresholds and responses each own one interval.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Milliseconds per supported interval unit
UNIT_MILLIS: Dict[str, int] = {
    "milliseconds": 1,
    "seconds": 1000,
    "minutes": 60 * 1000,
    "hours": 60 * 60 * 1000,
    "days": 24 * 60 * 60 * 1000,
}


@dataclass
class Interval:
    """A duration plus a unit of time. The unit is kept verbatim."""

    duration: int = 0
    unit: Optional[str] = None

    def to_millis(self) -> int:
        """Convert the interval to milliseconds.

        Raises:
            ValueError: If the unit is not one of the supported time units
        """
        if self.unit not in UNIT_MILLIS:
            raise ValueError(
                f"Unsupported interval unit {self.unit!r}; "
                f"expected one of {sorted(UNIT_MILLIS)}"
            )
        return self.duration * UNIT_MILLIS[self.unit]

    def to_dict(self) -> Dict[str, Any]:
        return {"duration": self.duration, "unit": self.unit}


@dataclass
class Threshold:
    """Count-within-interval condition that triggers a detection point."""

    count: int = 0
    interval: Optional[Interval] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "interval": self.interval.to_dict() if self.interval else None,
        }


@dataclass
class Response:
    """Action to take, with its own timing interval."""

    action: Optional[str] = None
    interval: Optional[Interval] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action,
            "interval": self.interval.to_dict() if self.interval else None,
        }


@dataclass
class DetectionPoint:
    """Named rule that monitored applications report violations against."""

    id: Optional[str] = None
    threshold: Optional[Threshold] = None
    responses: List[Response] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "threshold": self.threshold.to_dict() if self.threshold else None,
            "responses": [response.to_dict() for response in self.responses],
        }


@dataclass
class CorrelationSet:
    """Client applications whose events are analyzed as if from one source."""

    client_applications: List[str] = field(default_factory=list)

    def __contains__(self, client_application: object) -> bool:
        return client_application in self.client_applications

    def to_dict(self) -> Dict[str, Any]:
        return {"client_applications": list(self.client_applications)}


# Implementation-identifier fields in document order
IMPLEMENTATION_FIELDS = (
    "event_analysis_engine_implementation",
    "attack_analysis_engine_implementation",
    "response_analysis_engine_implementation",
    "event_store_implementation",
    "attack_store_implementation",
    "response_store_implementation",
    "logger_implementation",
    "response_handler_implementation",
)

OBSERVER_FIELDS = (
    "event_store_observer_implementations",
    "attack_store_observer_implementations",
    "response_store_observer_implementations",
)


@dataclass
class ServerConfiguration:
    """Root aggregate of a server configuration document.

    Implementation fields hold fully-qualified implementation names and are
    either None or non-empty trimmed strings.
    """

    client_application_identification_header_name: Optional[str] = None
    correlation_sets: List[CorrelationSet] = field(default_factory=list)

    event_analysis_engine_implementation: Optional[str] = None
    attack_analysis_engine_implementation: Optional[str] = None
    response_analysis_engine_implementation: Optional[str] = None
    event_store_implementation: Optional[str] = None
    attack_store_implementation: Optional[str] = None
    response_store_implementation: Optional[str] = None
    logger_implementation: Optional[str] = None
    response_handler_implementation: Optional[str] = None

    event_store_observer_implementations: List[str] = field(default_factory=list)
    attack_store_observer_implementations: List[str] = field(default_factory=list)
    response_store_observer_implementations: List[str] = field(default_factory=list)

    detection_points: List[DetectionPoint] = field(default_factory=list)

    def find_detection_points(self, detection_point_id: str) -> List[DetectionPoint]:
        """Return every detection point with the given id, in document order."""
        return [point for point in self.detection_points if point.id == detection_point_id]

    def find_detection_point(self, detection_point_id: str) -> Optional[DetectionPoint]:
        """Return the first detection point with the given id."""
        return next(
            (point for point in self.detection_points if point.id == detection_point_id),
            None
        )

    def related_client_applications(self, client_application: str) -> List[str]:
        """Return the client applications correlated with the given one.

        The result always contains ``client_application`` itself, followed by
        the members of every correlation set that contains it, without
        duplicates.
        """
        related = [client_application]
        for correlation_set in self.correlation_sets:
            if client_application not in correlation_set:
                continue
            for member in correlation_set.client_applications:
                if member not in related:
                    related.append(member)
        return related

    @property
    def implementations(self) -> Dict[str, Optional[str]]:
        """Map of implementation role field to configured implementation."""
        return {name: getattr(self, name) for name in IMPLEMENTATION_FIELDS}

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary representation."""
        result: Dict[str, Any] = {
            "client_application_identification_header_name": (
                self.client_application_identification_header_name
            ),
            "correlation_sets": [cs.to_dict() for cs in self.correlation_sets],
        }
        result.update(self.implementations)
        for name in OBSERVER_FIELDS:
            result[name] = list(getattr(self, name))
        result["detection_points"] = [dp.to_dict() for dp in self.detection_points]
        return result
