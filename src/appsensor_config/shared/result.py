"""Diagnostic and metric types for server configuration reading.

This module defines the metadata attached to a read: diagnostics for
tolerated irregularities (skipped elements, overwritten singletons) and
counters describing the work the reader performed.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Tolerated input such as unknown elements
    INFO = auto()       # Informational messages
    WARNING = auto()    # Input that changed a previously read value
    ERROR = auto()      # Failure that aborted the read


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert diagnostic to dictionary representation."""
        return {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
            "line": self.position,
            "details": self.details or {},
        }


@dataclass
class ParseMetrics:
    """Counters collected while reading one document."""

    processing_time_ms: float = 0.0
    events_processed: int = 0
    elements_skipped: int = 0
    singletons_overwritten: int = 0

    @property
    def events_per_second(self) -> float:
        """Calculate events processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.events_processed * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processing_time_ms": self.processing_time_ms,
            "events_processed": self.events_processed,
            "elements_skipped": self.elements_skipped,
            "singletons_overwritten": self.singletons_overwritten,
        }
