"""Failure types raised while reading a server configuration document.

Every failure aborts the parse. Callers see a single exception carrying the
field and scope that triggered it, never a partially built configuration.
"""

from typing import Any, Dict, Optional


class ConfigurationParseError(Exception):
    """Base exception for all server configuration read failures."""

    kind = "parse_error"

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        scope: Optional[str] = None,
        position: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field_name = field_name
        self.scope = scope
        self.position = position
        self.details = details or {}

    def __str__(self) -> str:
        context = []
        if self.scope:
            context.append(f"scope={self.scope}")
        if self.field_name:
            context.append(f"field={self.field_name}")
        if self.position is not None:
            context.append(f"line={self.position}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert the failure into a serializable dictionary."""
        return {
            "kind": self.kind,
            "message": self.message,
            "field": self.field_name,
            "scope": self.scope,
            "line": self.position,
            "details": dict(self.details),
        }


class StreamFailure(ConfigurationParseError):
    """The token cursor could not produce the next event.

    Raised for I/O errors, malformed XML and element text that unexpectedly
    contains child elements.
    """

    kind = "stream_failure"


class CoercionFailure(ConfigurationParseError):
    """A value could not be coerced, or a required attribute is absent."""

    kind = "coercion_failure"


class SchemaViolation(ConfigurationParseError):
    """Structurally unexpected input the skip policy does not tolerate."""

    kind = "schema_violation"
