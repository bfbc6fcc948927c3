"""Configuration classes for server configuration reading.

This module provides the immutable reader configuration that controls the
namespace table, the strictness switches and the default document locations.
"""

import json
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

CONFIG_NAMESPACE = (
    "https://www.owasp.org/index.php/OWASP_AppSensor_Project/xsd/"
    "appsensor_server_config_2.0.xsd"
)
CONFIG_PREFIX = "config"

DEFAULT_XML_LOCATION = "appsensor-server-config.xml"
DEFAULT_XSD_LOCATION = "appsensor_server_config_2.0.xsd"

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _default_namespaces() -> Mapping[str, str]:
    return MappingProxyType({CONFIG_NAMESPACE: CONFIG_PREFIX})


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ReaderConfig:
    """Configuration for reading server configuration documents.

    Frozen so that a single instance can be shared by several readers. The
    namespace table is copied into a read-only mapping on construction.
    """

    namespaces: Mapping[str, str] = field(default_factory=_default_namespaces)

    # Strictness switches; both default to the permissive behaviour
    strict_end_of_document: bool = False
    reject_repeated_singletons: bool = False

    # Diagnostics
    record_skipped_elements: bool = True
    logging_level: str = "WARNING"
    correlation_id: Optional[str] = None

    # Input acquisition
    default_xml_location: str = DEFAULT_XML_LOCATION
    default_xsd_location: str = DEFAULT_XSD_LOCATION
    huge_tree: bool = False

    def __post_init__(self) -> None:
        """Validate the reader configuration."""
        if not isinstance(self.namespaces, Mapping):
            raise ConfigValidationError(
                "namespaces must be a mapping of namespace URI to prefix",
                field_name="namespaces",
            )
        for uri, prefix in self.namespaces.items():
            if not uri:
                raise ConfigValidationError(
                    "namespace URI cannot be empty", field_name="namespaces"
                )
            if not prefix or ":" in prefix:
                raise ConfigValidationError(
                    f"invalid prefix {prefix!r} for namespace {uri}",
                    field_name="namespaces",
                    suggestions=["Use a non-empty prefix without ':'"],
                )
        object.__setattr__(self, "namespaces", MappingProxyType(dict(self.namespaces)))

        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {VALID_LOGGING_LEVELS}",
                field_name="logging_level",
            )
        if not self.default_xml_location:
            raise ConfigValidationError(
                "default_xml_location cannot be empty",
                field_name="default_xml_location",
            )
        if not self.default_xsd_location:
            raise ConfigValidationError(
                "default_xsd_location cannot be empty",
                field_name="default_xsd_location",
            )

    @classmethod
    def permissive(cls) -> "ReaderConfig":
        """Create the default configuration that tolerates truncation and repeats."""
        return cls()

    @classmethod
    def strict(cls) -> "ReaderConfig":
        """Create a configuration that rejects truncated scopes and repeated singletons."""
        return cls(strict_end_of_document=True, reject_repeated_singletons=True)

    def override(self, **kwargs: Any) -> "ReaderConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ReaderConfig().override(strict_end_of_document=True)
        """
        unknown = set(kwargs) - {f.name for f in fields(self)}
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {sorted(unknown)}",
                field_name=sorted(unknown)[0],
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = dict(value) if f.name == "namespaces" else value
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReaderConfig":
        """Create configuration from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def from_json(cls, json_str: str) -> "ReaderConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)
