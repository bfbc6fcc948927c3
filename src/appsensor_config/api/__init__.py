"""Public reading API with progressive disclosure."""

from .parser import (
    ServerConfigurationReader,
    read,
    read_default,
    read_file,
    read_string,
    read_with_diagnostics,
)

__all__ = [
    "ServerConfigurationReader",
    "read",
    "read_default",
    "read_file",
    "read_string",
    "read_with_diagnostics",
]
