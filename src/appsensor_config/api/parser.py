"""Public API for reading server configuration documents.

This module acquires and releases the input stream, builds a hardened lxml
token cursor over it and hands the cursor to the configuration builder.

Progressive disclosure:
- Level 1: ``read``, ``read_file``, ``read_string``, ``read_default``
- Level 2: ``ServerConfigurationReader`` with its own configuration, default
  locations, schema validator hook and usage statistics
"""

import io
import time
from pathlib import Path
from typing import IO, Any, Callable, Dict, Optional, Union

from appsensor_config.shared import (
    ConfigurationParseError,
    ReaderConfig,
    SchemaViolation,
    StreamFailure,
    get_logger,
)
from appsensor_config.tokenization import LxmlTokenCursor, NamespaceResolver
from appsensor_config.tree import ReadResult, ServerConfiguration, ServerConfigurationBuilder

# Type definitions for input data
SourceType = Union[str, Path, bytes, IO[bytes]]
SchemaValidator = Callable[[str, str], None]

MS_PER_SECOND = 1000


def read(
    source: SourceType,
    config: Optional[ReaderConfig] = None,
) -> ServerConfiguration:
    """Read a server configuration from a path, bytes or binary stream.

    Strings are treated as file locations; use ``read_string`` for inline
    XML text.

    Args:
        source: File location, raw XML bytes or binary file-like object
        config: Optional reader configuration

    Returns:
        The populated ServerConfiguration

    Raises:
        ConfigurationParseError: If the document cannot be read

    Examples:
        >>> configuration = read("appsensor-server-config.xml")
        >>> configuration.detection_points[0].id
        'IE1'
    """
    return ServerConfigurationReader(config).read_source(source).configuration


def read_file(
    file_path: Union[str, Path],
    config: Optional[ReaderConfig] = None,
) -> ServerConfiguration:
    """Read a server configuration from a file."""
    return ServerConfigurationReader(config).read_source(Path(file_path)).configuration


def read_string(
    xml: Union[str, bytes],
    config: Optional[ReaderConfig] = None,
) -> ServerConfiguration:
    """Read a server configuration from inline XML text.

    Examples:
        >>> configuration = read_string(xml_text)
        >>> len(configuration.correlation_sets)
        1
    """
    if isinstance(xml, str):
        return ServerConfigurationReader(config).read_source(
            xml.encode("utf-8"), encoding="utf-8"
        ).configuration
    return ServerConfigurationReader(config).read_source(xml).configuration


def read_default(
    search_path: Optional[Union[str, Path]] = None,
    config: Optional[ReaderConfig] = None,
) -> ServerConfiguration:
    """Read the configuration from its default location under ``search_path``."""
    return ServerConfigurationReader(config, search_path=search_path).read()


def read_with_diagnostics(
    source: SourceType,
    config: Optional[ReaderConfig] = None,
) -> ReadResult:
    """Read a configuration and return it with diagnostics and metrics."""
    if isinstance(source, str):
        source = Path(source)
    return ServerConfigurationReader(config).read_source(source)


class ServerConfigurationReader:
    """Configurable server configuration reader.

    The namespace table is built once when the reader is constructed. Each
    read opens a fresh stream and cursor, which are released on every exit
    path.

    Attributes:
        config: Reader configuration
        search_path: Directory that relative and default locations resolve to
        schema_validator: Optional callable validating ``(xml, xsd)`` locations

    Examples:
        >>> reader = ServerConfigurationReader(ReaderConfig.strict())
        >>> configuration = reader.read()
        >>> reader.statistics["total_reads"]
        1
    """

    def __init__(
        self,
        config: Optional[ReaderConfig] = None,
        search_path: Optional[Union[str, Path]] = None,
        schema_validator: Optional[SchemaValidator] = None,
    ) -> None:
        self.config = config or ReaderConfig.permissive()
        self.search_path = Path(search_path) if search_path is not None else Path.cwd()
        self.schema_validator = schema_validator
        self.logger = get_logger(
            __name__, self.config.correlation_id, "configuration_reader"
        )

        self._resolver = NamespaceResolver(self.config.namespaces)
        self._builder = ServerConfigurationBuilder(self.config, self._resolver)

        self._read_count = 0
        self._successful_reads = 0
        self._total_processing_time = 0.0

    def read(
        self,
        xml: Optional[Union[str, Path]] = None,
        xsd: Optional[Union[str, Path]] = None,
    ) -> ServerConfiguration:
        """Read a configuration document, defaulting both locations.

        Args:
            xml: Document location (defaults to ``config.default_xml_location``)
            xsd: Schema location handed to the schema validator, if any
                (defaults to ``config.default_xsd_location``)

        Returns:
            The populated ServerConfiguration
        """
        return self.read_with_diagnostics(xml, xsd).configuration

    def read_with_diagnostics(
        self,
        xml: Optional[Union[str, Path]] = None,
        xsd: Optional[Union[str, Path]] = None,
    ) -> ReadResult:
        """Like ``read`` but returns the full ReadResult."""
        xml_path = self._resolve(xml, self.config.default_xml_location)
        xsd_path = self._resolve(xsd, self.config.default_xsd_location)

        self._validate(xml_path, xsd_path)

        return self.read_source(xml_path)

    def read_source(
        self,
        source: SourceType,
        encoding: Optional[str] = None,
    ) -> ReadResult:
        """Read a configuration from any supported source.

        Args:
            source: File location, raw XML bytes or binary file-like object
            encoding: Optional override of the document's declared encoding

        Returns:
            ReadResult with configuration, diagnostics and metrics

        Raises:
            ConfigurationParseError: On the first failure; nothing partial is
                returned
        """
        start_time = time.time()
        self._read_count += 1
        description = self._describe(source)

        self.logger.info(
            "Starting server configuration read",
            extra={"source": description, "read_count": self._read_count}
        )

        try:
            if isinstance(source, (str, Path)):
                path = self._resolve(source, self.config.default_xml_location)
                try:
                    stream = path.open("rb")
                except OSError as e:
                    raise StreamFailure(
                        f"Cannot open configuration file: {path}",
                        details={"path": str(path), "error": str(e)},
                    ) from e
                with stream:
                    result = self._build(stream, description, encoding)
            elif isinstance(source, bytes):
                result = self._build(io.BytesIO(source), description, encoding)
            elif hasattr(source, "read"):
                result = self._build(source, description, encoding)
            else:
                raise TypeError(
                    f"Unsupported configuration source type {type(source).__name__}"
                )
        finally:
            self._total_processing_time += (time.time() - start_time) * MS_PER_SECOND

        self._successful_reads += 1
        return result

    def _build(
        self,
        stream: IO[bytes],
        description: str,
        encoding: Optional[str],
    ) -> ReadResult:
        with LxmlTokenCursor(
            stream,
            huge_tree=self.config.huge_tree,
            encoding=encoding,
            correlation_id=self.config.correlation_id,
        ) as cursor:
            return self._builder.build(cursor, source=description)

    def _validate(self, xml_path: Path, xsd_path: Path) -> None:
        validator = self.schema_validator
        if validator is None:
            return
        try:
            validator(str(xml_path), str(xsd_path))
        except ConfigurationParseError:
            raise
        except Exception as e:
            self.logger.error(
                "Schema validation rejected configuration",
                extra={"xml": str(xml_path), "xsd": str(xsd_path), "error": str(e)}
            )
            raise SchemaViolation(
                f"Schema validation failed: {e}",
                details={"xml": str(xml_path), "xsd": str(xsd_path)},
            ) from e

    def _resolve(self, location: Optional[Union[str, Path]], default: str) -> Path:
        path = Path(location) if location is not None else Path(default)
        if not path.is_absolute():
            path = self.search_path / path
        return path

    @staticmethod
    def _describe(source: Any) -> str:
        if isinstance(source, (str, Path)):
            return str(source)
        if isinstance(source, bytes):
            return f"<bytes:{len(source)}>"
        name = getattr(source, "name", None)
        return str(name) if name else f"<{type(source).__name__}>"

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get reader usage statistics."""
        return {
            "total_reads": self._read_count,
            "successful_reads": self._successful_reads,
            "success_rate": (
                self._successful_reads / self._read_count
                if self._read_count > 0 else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
            "correlation_id": self.config.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset reader usage statistics."""
        self._read_count = 0
        self._successful_reads = 0
        self._total_processing_time = 0.0
        self.logger.info("Reader statistics reset")
