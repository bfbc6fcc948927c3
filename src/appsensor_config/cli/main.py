"""Main CLI entry point for the appsensor-config command-line tool.

Provides commands to display a server configuration document and to check
one or more documents for read failures.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from appsensor_config import __version__
from appsensor_config.api import ServerConfigurationReader
from appsensor_config.shared import (
    ConfigError,
    ConfigValidationError,
    ConfigurationParseError,
    ReaderConfig,
    configure_logging,
    get_logger,
)
from appsensor_config.tree import ServerConfiguration


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self):
        self.reader_config = ReaderConfig.permissive()
        self.output_format = "json"
        self.verbose = False
        self.quiet = False

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        The file may hold a ``reader`` object with ReaderConfig fields and an
        ``output_format`` string. Unreadable files leave the defaults in place.
        """
        config = cls()
        if not config_path.exists():
            return config
        try:
            with config_path.open() as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ConfigValidationError("config file must hold a JSON object")
            if "reader" in data:
                if not isinstance(data["reader"], dict):
                    raise ConfigValidationError(
                        "reader must be a JSON object", field_name="reader"
                    )
                config.reader_config = ReaderConfig.from_dict(data["reader"])
            config.output_format = data.get("output_format", config.output_format)
        except (OSError, ValueError, ConfigError) as e:
            print(f"Warning: Could not load config file: {e}", file=sys.stderr)
        return config


class ConfigurationChecker:
    """Reads configuration documents on behalf of CLI commands."""

    def __init__(self, config: CLIConfig):
        self.config = config
        self.reader = ServerConfigurationReader(config.reader_config)
        self.logger = get_logger(__name__, config.reader_config.correlation_id, "cli_checker")

    def check_file(self, file_path: Path) -> Dict[str, Any]:
        """Read a single document and return a result record."""
        try:
            result = self.reader.read_source(file_path)
        except ConfigurationParseError as e:
            self.logger.debug("Configuration check failed", extra={"file": str(file_path)})
            return {"file": str(file_path), "success": False, "error": e.to_dict()}

        return {
            "file": str(file_path),
            "success": True,
            "summary": result.summary(),
            "diagnostics": [diag.to_dict() for diag in result.diagnostics],
        }


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="appsensor-config",
        description="Read and check AppSensor server configuration documents"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    show_parser = subparsers.add_parser("show", help="Display a configuration document")
    show_parser.add_argument(
        "path",
        type=Path,
        help="Server configuration XML file"
    )
    show_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        help="Output format (default: json)"
    )

    check_parser = subparsers.add_parser("check", help="Check configuration documents")
    check_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Server configuration XML files"
    )
    check_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)"
    )

    # Global options
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject truncated documents and repeated singleton elements"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def format_configuration(configuration: ServerConfiguration, format_type: str) -> str:
    """Format a configuration for display."""
    if format_type == "json":
        return json.dumps(configuration.to_dict(), indent=2)

    lines = []
    header = configuration.client_application_identification_header_name
    lines.append(f"Client application header: {header or '-'}")
    lines.append("Implementations:")
    for role, implementation in configuration.implementations.items():
        lines.append(f"   {role}: {implementation or '-'}")

    lines.append(f"Correlation sets: {len(configuration.correlation_sets)}")
    for correlation_set in configuration.correlation_sets:
        lines.append(f"   [{', '.join(correlation_set.client_applications)}]")

    lines.append(f"Detection points: {len(configuration.detection_points)}")
    for point in configuration.detection_points:
        threshold = point.threshold
        if threshold and threshold.interval:
            rule = (
                f"{threshold.count} in {threshold.interval.duration} "
                f"{threshold.interval.unit}"
            )
        else:
            rule = "no threshold"
        lines.append(f"   {point.id}: {rule}")
        for response in point.responses:
            interval = response.interval
            timing = f" ({interval.duration} {interval.unit})" if interval else ""
            lines.append(f"      -> {response.action}{timing}")

    return "\n".join(lines)


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format check results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2)

    if not results:
        return "No results to display."

    successful = sum(1 for r in results if r.get("success", False))
    lines = [f"Checked {len(results)} files, {successful} successful", "-" * 60]

    for result in results:
        if result.get("success", False):
            summary = result["summary"]
            lines.append(f"OK   {result['file']}")
            lines.append(
                f"   Detection points: {summary['detection_points']}, "
                f"Skipped elements: {summary['elements_skipped']}, "
                f"Time: {summary['processing_time_ms']:.1f}ms"
            )
        else:
            error = result["error"]
            lines.append(f"FAIL {result['file']}")
            lines.append(f"   {error['kind']}: {error['message']}")
            if error.get("field"):
                lines.append(f"   Field: {error['field']}")
            if error.get("line") is not None:
                lines.append(f"   Line: {error['line']}")

    return "\n".join(lines)


def _load_config(args: argparse.Namespace) -> CLIConfig:
    config = CLIConfig.from_file(args.config) if args.config else CLIConfig()
    if args.strict:
        config.reader_config = config.reader_config.override(
            strict_end_of_document=True,
            reject_repeated_singletons=True,
        )
    config.verbose = args.verbose
    config.quiet = args.quiet
    return config


def cmd_show(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle show command."""
    reader = ServerConfigurationReader(config.reader_config)
    try:
        configuration = reader.read_source(args.path).configuration
    except ConfigurationParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_configuration(configuration, args.format or config.output_format))
    return 0


def cmd_check(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle check command."""
    checker = ConfigurationChecker(config)
    results = [checker.check_file(path) for path in args.paths]

    if not config.quiet or args.format == "json":
        print(format_results(results, args.format))

    successful = sum(1 for r in results if r["success"])
    return 0 if successful == len(results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config = _load_config(args)

    if config.verbose:
        configure_logging("DEBUG")
    elif config.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.reader_config.logging_level)

    try:
        if args.command == "show":
            return cmd_show(args, config)
        if args.command == "check":
            return cmd_check(args, config)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
