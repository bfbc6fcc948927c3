#!/usr/bin/env python3
"""
Quick Start Guide for the AppSensor server configuration reader.

Reads the sample document next to this script, prints what it configures
and shows how failures and strict reading behave.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from appsensor_config import (
    ConfigurationParseError,
    ReaderConfig,
    ServerConfigurationReader,
    read_string,
)
from appsensor_config.shared import CONFIG_NAMESPACE

EXAMPLES_DIR = Path(__file__).parent


def quick_start_example():
    """Read the sample document from its default location."""

    print("🚀 QUICK START - AppSensor Server Configuration")
    print("=" * 48)

    reader = ServerConfigurationReader(search_path=EXAMPLES_DIR)
    result = reader.read_with_diagnostics()
    configuration = result.configuration

    print(f"\n📄 Header: {configuration.client_application_identification_header_name}")
    print(f"🔗 Correlation sets: {len(configuration.correlation_sets)}")
    for client in ("server1", "server3"):
        related = configuration.related_client_applications(client)
        print(f"   {client} correlates with {related}")

    print(f"\n🎯 Detection points: {len(configuration.detection_points)}")
    for point in configuration.detection_points:
        threshold = point.threshold
        window = threshold.interval.to_millis() if threshold and threshold.interval else 0
        print(f"   {point.id}: {threshold.count if threshold else 0} events in {window} ms")
        for response in point.responses:
            print(f"      -> {response.action}")

    print(f"\n📊 Events processed: {result.metrics.events_processed}")
    print(f"⏱️  Read time: {result.metrics.processing_time_ms:.2f} ms")


def failure_example():
    """Show how a malformed value aborts the read."""

    print("\n❌ FAILURE HANDLING")
    print("-" * 30)

    xml = (
        f'<config:appsensor-server-config xmlns:config="{CONFIG_NAMESPACE}">'
        "<config:detection-point><config:threshold>"
        "<config:count>three</config:count>"
        "</config:threshold></config:detection-point>"
        "</config:appsensor-server-config>"
    )
    try:
        read_string(xml)
    except ConfigurationParseError as e:
        print(f"   {e.kind}: {e}")


def strict_example():
    """Compare permissive and strict handling of a repeated id."""

    print("\n🔒 STRICT READING")
    print("-" * 30)

    xml = (
        f'<config:appsensor-server-config xmlns:config="{CONFIG_NAMESPACE}">'
        "<config:detection-point><config:id>IE1</config:id><config:id>IE2</config:id>"
        "</config:detection-point></config:appsensor-server-config>"
    )
    print(f"   permissive: id = {read_string(xml).detection_points[0].id}")
    try:
        read_string(xml, ReaderConfig.strict())
    except ConfigurationParseError as e:
        print(f"   strict: {e}")


if __name__ == "__main__":
    quick_start_example()
    failure_example()
    strict_example()
