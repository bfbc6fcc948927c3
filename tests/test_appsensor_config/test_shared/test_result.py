"""Tests for diagnostics and metrics."""

import pytest

from appsensor_config.shared.result import DiagnosticEntry, DiagnosticSeverity, ParseMetrics


class TestDiagnosticEntry:
    """Test diagnostic entries."""

    def test_to_dict(self):
        entry = DiagnosticEntry(
            severity=DiagnosticSeverity.WARNING,
            message="Repeated count overwrote an earlier value",
            component="configuration_builder",
            position=8,
            details={"field": "count"},
        )

        assert entry.to_dict() == {
            "severity": "WARNING",
            "message": "Repeated count overwrote an earlier value",
            "component": "configuration_builder",
            "line": 8,
            "details": {"field": "count"},
        }

    @pytest.mark.parametrize("message,component", [("", "builder"), ("text", "")])
    def test_validation(self, message, component):
        """Test message and component are required."""
        with pytest.raises(ValueError):
            DiagnosticEntry(DiagnosticSeverity.INFO, message, component)


class TestParseMetrics:
    """Test parse metrics."""

    def test_events_per_second(self):
        metrics = ParseMetrics(processing_time_ms=500.0, events_processed=100)

        assert metrics.events_per_second == 200.0

    def test_events_per_second_without_time(self):
        assert ParseMetrics(events_processed=10).events_per_second == 0.0

    def test_to_dict(self):
        metrics = ParseMetrics(elements_skipped=2, singletons_overwritten=1)

        assert metrics.to_dict() == {
            "processing_time_ms": 0.0,
            "events_processed": 0,
            "elements_skipped": 2,
            "singletons_overwritten": 1,
        }
