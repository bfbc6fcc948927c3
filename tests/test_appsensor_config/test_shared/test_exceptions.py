"""Tests for read failure types."""

import pytest

from appsensor_config.shared.exceptions import (
    CoercionFailure,
    ConfigurationParseError,
    SchemaViolation,
    StreamFailure,
)


class TestConfigurationParseError:
    """Test failure context and formatting."""

    @pytest.mark.parametrize("error_class,kind", [
        (StreamFailure, "stream_failure"),
        (CoercionFailure, "coercion_failure"),
        (SchemaViolation, "schema_violation"),
    ])
    def test_hierarchy(self, error_class, kind):
        """Test every failure kind shares the base class."""
        error = error_class("failed")

        assert isinstance(error, ConfigurationParseError)
        assert error.kind == kind

    def test_message_only(self):
        """Test formatting without context."""
        error = StreamFailure("Malformed XML")

        assert str(error) == "Malformed XML"
        assert error.details == {}

    def test_message_with_context(self):
        """Test formatting includes scope, field and line."""
        error = CoercionFailure(
            "Expected an integer but found 'abc'",
            field_name="count",
            scope="config:threshold",
            position=14,
        )

        assert str(error) == (
            "Expected an integer but found 'abc' "
            "(scope=config:threshold, field=count, line=14)"
        )

    def test_line_zero_is_reported(self):
        """Test a zero position is still shown."""
        assert str(StreamFailure("x", position=0)) == "x (line=0)"

    def test_to_dict(self):
        """Test dictionary conversion."""
        error = SchemaViolation(
            "Repeated singleton element 'id'",
            field_name="id",
            scope="config:detection-point",
            position=3,
            details={"value": "B"},
        )

        assert error.to_dict() == {
            "kind": "schema_violation",
            "message": "Repeated singleton element 'id'",
            "field": "id",
            "scope": "config:detection-point",
            "line": 3,
            "details": {"value": "B"},
        }
