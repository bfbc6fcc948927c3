"""Tests for the reader configuration."""

import json
from dataclasses import FrozenInstanceError

import pytest

from appsensor_config.shared.config import (
    CONFIG_NAMESPACE,
    DEFAULT_XML_LOCATION,
    DEFAULT_XSD_LOCATION,
    ConfigError,
    ConfigValidationError,
    ReaderConfig,
)


class TestReaderConfig:
    """Test suite for ReaderConfig."""

    def test_default_configuration(self):
        """Test default reader configuration values."""
        config = ReaderConfig()

        assert dict(config.namespaces) == {CONFIG_NAMESPACE: "config"}
        assert config.strict_end_of_document is False
        assert config.reject_repeated_singletons is False
        assert config.record_skipped_elements is True
        assert config.logging_level == "WARNING"
        assert config.correlation_id is None
        assert config.default_xml_location == DEFAULT_XML_LOCATION
        assert config.default_xsd_location == DEFAULT_XSD_LOCATION
        assert config.huge_tree is False

    def test_default_locations(self):
        """Test the default document and schema names."""
        assert DEFAULT_XML_LOCATION == "appsensor-server-config.xml"
        assert DEFAULT_XSD_LOCATION == "appsensor_server_config_2.0.xsd"

    def test_presets(self):
        """Test the permissive and strict presets."""
        assert ReaderConfig.permissive() == ReaderConfig()

        strict = ReaderConfig.strict()
        assert strict.strict_end_of_document is True
        assert strict.reject_repeated_singletons is True

    def test_frozen(self):
        """Test configurations cannot be mutated."""
        config = ReaderConfig()

        with pytest.raises(FrozenInstanceError):
            config.huge_tree = True

    def test_namespaces_copied_read_only(self):
        """Test the namespace table is copied and read-only."""
        table = {"urn:example": "config"}
        config = ReaderConfig(namespaces=table)
        table["urn:other"] = "other"

        assert dict(config.namespaces) == {"urn:example": "config"}
        with pytest.raises(TypeError):
            config.namespaces["urn:x"] = "x"

    @pytest.mark.parametrize("namespaces", [
        {"": "config"},
        {"urn:example": ""},
        {"urn:example": "a:b"},
        ["urn:example"],
    ])
    def test_invalid_namespaces(self, namespaces):
        """Test namespace table validation."""
        with pytest.raises(ConfigValidationError) as exc_info:
            ReaderConfig(namespaces=namespaces)

        assert exc_info.value.field_name == "namespaces"

    def test_invalid_logging_level(self):
        """Test logging level validation."""
        with pytest.raises(ConfigValidationError) as exc_info:
            ReaderConfig(logging_level="LOUD")

        assert exc_info.value.field_name == "logging_level"

    @pytest.mark.parametrize("field_name", ["default_xml_location", "default_xsd_location"])
    def test_empty_locations(self, field_name):
        """Test default locations cannot be empty."""
        with pytest.raises(ConfigValidationError) as exc_info:
            ReaderConfig(**{field_name: ""})

        assert exc_info.value.field_name == field_name

    def test_validation_error_is_config_error(self):
        """Test the exception hierarchy."""
        error = ConfigValidationError("bad", field_name="x", suggestions=["fix it"])

        assert isinstance(error, ConfigError)
        assert error.suggestions == ["fix it"]
        assert ConfigValidationError("bad").suggestions == []


class TestReaderConfigOverrides:
    """Test overrides and serialization."""

    def test_override(self):
        """Test override returns a new configuration."""
        config = ReaderConfig()
        strict = config.override(strict_end_of_document=True, correlation_id="abc")

        assert strict.strict_end_of_document is True
        assert strict.correlation_id == "abc"
        assert config.strict_end_of_document is False

    def test_override_unknown_field(self):
        """Test unknown override fields are rejected."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration fields"):
            ReaderConfig().override(not_a_field=True)

    def test_override_revalidates(self):
        """Test overridden values are validated."""
        with pytest.raises(ConfigValidationError):
            ReaderConfig().override(logging_level="LOUD")

    def test_to_dict(self):
        """Test dictionary conversion."""
        data = ReaderConfig.strict().to_dict()

        assert data["namespaces"] == {CONFIG_NAMESPACE: "config"}
        assert data["strict_end_of_document"] is True
        assert data["default_xml_location"] == DEFAULT_XML_LOCATION

    def test_json_round_trip(self):
        """Test JSON serialization."""
        config = ReaderConfig(
            namespaces={"urn:legacy": "config"},
            reject_repeated_singletons=True,
            correlation_id="run-1",
        )

        restored = ReaderConfig.from_json(config.to_json())

        assert restored == config
        assert json.loads(config.to_json())["correlation_id"] == "run-1"

    def test_from_dict_ignores_unknown_keys(self):
        """Test unknown keys are ignored when loading."""
        config = ReaderConfig.from_dict({"huge_tree": True, "comment": "ignored"})

        assert config.huge_tree is True

    @pytest.mark.parametrize("text", ["{not json", "[1, 2]"])
    def test_from_json_invalid(self, text):
        """Test invalid JSON is reported as a validation error."""
        with pytest.raises(ConfigValidationError):
            ReaderConfig.from_json(text)
