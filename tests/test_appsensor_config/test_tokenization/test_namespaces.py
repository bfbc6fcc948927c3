"""Tests for namespace resolution."""

import pytest

from appsensor_config.shared import CONFIG_NAMESPACE
from appsensor_config.tokenization import NamespaceResolver, split_clark_name


class TestSplitClarkName:
    """Test splitting lxml tag names."""

    def test_namespaced(self):
        assert split_clark_name("{urn:a}item") == ("urn:a", "item")

    def test_plain(self):
        assert split_clark_name("item") == (None, "item")

    def test_empty_namespace(self):
        assert split_clark_name("{}item") == (None, "item")


class TestNamespaceResolver:
    """Test dispatch key construction."""

    def test_configuration_namespace(self):
        """Test the default table maps the configuration namespace to config."""
        resolver = NamespaceResolver()

        assert resolver.qualified_name(CONFIG_NAMESPACE, "detection-point") == (
            "config:detection-point"
        )
        assert resolver.prefix_for(CONFIG_NAMESPACE) == "config"

    def test_unknown_namespace_uses_clark_form(self):
        """Test names in unmapped namespaces are keyed by their URI."""
        resolver = NamespaceResolver()

        assert resolver.qualified_name("urn:other", "id") == "{urn:other}id"

    def test_unknown_namespace_never_matches_mapped_key(self):
        """Test a foreign URI cannot produce a configuration key."""
        resolver = NamespaceResolver()

        key = resolver.qualified_name("urn:not-appsensor", "detection-point")

        assert key == "{urn:not-appsensor}detection-point"
        assert key != resolver.qualified_name(CONFIG_NAMESPACE, "detection-point")

    def test_no_namespace(self):
        """Test names without a namespace resolve to the local name."""
        assert NamespaceResolver().qualified_name(None, "id") == "id"

    def test_non_element_event(self):
        """Test events without a local name have no dispatch key."""
        assert NamespaceResolver().qualified_name(CONFIG_NAMESPACE, None) is None

    def test_custom_table(self):
        """Test a custom table controls the mapping."""
        resolver = NamespaceResolver({"urn:legacy": "config"})

        assert resolver.qualified_name("urn:legacy", "logger") == "config:logger"
        assert resolver.prefix_for(CONFIG_NAMESPACE) is None

    def test_table_is_read_only(self):
        """Test the table cannot be changed after construction."""
        source = {"urn:a": "a"}
        resolver = NamespaceResolver(source)
        source["urn:b"] = "b"

        assert resolver.prefix_for("urn:b") is None
        with pytest.raises(TypeError):
            resolver.table["urn:c"] = "c"
