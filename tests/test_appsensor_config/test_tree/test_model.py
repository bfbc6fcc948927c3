"""Tests for the server configuration object graph."""

import pytest

from appsensor_config.tree import (
    CorrelationSet,
    DetectionPoint,
    Interval,
    Response,
    ServerConfiguration,
    Threshold,
)
from appsensor_config.tree.model import IMPLEMENTATION_FIELDS


class TestInterval:
    """Test interval conversion."""

    @pytest.mark.parametrize("duration,unit,expected", [
        (250, "milliseconds", 250),
        (60, "seconds", 60_000),
        (5, "minutes", 300_000),
        (2, "hours", 7_200_000),
        (1, "days", 86_400_000),
    ])
    def test_to_millis(self, duration, unit, expected):
        """Test supported units convert to milliseconds."""
        assert Interval(duration, unit).to_millis() == expected

    def test_unknown_unit(self):
        """Test unknown units are kept verbatim but cannot be converted."""
        interval = Interval(3, "fortnights")

        assert interval.unit == "fortnights"
        with pytest.raises(ValueError, match="fortnights"):
            interval.to_millis()

    def test_defaults(self):
        """Test an interval built without values."""
        assert Interval() == Interval(duration=0, unit=None)


class TestDetectionPoint:
    """Test detection point defaults and serialization."""

    def test_defaults(self):
        """Test each detection point owns its own response list."""
        first = DetectionPoint()
        second = DetectionPoint()
        first.responses.append(Response(action="log"))

        assert second.responses == []
        assert first.threshold is None

    def test_to_dict(self):
        """Test nested serialization."""
        point = DetectionPoint(
            id="IE1",
            threshold=Threshold(count=3, interval=Interval(5, "minutes")),
            responses=[Response(action="log")],
        )

        assert point.to_dict() == {
            "id": "IE1",
            "threshold": {"count": 3, "interval": {"duration": 5, "unit": "minutes"}},
            "responses": [{"action": "log", "interval": None}],
        }


class TestServerConfiguration:
    """Test the root aggregate and its lookups."""

    @pytest.fixture
    def configuration(self):
        return ServerConfiguration(
            correlation_sets=[
                CorrelationSet(["server1", "server2"]),
                CorrelationSet(["server2", "server3"]),
                CorrelationSet([]),
            ],
            detection_points=[
                DetectionPoint(id="IE1"),
                DetectionPoint(id="IE2"),
                DetectionPoint(id="IE1", responses=[Response(action="logout")]),
            ],
            logger_implementation="example.Logger",
        )

    def test_defaults(self):
        """Test a fresh configuration is empty."""
        configuration = ServerConfiguration()

        assert configuration.correlation_sets == []
        assert configuration.detection_points == []
        assert configuration.attack_store_observer_implementations == []
        assert not any(configuration.implementations.values())

    def test_find_detection_points(self, configuration):
        """Test lookup returns all matches in document order."""
        matches = configuration.find_detection_points("IE1")

        assert len(matches) == 2
        assert matches[1].responses[0].action == "logout"
        assert configuration.find_detection_points("missing") == []

    def test_find_detection_point(self, configuration):
        """Test lookup of the first match."""
        assert configuration.find_detection_point("IE2").id == "IE2"
        assert configuration.find_detection_point("IE1").responses == []
        assert configuration.find_detection_point("missing") is None

    def test_related_client_applications(self, configuration):
        """Test correlated applications across overlapping sets."""
        assert configuration.related_client_applications("server2") == [
            "server2", "server1", "server3"
        ]
        assert configuration.related_client_applications("server1") == [
            "server1", "server2"
        ]

    def test_unrelated_client_application(self, configuration):
        """Test an application outside every set relates only to itself."""
        assert configuration.related_client_applications("other") == ["other"]

    def test_correlation_set_membership(self):
        """Test membership checks on a correlation set."""
        correlation_set = CorrelationSet(["a", "b"])

        assert "a" in correlation_set
        assert "c" not in correlation_set

    def test_implementations(self, configuration):
        """Test the implementation map covers every role in order."""
        implementations = configuration.implementations

        assert list(implementations) == list(IMPLEMENTATION_FIELDS)
        assert implementations["logger_implementation"] == "example.Logger"

    def test_to_dict(self, configuration):
        """Test root serialization."""
        data = configuration.to_dict()

        assert data["logger_implementation"] == "example.Logger"
        assert data["client_application_identification_header_name"] is None
        assert data["correlation_sets"][0] == {"client_applications": ["server1", "server2"]}
        assert [point["id"] for point in data["detection_points"]] == ["IE1", "IE2", "IE1"]
        assert data["event_store_observer_implementations"] == []
