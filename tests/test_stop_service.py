"""Tests for the nearby stop search."""

import pytest

from gtfs_nearby.data.dataset import DatasetStore
from gtfs_nearby.models.gtfs import Coordinate, Stop
from gtfs_nearby.services.stop_service import haversine_distance, nearby_stops


def _store_with_stops(*stops: Stop) -> DatasetStore:
    return DatasetStore(stops=stops, routes=[], trips=[], stop_times=[], calendars=[])


class TestHaversineDistance:
    """Tests for haversine distance calculation."""

    def test_same_point(self) -> None:
        """Test distance between same point is zero."""
        distance = haversine_distance(45.5, -73.5, 45.5, -73.5)
        assert distance == 0.0

    def test_known_distance(self) -> None:
        """Test one millidegree of latitude is about 111 meters."""
        distance = haversine_distance(0.0, 0.0, 0.001, 0.0)
        assert distance == pytest.approx(111.19, abs=0.01)

    def test_tallinn_points(self) -> None:
        """Test a known distance between two Tallinn points."""
        # Viru square to Balti jaam is roughly 1.1 km
        distance = haversine_distance(59.4370, 24.7536, 59.4397, 24.7372)
        assert 900 < distance < 1200

    def test_symmetric(self) -> None:
        """Test that distance is symmetric."""
        d1 = haversine_distance(45.515, -73.561, 45.503, -73.572)
        d2 = haversine_distance(45.503, -73.572, 45.515, -73.561)
        assert abs(d1 - d2) < 0.001


class TestNearbyStops:
    """Tests for the spatial filter."""

    def test_within_radius_sorted_by_distance(self, store: DatasetStore) -> None:
        """Test stops inside the radius come back nearest first."""
        result = nearby_stops(store, Coordinate.of(0.0, 0.0), 450)

        assert [item.stop.stop_id for item in result] == ["CENTRAL", "NEAR", "EDGE"]
        distances = [item.distance_meters for item in result]
        assert distances == sorted(distances)
        assert all(d <= 450 for d in distances)

    def test_excludes_stop_just_outside_radius(self, store: DatasetStore) -> None:
        """Test that a stop about 500m away is not returned."""
        result = nearby_stops(store, Coordinate.of(0.0, 0.0), 450)

        assert "FAR" not in {item.stop.stop_id for item in result}

    def test_skips_stops_without_coordinates(self, store: DatasetStore) -> None:
        """Test that stops with no location never match."""
        result = nearby_stops(store, Coordinate.of(0.0, 0.0), 10_000)

        assert "STATION" not in {item.stop.stop_id for item in result}
        assert len(result) == 4

    def test_no_stops_nearby(self) -> None:
        """Test that a query 500m from the only stop returns nothing."""
        store = _store_with_stops(Stop(stop_id="S", stop_name="Lonely", stop_lat=0.0, stop_lon=0.0))

        # 0.0045 deg of latitude ~ 500 m
        result = nearby_stops(store, Coordinate.of(0.0045, 0.0), 450)

        assert result == []

    def test_ties_broken_by_stop_id(self) -> None:
        """Test that equidistant stops are ordered by stop ID."""
        store = _store_with_stops(
            Stop(stop_id="B", stop_name="East", stop_lat=0.0, stop_lon=0.001),
            Stop(stop_id="A", stop_name="West", stop_lat=0.0, stop_lon=-0.001),
        )

        result = nearby_stops(store, Coordinate.of(0.0, 0.0), 450)

        assert [item.stop.stop_id for item in result] == ["A", "B"]

    def test_radius_is_inclusive(self) -> None:
        """Test that a stop exactly at the radius distance is kept."""
        stop = Stop(stop_id="S", stop_name="Edge", stop_lat=0.002, stop_lon=0.0)
        store = _store_with_stops(stop)
        exact = haversine_distance(0.0, 0.0, 0.002, 0.0)

        result = nearby_stops(store, Coordinate.of(0.0, 0.0), exact)

        assert len(result) == 1

    def test_high_latitude_longitude_offset(self) -> None:
        """Test east-west distances shrink toward the poles."""
        # At 60N, 0.008 deg of longitude ~ 445 m
        store = _store_with_stops(
            Stop(stop_id="S", stop_name="North", stop_lat=60.0, stop_lon=25.008)
        )

        result = nearby_stops(store, Coordinate.of(60.0, 25.0), 450)

        assert len(result) == 1
        assert result[0].distance_meters == pytest.approx(444.8, abs=1.0)
