"""Tests for GTFS domain models."""

import pytest
from pydantic import ValidationError

from gtfs_nearby.errors import InvalidCoordinate
from gtfs_nearby.models.gtfs import Calendar, Coordinate, Route, Stop, TransportMode, transport_mode


class TestTransportMode:
    """Tests for mapping GTFS route types onto transport modes."""

    @pytest.mark.parametrize(
        ("route_type", "mode"),
        [
            (3, TransportMode.BUS),
            (700, TransportMode.BUS),
            (715, TransportMode.BUS),
            (0, TransportMode.TRAM),
            (900, TransportMode.TRAM),
            (11, TransportMode.TROLLEYBUS),
            (800, TransportMode.TROLLEYBUS),
            (4, TransportMode.WATER),
            (1000, TransportMode.WATER),
            (1200, TransportMode.WATER),
            (2, TransportMode.RAIL),
            (100, TransportMode.RAIL),
            (109, TransportMode.RAIL),
        ],
    )
    def test_known_types(self, route_type: int, mode: TransportMode) -> None:
        """Test basic and extended route types map to their mode."""
        assert transport_mode(route_type) == mode

    @pytest.mark.parametrize("route_type", [1, 5, 6, 7, 12, 400, 1100, 1300, 1400, 1700, -1])
    def test_unmapped_types(self, route_type: int) -> None:
        """Test other route types fall back to OTHER."""
        assert transport_mode(route_type) == TransportMode.OTHER

    def test_route_mode_property(self) -> None:
        """Test Route exposes its mode."""
        assert Route(route_id="R", route_type=800).mode == TransportMode.TROLLEYBUS


class TestCoordinate:
    """Tests for coordinate validation."""

    def test_valid(self) -> None:
        """Test a valid coordinate keeps its values."""
        coordinate = Coordinate.of(59.4370, 24.7536)
        assert coordinate.latitude == 59.4370
        assert coordinate.longitude == 24.7536

    @pytest.mark.parametrize(
        ("lat", "lon"),
        [(90.0001, 0), (-90.0001, 0), (0, 180.0001), (0, -180.0001), (float("nan"), 0)],
    )
    def test_out_of_range(self, lat: float, lon: float) -> None:
        """Test out-of-range values raise InvalidCoordinate."""
        with pytest.raises(InvalidCoordinate):
            Coordinate.of(lat, lon)

    def test_invalid_coordinate_is_value_error(self) -> None:
        """Test InvalidCoordinate can be handled as a ValueError."""
        with pytest.raises(ValueError):
            Coordinate.of(0, float("inf"))


class TestFrozenModels:
    """Tests that loaded rows are immutable."""

    def test_stop_is_frozen(self) -> None:
        """Test stops cannot be modified."""
        stop = Stop(stop_id="S", stop_name="Stop", stop_lat=0.0, stop_lon=0.0)
        with pytest.raises(ValidationError):
            stop.stop_name = "Other"

    def test_calendar_runs_on(self) -> None:
        """Test weekday flags are indexed Monday first."""
        calendar = Calendar(
            service_id="SAT",
            monday="0",
            tuesday="0",
            wednesday="0",
            thursday="0",
            friday="0",
            saturday="1",
            sunday="0",
        )
        assert calendar.runs_on(5)
        assert not calendar.runs_on(0)
