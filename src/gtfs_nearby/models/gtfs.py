"""Pydantic models for GTFS entities."""

import math
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from gtfs_nearby.errors import InvalidCoordinate


class TransportMode(str, Enum):
    """Closed set of transport modes a route type maps onto."""

    BUS = "bus"
    TRAM = "tram"
    TROLLEYBUS = "trolleybus"
    WATER = "water"
    RAIL = "rail"
    OTHER = "other"


def transport_mode(route_type: int) -> TransportMode:
    """Map a basic or extended GTFS route_type code to a TransportMode.

    Args:
        route_type: GTFS route_type (basic 0-12 or extended 100-1700).

    Returns:
        The matching TransportMode, TransportMode.OTHER when unmapped.
    """
    if route_type == 3 or 700 <= route_type <= 799:
        return TransportMode.BUS
    if route_type == 0 or 900 <= route_type <= 999:
        return TransportMode.TRAM
    if route_type in (11, 800):
        return TransportMode.TROLLEYBUS
    if route_type in (4, 1200) or 1000 <= route_type <= 1099:
        return TransportMode.WATER
    if route_type == 2 or 100 <= route_type <= 199:
        return TransportMode.RAIL
    return TransportMode.OTHER


class Route(BaseModel):
    """GTFS route entity."""

    model_config = ConfigDict(frozen=True)

    route_id: str
    route_short_name: str | None = None
    route_long_name: str | None = None
    route_type: int  # 3=bus, 0=tram, 700=bus service, ...

    @property
    def mode(self) -> TransportMode:
        return transport_mode(self.route_type)


class Stop(BaseModel):
    """GTFS stop entity."""

    model_config = ConfigDict(frozen=True)

    stop_id: str
    stop_code: str | None = None
    stop_name: str
    stop_lat: float | None = None
    stop_lon: float | None = None


class Calendar(BaseModel):
    """GTFS calendar entity for weekly service patterns."""

    model_config = ConfigDict(frozen=True)

    service_id: str
    monday: bool
    tuesday: bool
    wednesday: bool
    thursday: bool
    friday: bool
    saturday: bool
    sunday: bool
    start_date: str | None = None  # YYYYMMDD
    end_date: str | None = None  # YYYYMMDD

    def runs_on(self, weekday: int) -> bool:
        """Return the service flag for a weekday (0=Monday, 6=Sunday)."""
        flags = (
            self.monday,
            self.tuesday,
            self.wednesday,
            self.thursday,
            self.friday,
            self.saturday,
            self.sunday,
        )
        return flags[weekday]


class CalendarDate(BaseModel):
    """GTFS calendar_dates entity for service exceptions."""

    model_config = ConfigDict(frozen=True)

    service_id: str
    date: str  # YYYYMMDD
    exception_type: int  # 1=added, 2=removed


class Trip(BaseModel):
    """GTFS trip entity."""

    model_config = ConfigDict(frozen=True)

    trip_id: str
    route_id: str
    service_id: str
    trip_headsign: str | None = None


class StopTime(BaseModel):
    """GTFS stop_times entity.

    ``arrival_seconds`` is the arrival as seconds since service-day midnight,
    ``None`` when the feed leaves the arrival blank.
    """

    model_config = ConfigDict(frozen=True)

    trip_id: str
    stop_id: str
    stop_sequence: int
    arrival_time: str | None = None  # HH:MM:SS (can exceed 24:00:00)
    departure_time: str | None = None
    arrival_seconds: int | None = None


class Coordinate(BaseModel):
    """A WGS84 point validated to lie within geographic bounds."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    @classmethod
    def of(cls, latitude: float, longitude: float) -> "Coordinate":
        """Build a coordinate, raising InvalidCoordinate when out of range."""
        if math.isnan(latitude) or math.isnan(longitude):
            raise InvalidCoordinate(latitude, longitude)
        try:
            return cls(latitude=latitude, longitude=longitude)
        except ValidationError as e:
            raise InvalidCoordinate(latitude, longitude) from e
