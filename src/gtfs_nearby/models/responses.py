from pydantic import BaseModel, Field

from gtfs_nearby.models.gtfs import TransportMode


class DepartureLine(BaseModel):
    trip_id: str
    route_id: str
    route_short_name: str | None = Field(default=None, description="Bus number or line name")
    mode: TransportMode
    trip_headsign: str | None = Field(default=None, description="Destination displayed on vehicle")
    arrival_time: str = Field(description="Scheduled arrival in HH:MM:SS format")
    arrival_time_formatted: str = Field(description="Arrival on a 24-hour clock (HH:mm)")


class StopSection(BaseModel):
    stop_id: str
    stop_name: str
    distance_meters: float = Field(description="Distance from the query coordinates")
    departures: list[DepartureLine] = Field(default_factory=list)


class Itinerary(BaseModel):
    """Upcoming departures at nearby stops, grouped by stop in distance order."""

    latitude: float
    longitude: float
    query_time: str = Field(description="Query time in HH:MM:SS format")
    weekday: int = Field(description="0=Monday, 6=Sunday")
    stops: list[StopSection] = Field(default_factory=list)
