"""Itinerary building: join nearby stops, stop times, trips and routes into a report."""

from collections.abc import Mapping
from datetime import datetime

from gtfs_nearby.models.gtfs import Coordinate, Route, StopTime, TransportMode, Trip
from gtfs_nearby.models.responses import DepartureLine, Itinerary, StopSection
from gtfs_nearby.services.schedule_service import format_clock_time, time_to_gtfs_format
from gtfs_nearby.services.stop_service import NearbyStop

MAX_DEPARTURES_PER_STOP = 20

HEADER = "Public transport near your location:\n\n"
STOP_MARKER = "🚏"

MODE_GLYPHS: dict[TransportMode, str] = {
    TransportMode.BUS: "🚌",
    TransportMode.TRAM: "🚃",
    TransportMode.TROLLEYBUS: "🚎",
    TransportMode.WATER: "🚢",
    TransportMode.RAIL: "🚈",
}
FALLBACK_GLYPH = "❓"


def mode_glyph(mode: TransportMode) -> str:
    return MODE_GLYPHS.get(mode, FALLBACK_GLYPH)


def build_itinerary(
    nearby: list[NearbyStop],
    upcoming: Mapping[str, list[StopTime]],
    active_trips: Mapping[str, Trip],
    routes_by_id: Mapping[str, Route],
    coordinate: Coordinate,
    now: datetime,
    max_per_stop: int = MAX_DEPARTURES_PER_STOP,
) -> Itinerary:
    """Group upcoming departures under each nearby stop.

    Stop times whose trip is not active are dropped before the per-stop cap
    is applied; entries whose trip or route cannot be resolved are skipped.
    A stop with no qualifying departures keeps an empty section.

    Args:
        nearby: Stops in distance order.
        upcoming: Upcoming stop times per stop ID, in arrival order.
        active_trips: Trips running today, by trip ID.
        routes_by_id: Routes by route ID.
        coordinate: The query location.
        now: The query time.
        max_per_stop: Maximum departures kept per stop.

    Returns:
        Itinerary with one section per nearby stop.
    """
    sections: list[StopSection] = []

    for stop, distance in nearby:
        stop_times = [
            st for st in upcoming.get(stop.stop_id, []) if st.trip_id in active_trips
        ][:max_per_stop]

        departures: list[DepartureLine] = []
        for stop_time in stop_times:
            trip = active_trips.get(stop_time.trip_id)
            if trip is None:
                continue
            route = routes_by_id.get(trip.route_id)
            if route is None:
                continue
            departures.append(
                DepartureLine(
                    trip_id=trip.trip_id,
                    route_id=route.route_id,
                    route_short_name=route.route_short_name,
                    mode=route.mode,
                    trip_headsign=trip.trip_headsign,
                    arrival_time=stop_time.arrival_time,
                    arrival_time_formatted=format_clock_time(stop_time.arrival_seconds),
                )
            )

        sections.append(
            StopSection(
                stop_id=stop.stop_id,
                stop_name=stop.stop_name,
                distance_meters=round(distance, 1),
                departures=departures,
            )
        )

    return Itinerary(
        latitude=coordinate.latitude,
        longitude=coordinate.longitude,
        query_time=time_to_gtfs_format(now),
        weekday=now.weekday(),
        stops=sections,
    )


def render_itinerary(itinerary: Itinerary) -> str:
    """Render an itinerary as the plain-text chat message."""
    lines = [HEADER]
    for section in itinerary.stops:
        lines.append(f"{STOP_MARKER} {section.stop_name}\n")
        for departure in section.departures:
            lines.append(
                f"  - {mode_glyph(departure.mode)} {departure.route_short_name or ''}"
                f" ({departure.trip_headsign or ''}): {departure.arrival_time_formatted}\n"
            )
        lines.append("\n")
    return "".join(lines)
