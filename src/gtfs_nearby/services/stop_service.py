"""Stop search service for finding GTFS stops near a location."""

import math
from typing import NamedTuple

from gtfs_nearby.data.dataset import DatasetStore
from gtfs_nearby.models.gtfs import Coordinate, Stop

# Earth's radius in meters for haversine calculation
EARTH_RADIUS_METERS = 6_371_000

DEFAULT_RADIUS_METERS = 450


class NearbyStop(NamedTuple):
    stop: Stop
    distance_meters: float


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate the great-circle distance between two points in meters.

    Args:
        lat1, lon1: First point coordinates in degrees.
        lat2, lon2: Second point coordinates in degrees.

    Returns:
        Distance in meters.
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_METERS * c


def nearby_stops(
    store: DatasetStore,
    coordinate: Coordinate,
    radius_meters: float = DEFAULT_RADIUS_METERS,
) -> list[NearbyStop]:
    """Find stops within a radius of a location.

    Uses a latitude band to skip far-away stops cheaply, then calculates
    exact haversine distance for final filtering and sorting.

    Args:
        store: Loaded GTFS dataset.
        coordinate: Query location.
        radius_meters: Search radius in meters.

    Returns:
        Stops sorted by distance, ties broken by stop ID.
    """
    lat, lon = coordinate.latitude, coordinate.longitude

    # 1 degree of latitude ~= 111,000 meters everywhere
    lat_delta = radius_meters / 111_000 * 1.01

    stops_with_distance: list[NearbyStop] = []
    for stop in store.all_stops():
        if stop.stop_lat is None or stop.stop_lon is None:
            continue
        if abs(stop.stop_lat - lat) > lat_delta:
            continue
        distance = haversine_distance(lat, lon, stop.stop_lat, stop.stop_lon)
        if distance <= radius_meters:
            stops_with_distance.append(NearbyStop(stop, distance))

    stops_with_distance.sort(key=lambda item: (item.distance_meters, item.stop.stop_id))
    return stops_with_distance
