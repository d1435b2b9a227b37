"""Query facade: the single entry point from a location to a departures report."""

import logging
from datetime import datetime, timedelta

from gtfs_nearby.data.config import NearbyConfig, get_config
from gtfs_nearby.data.dataset import DatasetStore
from gtfs_nearby.models.gtfs import Coordinate, StopTime
from gtfs_nearby.models.responses import Itinerary
from gtfs_nearby.services.calendar_service import active_service_ids, active_service_ids_on
from gtfs_nearby.services.itinerary_service import build_itinerary, render_itinerary
from gtfs_nearby.services.schedule_service import seconds_since_midnight, upcoming_stop_times
from gtfs_nearby.services.stop_service import nearby_stops

logger = logging.getLogger(__name__)


class NearbyDeparturesQuery:
    """Answers "what leaves near here soon" against one immutable dataset.

    Holds no mutable state, so one instance can serve concurrent requests.
    """

    def __init__(self, store: DatasetStore, config: NearbyConfig | None = None):
        self.store = store
        self.config = config or get_config()

    def build_report(self, coordinate: Coordinate, now: datetime | None = None) -> Itinerary:
        """Build the structured departures report for a location.

        Args:
            coordinate: Validated query location.
            now: Query time in local wall-clock time (default: now).

        Returns:
            Itinerary of upcoming departures grouped by nearby stop.
        """
        if now is None:
            now = datetime.now()

        nearby = nearby_stops(self.store, coordinate, self.config.radius_meters)

        start = seconds_since_midnight(now)
        end = start + int(timedelta(minutes=self.config.horizon_minutes).total_seconds())
        upcoming: dict[str, list[StopTime]] = {
            item.stop.stop_id: upcoming_stop_times(self.store, item.stop.stop_id, start, end)
            for item in nearby
        }

        if self.config.respect_service_dates:
            services = active_service_ids_on(self.store, now.date())
        else:
            services = active_service_ids(self.store, now.weekday())

        trip_ids = {st.trip_id for stop_times in upcoming.values() for st in stop_times}
        active_trips = {
            trip_id: trip
            for trip_id, trip in self.store.trips_by_ids(trip_ids).items()
            if trip.service_id in services
        }
        routes_by_id = self.store.routes_by_ids({trip.route_id for trip in active_trips.values()})

        logger.debug(
            f"Query ({coordinate.latitude}, {coordinate.longitude}) at {now:%H:%M:%S}: "
            f"{len(nearby)} stops, {len(trip_ids)} trips, {len(active_trips)} active"
        )

        return build_itinerary(
            nearby,
            upcoming,
            active_trips,
            routes_by_id,
            coordinate=coordinate,
            now=now,
            max_per_stop=self.config.max_departures_per_stop,
        )

    def build_itinerary(self, coordinate: Coordinate, now: datetime | None = None) -> str:
        """Build the rendered text report for a location."""
        return render_itinerary(self.build_report(coordinate, now))
