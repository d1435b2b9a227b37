"""Immutable in-memory GTFS tables."""

from collections import defaultdict
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from gtfs_nearby.models.gtfs import Calendar, CalendarDate, Route, Stop, StopTime, Trip


class DatasetStore:
    """Read-only view over one loaded GTFS feed.

    Built once by the loader and never mutated afterwards, so any number of
    queries may read it concurrently without locking.
    """

    def __init__(
        self,
        stops: Iterable[Stop],
        routes: Iterable[Route],
        trips: Iterable[Trip],
        stop_times: Iterable[StopTime],
        calendars: Iterable[Calendar],
        calendar_dates: Iterable[CalendarDate] = (),
    ):
        self._stops = tuple(stops)
        self._stops_by_id = MappingProxyType({stop.stop_id: stop for stop in self._stops})
        self._routes = MappingProxyType({route.route_id: route for route in routes})
        self._trips = MappingProxyType({trip.trip_id: trip for trip in trips})
        self._calendars = tuple(calendars)
        self._calendar_dates = tuple(calendar_dates)

        by_stop: dict[str, list[StopTime]] = defaultdict(list)
        count = 0
        for stop_time in stop_times:
            by_stop[stop_time.stop_id].append(stop_time)
            count += 1
        self._stop_times_by_stop = MappingProxyType(
            {stop_id: tuple(rows) for stop_id, rows in by_stop.items()}
        )
        self._stop_time_count = count

    def all_stops(self) -> tuple[Stop, ...]:
        return self._stops

    def get_stop(self, stop_id: str) -> Stop | None:
        return self._stops_by_id.get(stop_id)

    def stop_times_for(self, stop_id: str) -> tuple[StopTime, ...]:
        """Return every stop time scheduled at a stop, in feed order."""
        return self._stop_times_by_stop.get(stop_id, ())

    def get_trip(self, trip_id: str) -> Trip | None:
        return self._trips.get(trip_id)

    def trips_by_ids(self, trip_ids: Iterable[str]) -> dict[str, Trip]:
        """Look up trips by id; unknown ids are left out."""
        return {
            trip_id: self._trips[trip_id] for trip_id in trip_ids if trip_id in self._trips
        }

    def routes_by_ids(self, route_ids: Iterable[str]) -> dict[str, Route]:
        """Look up routes by id; unknown ids are left out."""
        return {
            route_id: self._routes[route_id]
            for route_id in route_ids
            if route_id in self._routes
        }

    def all_calendars(self) -> tuple[Calendar, ...]:
        return self._calendars

    def active_calendars(self, weekday: int) -> list[Calendar]:
        """Return calendars whose flag is set for a weekday (0=Monday, 6=Sunday)."""
        return [calendar for calendar in self._calendars if calendar.runs_on(weekday)]

    def calendar_dates_on(self, date_str: str) -> list[CalendarDate]:
        """Return calendar_dates exceptions for a YYYYMMDD date."""
        return [row for row in self._calendar_dates if row.date == date_str]

    def table_counts(self) -> Mapping[str, int]:
        return {
            "stops": len(self._stops),
            "routes": len(self._routes),
            "trips": len(self._trips),
            "stop_times": self._stop_time_count,
            "calendar": len(self._calendars),
            "calendar_dates": len(self._calendar_dates),
        }
