"""Nearby public-transit departures from a static GTFS schedule."""

__version__ = "0.1.0"
