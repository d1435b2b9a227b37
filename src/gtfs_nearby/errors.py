"""Exceptions raised by the GTFS nearby-departures core."""


class LoadError(Exception):
    """The GTFS archive is missing, corrupt, or lacks a required table."""


class InvalidCoordinate(ValueError):
    """A latitude/longitude pair lies outside valid geographic bounds."""

    def __init__(self, latitude: float, longitude: float):
        self.latitude = latitude
        self.longitude = longitude
        super().__init__(f"Invalid coordinate: ({latitude}, {longitude})")
