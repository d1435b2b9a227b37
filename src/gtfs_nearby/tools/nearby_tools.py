"""Message handling and MCP tools for nearby departures."""

import logging
import re
from datetime import datetime

from mcp.server.fastmcp import FastMCP

from gtfs_nearby.errors import InvalidCoordinate
from gtfs_nearby.models.gtfs import Coordinate
from gtfs_nearby.models.responses import Itinerary
from gtfs_nearby.services.query import NearbyDeparturesQuery

logger = logging.getLogger(__name__)

GREETING = "Hello, send me your location to receive nearest stop times!"

# Plain decimal, optionally signed, with an optional exponent
DECIMAL_PATTERN = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*")


def parse_location_text(text: str) -> Coordinate | None:
    """Parse "lat,lon" free text into a validated coordinate.

    Returns:
        Coordinate, or None if the text is not two in-range decimal numbers.
    """
    parts = text.split(",")
    if len(parts) != 2 or not all(DECIMAL_PATTERN.fullmatch(part) for part in parts):
        return None
    latitude = float(parts[0])
    longitude = float(parts[1])
    try:
        return Coordinate.of(latitude, longitude)
    except InvalidCoordinate:
        logger.debug(f"Ignoring out-of-range location: {text!r}")
        return None


def reply_to_location(
    query: NearbyDeparturesQuery,
    latitude: float,
    longitude: float,
    now: datetime | None = None,
) -> str | None:
    """Answer a structured location; None means send nothing."""
    try:
        coordinate = Coordinate.of(latitude, longitude)
    except InvalidCoordinate:
        logger.debug(f"Ignoring out-of-range location: ({latitude}, {longitude})")
        return None
    return query.build_itinerary(coordinate, now)


def reply_to_message(
    query: NearbyDeparturesQuery,
    text: str,
    now: datetime | None = None,
) -> str | None:
    """Answer a chat text message; None means send nothing."""
    if text.startswith("/start"):
        return GREETING
    coordinate = parse_location_text(text)
    if coordinate is None:
        return None
    return query.build_itinerary(coordinate, now)


def register_nearby_tools(mcp: FastMCP, query: NearbyDeparturesQuery) -> None:
    """Register the nearby-departures tools on an MCP server."""

    @mcp.tool(name="get_nearby_departures")
    async def get_nearby_departures(latitude: float, longitude: float) -> str:
        """Get upcoming scheduled departures at stops near a location.

        Lists stops within walking distance (450m by default), nearest first,
        each with the vehicles scheduled to arrive in the next two hours
        (at most 20 per stop). Only trips running today are shown.

        Examples:
            get_nearby_departures(latitude=59.4370, longitude=24.7536)

        Args:
            latitude: Latitude in degrees (-90 to 90).
            longitude: Longitude in degrees (-180 to 180).

        Returns:
            Plain-text report, or an empty string for out-of-range coordinates.
        """
        return reply_to_location(query, latitude, longitude) or ""

    @mcp.tool(name="get_nearby_departures_report")
    async def get_nearby_departures_report(latitude: float, longitude: float) -> Itinerary | None:
        """Get upcoming departures near a location as structured data.

        Same query as get_nearby_departures, returned as stops with their
        departures instead of text.

        Args:
            latitude: Latitude in degrees (-90 to 90).
            longitude: Longitude in degrees (-180 to 180).

        Returns:
            Itinerary with one entry per nearby stop, or null for
            out-of-range coordinates.
        """
        try:
            coordinate = Coordinate.of(latitude, longitude)
        except InvalidCoordinate:
            return None
        return query.build_report(coordinate)

    @mcp.tool(name="reply_to_message")
    async def reply_to_message_tool(text: str) -> str:
        """Answer a chat message the way the transit bot does.

        "/start" returns a greeting; "lat,lon" returns the nearby departures
        report; anything else returns an empty string (nothing to send).

        Args:
            text: The incoming message text.
        """
        return reply_to_message(query, text) or ""
