"""MCP application factory.

The server is built around an already-loaded query facade so that tools never
reach for a global dataset.
"""

from datetime import UTC, datetime

from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel

from gtfs_nearby.services.query import NearbyDeparturesQuery
from gtfs_nearby.tools.nearby_tools import register_nearby_tools


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    table_counts: dict[str, int]


def health(query: NearbyDeparturesQuery) -> HealthResponse:
    """Report server status, version, and the size of the loaded dataset."""
    from gtfs_nearby import __version__

    return HealthResponse(
        status="ok",
        version=__version__,
        timestamp=datetime.now(UTC).isoformat(),
        table_counts=dict(query.store.table_counts()),
    )


def create_app(query: NearbyDeparturesQuery) -> FastMCP:
    """Create the MCP server exposing nearby-departure tools."""
    mcp = FastMCP(
        "GTFS Nearby",
        instructions="Public transport departures near a location, from a static GTFS schedule",
    )

    @mcp.tool(name="health")
    def health_tool() -> HealthResponse:
        """Check if the GTFS Nearby server is running and healthy.

        Returns the server status, version, current timestamp, and row counts
        of the loaded GTFS tables.
        """
        return health(query)

    register_nearby_tools(mcp, query)
    return mcp
