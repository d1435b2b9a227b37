from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class NearbyConfig(BaseSettings):
    """Configuration for the dataset location and query policy.

    Automatically loads from environment variables and .env file.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    gtfs_path: Path = Field(default=Path("gtfs.zip"), alias="GTFS_PATH")

    # Query window and truncation policy
    radius_meters: float = Field(default=450, gt=0, alias="GTFS_NEARBY_RADIUS")
    horizon_minutes: int = Field(default=120, gt=0, alias="GTFS_NEARBY_HORIZON_MINUTES")
    max_departures_per_stop: int = Field(default=20, ge=0, alias="GTFS_NEARBY_MAX_DEPARTURES")

    # Also honour calendar start/end dates and calendar_dates exceptions
    respect_service_dates: bool = Field(
        default=False, alias="GTFS_NEARBY_RESPECT_SERVICE_DATES"
    )


@lru_cache
def get_config() -> NearbyConfig:
    """Get nearby-departures configuration (cached singleton).

    Returns:
        NearbyConfig with values from .env file or environment variables.
    """
    return NearbyConfig()
