import zipfile
from pathlib import Path

import pytest

from gtfs_nearby.data.config import NearbyConfig
from gtfs_nearby.data.dataset import DatasetStore
from gtfs_nearby.data.gtfs_loader import load_dataset


def write_gtfs(gtfs_dir: Path, files: dict[str, str]) -> Path:
    """Write GTFS tables into a directory."""
    gtfs_dir.mkdir(parents=True, exist_ok=True)
    for name, content in files.items():
        (gtfs_dir / name).write_text(content, encoding="utf-8")
    return gtfs_dir


SAMPLE_FILES: dict[str, str] = {
    # Stops along the meridian: 0.001 deg of latitude ~ 111.2 m
    "stops.txt": (
        "stop_id,stop_code,stop_name,stop_lat,stop_lon\n"
        "CENTRAL,100,Central,0.0,0.0\n"
        "NEAR,101,Near,0.001,0.0\n"
        "EDGE,102,Edge,0.004,0.0\n"
        "FAR,103,Far,0.0045,0.0\n"
        "STATION,,Station Without Coordinates,,\n"
    ),
    "routes.txt": (
        "route_id,agency_id,route_short_name,route_long_name,route_type\n"
        "R1,A,1,Central - Downtown,3\n"
        "R2,A,2,Harbour Tram,900\n"
        "R3,A,F,Island Ferry,4\n"
        "R4,A,X,Hill Funicular,1400\n"
    ),
    "trips.txt": (
        "route_id,service_id,trip_id,trip_headsign,direction_id\n"
        "R1,WEEKDAY,T1,Downtown,0\n"
        "R2,WEEKDAY,T2,Harbour,0\n"
        "R1,WEEKEND,T3,Airport,1\n"
        "R3,DAILY,T4,Island,0\n"
        "MISSING,WEEKDAY,T5,Nowhere,0\n"
    ),
    "stop_times.txt": (
        "trip_id,arrival_time,departure_time,stop_id,stop_sequence\n"
        "T1,08:30:00,08:30:00,CENTRAL,1\n"
        "T1,08:32:00,08:32:00,NEAR,2\n"
        "T1,,,EDGE,3\n"
        "T2,08:00:00,08:00:00,CENTRAL,1\n"
        "T3,08:40:00,08:40:00,CENTRAL,1\n"
        "T4,10:00:00,10:00:00,CENTRAL,1\n"
        "T4,09:59:00,09:59:00,EDGE,2\n"
        "T5,08:45:00,08:45:00,CENTRAL,1\n"
    ),
    "calendar.txt": (
        "service_id,monday,tuesday,wednesday,thursday,friday,saturday,sunday,start_date,end_date\n"
        "WEEKDAY,1,1,1,1,1,0,0,20240101,20241231\n"
        "WEEKEND,0,0,0,0,0,1,1,20240101,20241231\n"
        "DAILY,1,1,1,1,1,1,1,20240101,20241231\n"
    ),
    "calendar_dates.txt": (
        "service_id,date,exception_type\nWEEKDAY,20240506,2\nWEEKEND,20240506,1\n"
    ),
}

EXPECTED_MONDAY_REPORT = (
    "Public transport near your location:\n\n"
    "🚏 Central\n"
    "  - 🚌 1 (Downtown): 08:30\n"
    "\n"
    "🚏 Near\n"
    "  - 🚌 1 (Downtown): 08:32\n"
    "\n"
    "🚏 Edge\n"
    "  - 🚢 F (Island): 09:59\n"
    "\n"
)


@pytest.fixture
def sample_gtfs_dir(tmp_path: Path) -> Path:
    """Create a sample GTFS directory with minimal valid data."""
    return write_gtfs(tmp_path / "gtfs", SAMPLE_FILES)


@pytest.fixture
def sample_gtfs_zip(sample_gtfs_dir: Path, tmp_path: Path) -> Path:
    """Create a sample GTFS ZIP file from the directory."""
    zip_path = tmp_path / "gtfs.zip"
    with zipfile.ZipFile(zip_path, "w") as zf:
        for file_path in sample_gtfs_dir.iterdir():
            zf.write(file_path, file_path.name)
    return zip_path


@pytest.fixture
def store(sample_gtfs_dir: Path) -> DatasetStore:
    """Load the sample GTFS feed."""
    return load_dataset(sample_gtfs_dir)


@pytest.fixture
def config() -> NearbyConfig:
    """Default query policy, independent of the environment."""
    return NearbyConfig(
        radius_meters=450,
        horizon_minutes=120,
        max_departures_per_stop=20,
        respect_service_dates=False,
    )
