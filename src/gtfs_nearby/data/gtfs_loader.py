"""GTFS data loader for building the in-memory dataset store."""

import csv
import io
import logging
import zipfile
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import IO, Any

from pydantic import BaseModel

from gtfs_nearby.data.dataset import DatasetStore
from gtfs_nearby.errors import LoadError
from gtfs_nearby.models.gtfs import Calendar, CalendarDate, Route, Stop, StopTime, Trip
from gtfs_nearby.services.schedule_service import gtfs_time_to_seconds

logger = logging.getLogger(__name__)

# Table definitions: table_name -> (csv_filename, required header columns, optional columns)
TABLE_DEFINITIONS: dict[str, tuple[str, list[str], list[str]]] = {
    "stops": (
        "stops.txt",
        ["stop_id", "stop_name", "stop_lat", "stop_lon"],
        ["stop_code"],
    ),
    "routes": (
        "routes.txt",
        ["route_id", "route_type"],
        ["route_short_name", "route_long_name"],
    ),
    "trips": (
        "trips.txt",
        ["trip_id", "route_id", "service_id"],
        ["trip_headsign"],
    ),
    "stop_times": (
        "stop_times.txt",
        ["trip_id", "arrival_time", "stop_id", "stop_sequence"],
        ["departure_time"],
    ),
    "calendar": (
        "calendar.txt",
        [
            "service_id",
            "monday",
            "tuesday",
            "wednesday",
            "thursday",
            "friday",
            "saturday",
            "sunday",
        ],
        ["start_date", "end_date"],
    ),
    "calendar_dates": (
        "calendar_dates.txt",
        ["service_id", "date", "exception_type"],
        [],
    ),
}

# Tables that must be present in the archive.
REQUIRED_TABLES = ["stops", "routes", "trips", "stop_times", "calendar"]

# Tables that must contain at least one row.
NON_EMPTY_TABLES = ["stops", "routes", "trips", "stop_times"]

# Columns that must be present for a row to be kept.
REQUIRED_VALUES: dict[str, list[str]] = {
    "stops": ["stop_id", "stop_name"],
    "routes": ["route_id", "route_type"],
    "trips": ["trip_id", "route_id", "service_id"],
    "stop_times": ["trip_id", "stop_id", "stop_sequence"],
    "calendar": [
        "service_id",
        "monday",
        "tuesday",
        "wednesday",
        "thursday",
        "friday",
        "saturday",
        "sunday",
    ],
    "calendar_dates": ["service_id", "date", "exception_type"],
}

# Primary key column of tables whose identifiers must be unique.
UNIQUE_KEYS: dict[str, str] = {
    "stops": "stop_id",
    "routes": "route_id",
    "trips": "trip_id",
    "calendar": "service_id",
}


def _build_stop_time(row: dict[str, Any]) -> StopTime:
    arrival = row.get("arrival_time")
    return StopTime(
        **row,
        arrival_seconds=gtfs_time_to_seconds(arrival) if arrival is not None else None,
    )


ROW_BUILDERS: dict[str, Callable[[dict[str, Any]], BaseModel]] = {
    "stops": lambda row: Stop(**row),
    "routes": lambda row: Route(**row),
    "trips": lambda row: Trip(**row),
    "stop_times": _build_stop_time,
    "calendar": lambda row: Calendar(**row),
    "calendar_dates": lambda row: CalendarDate(**row),
}


class GTFSLoader:
    """Loader for parsing a GTFS feed into a DatasetStore."""

    def __init__(self, gtfs_path: Path):
        """Initialize the loader.

        Args:
            gtfs_path: Path to a GTFS ZIP archive or an unpacked GTFS directory.
        """
        self.gtfs_path = Path(gtfs_path)

    def load(self) -> DatasetStore:
        """Parse every GTFS table and build the immutable dataset store.

        Returns:
            DatasetStore holding stops, routes, trips, stop times and calendars.

        Raises:
            LoadError: If the path is missing, the archive is corrupt, or a
                required table is missing, empty, or malformed.
        """
        if not self.gtfs_path.exists():
            raise LoadError(f"GTFS path not found: {self.gtfs_path}")

        try:
            if self.gtfs_path.is_file():
                with zipfile.ZipFile(self.gtfs_path, "r") as zf:
                    tables = self._load_all_tables(zf)
            else:
                tables = self._load_all_tables(None)
        except zipfile.BadZipFile as e:
            raise LoadError(f"Not a valid GTFS archive: {self.gtfs_path}") from e
        except OSError as e:
            raise LoadError(f"Could not read GTFS data from {self.gtfs_path}: {e}") from e

        self._verify_integrity(tables)

        store = DatasetStore(
            stops=tables["stops"],
            routes=tables["routes"],
            trips=tables["trips"],
            stop_times=tables["stop_times"],
            calendars=tables["calendar"],
            calendar_dates=tables["calendar_dates"],
        )
        logger.info(f"GTFS dataset loaded: {self.gtfs_path}")
        return store

    def _load_all_tables(self, zf: zipfile.ZipFile | None) -> dict[str, list[Any]]:
        """Load all GTFS tables from a ZIP or directory."""
        tables: dict[str, list[Any]] = {}

        for table_name, (csv_filename, columns, optional) in TABLE_DEFINITIONS.items():
            handle = self._open_member(zf, csv_filename)
            if handle is None:
                if table_name in REQUIRED_TABLES:
                    raise LoadError(f"Required file {csv_filename} not found")
                logger.warning(f"Optional file {csv_filename} not found")
                tables[table_name] = []
                continue
            with handle:
                tables[table_name] = self._load_table(
                    table_name, columns, optional, handle, csv_filename
                )

        return tables

    def _open_member(self, zf: zipfile.ZipFile | None, csv_filename: str) -> IO[str] | None:
        """Open a GTFS table as text, or return None if the feed lacks it."""
        if zf is not None:
            if csv_filename not in zf.namelist():
                return None
            # Wrap binary file in text mode
            return io.TextIOWrapper(zf.open(csv_filename), encoding="utf-8-sig", newline="")

        csv_path = self.gtfs_path / csv_filename
        if not csv_path.exists():
            return None
        return open(csv_path, encoding="utf-8-sig", newline="")

    def _load_table(
        self,
        table_name: str,
        columns: list[str],
        optional: list[str],
        handle: IO[str],
        csv_filename: str,
    ) -> list[Any]:
        """Parse one CSV table into model instances."""
        logger.info(f"Loading {table_name} from {csv_filename}...")

        build = ROW_BUILDERS[table_name]
        required = REQUIRED_VALUES.get(table_name, [])
        key = UNIQUE_KEYS.get(table_name)
        seen: set[str] = set()
        rows: list[Any] = []
        skipped_rows = 0

        try:
            reader = csv.reader(handle)
            header_index = self._build_header_index(reader, columns, optional, csv_filename)
            for line_number, row in enumerate(reader, start=2):
                if not any(field.strip() for field in row):
                    continue
                row_dict = self._row_from_index(row, header_index)
                if not self._has_required_values(row_dict, required):
                    skipped_rows += 1
                    continue
                if key is not None:
                    if row_dict[key] in seen:
                        raise LoadError(
                            f"{csv_filename} line {line_number}: duplicate {key} {row_dict[key]!r}"
                        )
                    seen.add(row_dict[key])
                try:
                    rows.append(build(row_dict))
                except ValueError as e:
                    raise LoadError(f"{csv_filename} line {line_number}: {e}") from e
        except (csv.Error, UnicodeDecodeError) as e:
            raise LoadError(f"{csv_filename} is malformed: {e}") from e

        logger.info(
            f"  Loaded {len(rows):,} rows into {table_name}"
            + (f" (skipped {skipped_rows:,} invalid)" if skipped_rows else "")
        )
        return rows

    def _convert_value(self, value: str | None) -> str | None:
        """Convert CSV value, mapping blanks to None."""
        if value is None:
            return None
        value = value.strip()
        return value or None

    def _has_required_values(self, row: dict[str, str | None], required: list[str]) -> bool:
        """Return True if all required columns have non-empty values."""
        return all(row.get(col) is not None for col in required)

    def _build_header_index(
        self,
        reader: Iterator[list[str]],
        columns: list[str],
        optional: list[str],
        filename: str,
    ) -> dict[str, int]:
        """Build header index mapping for a CSV reader."""
        header = next(reader, None)
        if header is None:
            raise LoadError(f"{filename} is empty")
        expected = set(columns) | set(optional)
        header_index: dict[str, int] = {}
        for idx, name in enumerate(header):
            cleaned = name.strip()
            if cleaned in expected and cleaned not in header_index:
                header_index[cleaned] = idx
        missing = [col for col in columns if col not in header_index]
        if missing:
            raise LoadError(f"{filename} missing columns: {', '.join(missing)}")
        return header_index

    def _row_from_index(self, row: list[str], header_index: dict[str, int]) -> dict[str, str | None]:
        """Map a CSV row list to a dict by header index."""
        return {
            col: self._convert_value(row[idx] if idx < len(row) else None)
            for col, idx in header_index.items()
        }

    def _verify_integrity(self, tables: dict[str, list[Any]]) -> None:
        """Check required tables have data."""
        for table_name in NON_EMPTY_TABLES:
            if not tables[table_name]:
                raise LoadError(f"No {table_name} loaded - check GTFS data")


def load_dataset(gtfs_path: Path) -> DatasetStore:
    """Load a GTFS archive or directory into a DatasetStore.

    Raises:
        LoadError: If the feed cannot be loaded.
    """
    return GTFSLoader(gtfs_path).load()
