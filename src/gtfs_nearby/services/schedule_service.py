"""Schedule service for filtering GTFS stop times by time window."""

from datetime import datetime

from gtfs_nearby.data.dataset import DatasetStore
from gtfs_nearby.models.gtfs import StopTime


def parse_gtfs_time(time_str: str) -> tuple[int, int, int]:
    """Parse a GTFS time string into hours, minutes, seconds.

    GTFS times can exceed 24:00:00 for trips that extend past midnight.
    For example, "25:30:00" means 1:30 AM the next day.

    Args:
        time_str: Time string in HH:MM:SS format (hours can exceed 24).

    Returns:
        Tuple of (hours, minutes, seconds).

    Raises:
        ValueError: If the time string is invalid.
    """
    parts = time_str.strip().split(":")
    if len(parts) != 3:
        raise ValueError(f"Invalid GTFS time format: {time_str}")

    try:
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(parts[2])
    except ValueError as e:
        raise ValueError(f"Invalid GTFS time format: {time_str}") from e

    if hours < 0 or not 0 <= minutes < 60 or not 0 <= seconds < 60:
        raise ValueError(f"Invalid GTFS time format: {time_str}")

    return hours, minutes, seconds


def gtfs_time_to_seconds(time_str: str) -> int:
    """Convert a GTFS time string to seconds since midnight.

    Args:
        time_str: Time string in HH:MM:SS format.

    Returns:
        Total seconds since midnight (can exceed 86400 for next-day times).
    """
    hours, minutes, seconds = parse_gtfs_time(time_str)
    return hours * 3600 + minutes * 60 + seconds


def seconds_since_midnight(dt: datetime) -> int:
    """Return the wall-clock time of a datetime as seconds since its midnight."""
    return dt.hour * 3600 + dt.minute * 60 + dt.second


def time_to_gtfs_format(dt: datetime) -> str:
    """Convert a datetime to GTFS time format.

    Args:
        dt: Datetime object.

    Returns:
        Time string in HH:MM:SS format.
    """
    return f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"


def format_clock_time(seconds: int) -> str:
    """Format seconds since service-day midnight as a 24-hour HH:mm clock.

    Times past midnight wrap around, so "25:10:00" is shown as "01:10".
    """
    hours = (seconds // 3600) % 24
    minutes = (seconds % 3600) // 60
    return f"{hours:02d}:{minutes:02d}"


def upcoming_stop_times(
    store: DatasetStore,
    stop_id: str,
    start: int,
    end: int,
) -> list[StopTime]:
    """Get scheduled stop times at a stop strictly inside a time window.

    Stop times without an arrival are never upcoming.

    Args:
        store: Loaded GTFS dataset.
        stop_id: The stop ID to get arrivals for.
        start: Window start in seconds since midnight (exclusive).
        end: Window end in seconds since midnight (exclusive).

    Returns:
        Stop times ordered by arrival, ties broken by trip ID.
    """
    matches = [
        stop_time
        for stop_time in store.stop_times_for(stop_id)
        if stop_time.arrival_seconds is not None and start < stop_time.arrival_seconds < end
    ]
    matches.sort(key=lambda st: (st.arrival_seconds, st.trip_id))
    return matches
