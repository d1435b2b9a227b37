"""Service calendar resolution: which trips run on a given day."""

from datetime import date

from gtfs_nearby.data.dataset import DatasetStore


def date_to_gtfs_format(d: date) -> str:
    """Convert a date to GTFS date format (YYYYMMDD).

    Args:
        d: Date object.

    Returns:
        Date string in YYYYMMDD format.
    """
    return d.strftime("%Y%m%d")


def active_service_ids(store: DatasetStore, weekday: int) -> set[str]:
    """Get service IDs whose calendar runs on a weekday.

    Args:
        store: Loaded GTFS dataset.
        weekday: Day of week, 0=Monday through 6=Sunday.

    Returns:
        Set of active service IDs.
    """
    return {calendar.service_id for calendar in store.active_calendars(weekday)}


def active_service_ids_on(store: DatasetStore, query_date: date) -> set[str]:
    """Get service IDs active on a given date.

    Implements the GTFS service day algorithm:
    1. Find services from calendar where date is within [start_date, end_date]
       AND the weekday flag is set
    2. Apply calendar_dates exceptions (exception_type=1 adds, 2 removes)

    Args:
        store: Loaded GTFS dataset.
        query_date: Date to check for active services.

    Returns:
        Set of active service IDs.
    """
    date_str = date_to_gtfs_format(query_date)

    base_services = {
        calendar.service_id
        for calendar in store.active_calendars(query_date.weekday())
        if (calendar.start_date is None or calendar.start_date <= date_str)
        and (calendar.end_date is None or date_str <= calendar.end_date)
    }

    for row in store.calendar_dates_on(date_str):
        if row.exception_type == 2:  # Service removed
            base_services.discard(row.service_id)
        elif row.exception_type == 1:  # Service added
            base_services.add(row.service_id)

    return base_services
