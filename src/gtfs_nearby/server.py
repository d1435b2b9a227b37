import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from gtfs_nearby.app import create_app
from gtfs_nearby.data.config import get_config
from gtfs_nearby.data.gtfs_loader import load_dataset
from gtfs_nearby.errors import LoadError
from gtfs_nearby.services.query import NearbyDeparturesQuery
from gtfs_nearby.tools.nearby_tools import reply_to_message

logger = logging.getLogger(__name__)


def run_serve(gtfs_path: Path) -> None:
    """Load the dataset, then serve MCP requests until shutdown."""
    store = load_dataset(gtfs_path)
    query = NearbyDeparturesQuery(store, get_config())
    create_app(query).run()


def run_inspect(gtfs_path: Path) -> None:
    """Load the dataset and print row counts."""
    store = load_dataset(gtfs_path)

    print("\nDataset loaded. Row counts:")
    for table, count in store.table_counts().items():
        print(f"  {table}: {count:,}")


def run_query(gtfs_path: Path, location: str, at: datetime | None) -> None:
    """Answer one location query and print the report."""
    store = load_dataset(gtfs_path)
    query = NearbyDeparturesQuery(store, get_config())
    reply = reply_to_message(query, location, at)
    if reply is None:
        logger.info(f"No reply for {location!r}")
        return
    print(reply, end="")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="gtfs-nearby",
        description="Nearby public transport departures from a GTFS schedule",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    subparsers = parser.add_subparsers(dest="command")

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Load a GTFS feed and run the MCP server (default)",
    )
    serve_parser.add_argument(
        "--gtfs",
        type=Path,
        default=None,
        help="Path to GTFS ZIP file or directory (default: GTFS_PATH env var or gtfs.zip)",
    )

    # inspect command
    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Load a GTFS feed and print table row counts",
    )
    inspect_parser.add_argument(
        "gtfs_path",
        type=Path,
        help="Path to GTFS directory or ZIP file",
    )

    # query command
    query_parser = subparsers.add_parser(
        "query",
        help="Print departures near a location",
    )
    query_parser.add_argument(
        "gtfs_path",
        type=Path,
        help="Path to GTFS directory or ZIP file",
    )
    query_parser.add_argument(
        "location",
        help='Location as "latitude,longitude"',
    )
    query_parser.add_argument(
        "--at",
        type=datetime.fromisoformat,
        default=None,
        help="Query time as ISO datetime (default: now)",
    )

    args = parser.parse_args(argv)

    # Logs go to stderr so the stdio transport stays clean
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        if args.command == "inspect":
            run_inspect(args.gtfs_path)
        elif args.command == "query":
            run_query(args.gtfs_path, args.location, args.at)
        else:
            # Default: run MCP server
            gtfs_path = getattr(args, "gtfs", None) or get_config().gtfs_path
            run_serve(gtfs_path)
    except LoadError as e:
        logger.error(f"Failed to load GTFS data: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
