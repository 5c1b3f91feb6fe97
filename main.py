#!/usr/bin/env python3
"""
Divvy Trip Normalizer - Main Entry Point

Merges the 2019 and 2020 Divvy trip files into one canonical CSV:
1. Check that both input files exist
2. Normalize and merge them (Spark)
3. Write the snapshot (and optionally the weekday summary)

Usage:
    python main.py                                  # Configured default paths
    python main.py --source-a a.csv --source-b b.csv --output all_trips.csv
    python main.py --exclude-station "HQ QR"        # Drop service-station trips
    python main.py --no-summary                     # Skip the weekday summary
"""

import sys
import argparse
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import SERVICE_STATIONS, load_conf
from etl.errors import SchemaError


def print_header(text: str):
    """Print a formatted header."""
    print("\n" + "=" * 70)
    print(f"  {text}")
    print("=" * 70 + "\n")


def build_parser(conf: dict) -> argparse.ArgumentParser:
    """Build the command-line parser, defaults taken from configuration."""
    parser = argparse.ArgumentParser(
        description="Divvy Trip Normalizer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                   # Configured default paths
  python main.py --source-a Divvy_Trips_2019_Q1.csv --source-b Divvy_Trips_2020_Q1.csv
  python main.py --exclude-station "HQ QR"         # Drop service-station trips
  python main.py --drop-service-stations           # Same, for all known service stations
        """
    )

    parser.add_argument(
        "--source-a",
        type=Path,
        default=conf["SOURCE_A_PATH"],
        help="Trip CSV in the 2019 schema (trip_id, start_time, usertype, ...)"
    )

    parser.add_argument(
        "--source-b",
        type=Path,
        default=conf["SOURCE_B_PATH"],
        help="Trip CSV in the 2020 schema (ride_id, started_at, member_casual, ...)"
    )

    parser.add_argument(
        "--output",
        type=Path,
        default=conf["OUTPUT_PATH"],
        help="Target CSV for the merged canonical trips"
    )

    parser.add_argument(
        "--summary-output",
        type=Path,
        default=conf["SUMMARY_PATH"],
        help="Target CSV for rides and mean ride length by weekday"
    )

    parser.add_argument(
        "--no-summary",
        action="store_true",
        help="Do not write the weekday summary"
    )

    parser.add_argument(
        "--exclude-station",
        action="append",
        default=[],
        metavar="NAME",
        help="Drop trips starting at this station (repeatable)"
    )

    parser.add_argument(
        "--drop-service-stations",
        action="store_true",
        help=f"Drop trips starting at service stations {list(SERVICE_STATIONS)}"
    )

    return parser


def main(argv=None) -> int:
    """Main orchestration function."""
    conf = load_conf()
    args = build_parser(conf).parse_args(argv)

    print_header("Divvy Trip Normalizer")

    missing = [p for p in (args.source_a, args.source_b) if not Path(p).exists()]
    if missing:
        for path in missing:
            print(f"✗ Input file not found: {path}")
        print("    Download data from: https://divvybikes.com/system-data")
        return 1

    exclude_stations = list(args.exclude_station)
    if args.drop_service_stations:
        exclude_stations.extend(s for s in SERVICE_STATIONS if s not in exclude_stations)

    # Import here to avoid loading Spark for --help
    from jobs.batch_normalize_trips import run

    try:
        summary = run(
            args.source_a,
            args.source_b,
            args.output,
            summary_output=None if args.no_summary else args.summary_output,
            exclude_stations=exclude_stations,
            shuffle_partitions=conf["SHUFFLE_PARTS"],
        )
    except SchemaError as e:
        print(f"\n✗ Schema mismatch: {e}")
        print("  No output was written.")
        return 1
    except Exception as e:
        print(f"\n✗ Normalization failed: {e}")
        return 1

    print_header("Complete!")
    print(f"  • Trips written: {summary['rows_written']:,}")
    print(f"  • Rows rejected: {summary['rejected']:,}")
    print(f"  • Output: {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
