"""
Batch job: two raw Divvy trip CSVs → one canonical trip snapshot.
Reads source A (2019 schema) and source B (2020 schema), normalizes both,
writes the merged CSV and reports rejected rows.
"""

import sys
from pathlib import Path
from collections.abc import Iterable

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config.settings import SHUFFLE_PARTITIONS, TIMEZONE, load_conf
from etl.normalize import NormalizeResult, normalize_trips
from etl.schemas import SOURCE_A, SOURCE_B
from etl.snapshot import read_source, write_snapshot
from etl.spark_config import build_spark_session
from etl.summary import ride_length_by_member_type, rides_by_weekday


def report_result(result: NormalizeResult) -> None:
    """Print the rejected-row report and any unmapped member types."""
    if not result.rejected:
        print("✓ No rows rejected")
    for rejection in result.rejected:
        print(f"  • {rejection}")

    if result.unrecognized_member_types:
        print("⚠️  Unrecognized member types passed through unchanged:")
        for value, count in sorted(result.unrecognized_member_types.items(), key=lambda kv: str(kv[0])):
            print(f"    {value!r}: {count:,} row(s)")


def run(
    source_a: Path | str,
    source_b: Path | str,
    output: Path | str,
    summary_output: Path | str | None = None,
    exclude_stations: Iterable[str] = (),
    shuffle_partitions: int | str = SHUFFLE_PARTITIONS,
) -> dict:
    """
    Run the normalization job end to end.

    Args:
        source_a: Raw 2019-schema trip CSV
        source_b: Raw 2020-schema trip CSV
        output: Target CSV for the canonical trips
        summary_output: Optional target CSV for rides by weekday
        exclude_stations: Start station names whose trips are dropped
        shuffle_partitions: spark.sql.shuffle.partitions

    Returns:
        Dict with rows_written, rejected and unrecognized_member_types

    Raises:
        SchemaError: If a required column is missing (nothing is written)
        FileNotFoundError: If an input file does not exist
    """
    print("=" * 60)
    print("Divvy Trip Normalizer: CSV → CSV")
    print("=" * 60)

    print("\n[1/5] Initializing Spark session...")
    spark = build_spark_session(shuffle_partitions=shuffle_partitions)
    print(f"✓ Spark session created (timezone: {TIMEZONE})")

    try:
        print("\n[2/5] Reading CSV data...")
        print(f"  Source {SOURCE_A}: {source_a}")
        raw_a = read_source(spark, source_a)
        print(f"  Source {SOURCE_B}: {source_b}")
        raw_b = read_source(spark, source_b)

        print("\n[3/5] Normalizing trip records...")
        result = normalize_trips(raw_a, raw_b, exclude_stations=exclude_stations)
        print(f"✓ Schemas match, {result.rejected_count:,} row(s) rejected")
        report_result(result)

        print("\n[4/5] Writing snapshot...")
        rows_written = write_snapshot(result.trips, output)
        print(f"✓ Wrote {rows_written:,} trips to {output}")

        print("\n[5/5] Summarizing ride lengths...")
        for row in ride_length_by_member_type(result.trips).collect():
            print(
                f"  • {row['member_type']}: {row['rides']:,} rides, "
                f"mean {row['mean_ride_length']:.1f} min, "
                f"median {row['median_ride_length']:.1f} min"
            )
        if summary_output is not None:
            summary_rows = write_snapshot(rides_by_weekday(result.trips), summary_output)
            print(f"✓ Wrote {summary_rows} weekday rows to {summary_output}")
    finally:
        spark.stop()

    print("\n" + "=" * 60)
    print("Normalization Complete!")
    print("=" * 60)

    return {
        "rows_written": rows_written,
        "rejected": result.rejected_count,
        "unrecognized_member_types": dict(result.unrecognized_member_types),
    }


def main():
    """Run with the configured default paths."""
    conf = load_conf()
    run(
        conf["SOURCE_A_PATH"],
        conf["SOURCE_B_PATH"],
        conf["OUTPUT_PATH"],
        summary_output=conf["SUMMARY_PATH"],
        shuffle_partitions=conf["SHUFFLE_PARTS"],
    )


if __name__ == "__main__":
    main()
