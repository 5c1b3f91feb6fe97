"""
Trip record normalizer: two Divvy trip schemas -> one canonical trip table.

Source A (2019) and source B (2020) name, type and label the same facts
differently. Each source is mapped onto the canonical columns, timestamps are
parsed, ride_length is derived and invalid rows are dropped and counted.
The two results are stacked A-then-B with the original row order kept.
"""

from dataclasses import dataclass, field
from collections.abc import Iterable

from pyspark.sql import Column, DataFrame
from pyspark.sql import functions as F
from pyspark.sql.types import StructType

from config.settings import TIMESTAMP_FORMAT
from etl.errors import RowRejected, SchemaError
from etl.schemas import (
    CANONICAL_COLUMNS, CASUAL, COLUMN_MAPPING, MEMBER, MEMBER_TYPE_MAP,
    SOURCE_A, SOURCE_B, SOURCE_SCHEMAS, trip_schema,
)

# Position of a row inside its source file, assigned at read time
ROW_INDEX = "_row_index"
SOURCE_ORDER = "_source_order"
REJECT_REASON = "_reject_reason"

UNPARSEABLE_TIMESTAMP = "unparseable_timestamp"
NON_POSITIVE_DURATION = "non_positive_duration"
EXCLUDED_STATION = "excluded_station"

REJECT_REASONS = (UNPARSEABLE_TIMESTAMP, NON_POSITIVE_DURATION, EXCLUDED_STATION)


@dataclass
class NormalizeResult:
    """Canonical trips plus what was dropped or left unmapped on the way."""

    trips: DataFrame
    rejected: list[RowRejected] = field(default_factory=list)
    unrecognized_member_types: dict[str | None, int] = field(default_factory=dict)

    @property
    def rejected_count(self) -> int:
        return sum(r.count for r in self.rejected)

    def rejected_for(self, source: str) -> int:
        """Number of rows rejected from one source, across all reasons."""
        return sum(r.count for r in self.rejected if r.source == source)


def validate_columns(df: DataFrame, schema: StructType, source: str) -> None:
    """
    Check that every column of a raw source schema is present.

    Args:
        df: Raw DataFrame as read from CSV
        schema: Raw schema for this source
        source: Source label used in the error message

    Raises:
        SchemaError: If one or more required columns are absent
    """
    missing = [name for name in schema.fieldNames() if name not in df.columns]
    if missing:
        raise SchemaError(source, missing)


def parse_timestamp(column: str) -> Column:
    """Text -> timestamp; malformed or empty text becomes null."""
    return F.to_timestamp(F.trim(F.col(column)), TIMESTAMP_FORMAT)


def ride_length_minutes(start: str, end: str) -> Column:
    """Signed end - start in minutes (double)."""
    seconds = F.unix_timestamp(F.col(end)) - F.unix_timestamp(F.col(start))
    return (seconds / F.lit(60.0)).cast("double")


def map_member_type(column: Column) -> Column:
    """
    Map source vocabulary onto member/casual.

    Unknown values (and nulls) are passed through unchanged so that they
    show up downstream instead of being coerced into one of the two groups.
    """
    expr = None
    for raw, canonical in MEMBER_TYPE_MAP.items():
        if expr is None:
            expr = F.when(column == raw, F.lit(canonical))
        else:
            expr = expr.when(column == raw, F.lit(canonical))
    return expr.otherwise(column)


def _reject_reason(exclude_stations: tuple[str, ...]) -> Column:
    reason = (
        F.when(F.col("start_time").isNull() | F.col("end_time").isNull(),
               F.lit(UNPARSEABLE_TIMESTAMP))
        .when(F.col("ride_length") <= 0, F.lit(NON_POSITIVE_DURATION))
    )
    if exclude_stations:
        reason = reason.when(
            F.col("start_station_name").isin(*exclude_stations),
            F.lit(EXCLUDED_STATION),
        )
    return reason


def normalize_source(
    df: DataFrame,
    source: str,
    exclude_stations: Iterable[str] = (),
) -> tuple[DataFrame, list[RowRejected], dict[str | None, int]]:
    """
    Bring one raw source onto the canonical trip columns.

    Args:
        df: Raw DataFrame for this source (all columns text)
        source: SOURCE_A or SOURCE_B
        exclude_stations: Start station names whose trips are dropped

    Returns:
        Tuple of (canonical DataFrame with ROW_INDEX kept, rejections,
        unrecognized member_type counts)
    """
    validate_columns(df, SOURCE_SCHEMAS[source], source)
    exclude_stations = tuple(exclude_stations)

    if ROW_INDEX not in df.columns:
        df = df.withColumn(ROW_INDEX, F.monotonically_increasing_id())

    mapping = COLUMN_MAPPING[source]
    selected = df.select(
        F.col(ROW_INDEX),
        *[F.col(raw).cast("string").alias(canonical) for raw, canonical in mapping.items()],
    )

    parsed = (
        selected
        .withColumn("start_time", parse_timestamp("start_time"))
        .withColumn("end_time", parse_timestamp("end_time"))
        .withColumn("ride_length", ride_length_minutes("start_time", "end_time"))
        .withColumn("member_type", map_member_type(F.col("member_type")))
        .withColumn(REJECT_REASON, _reject_reason(exclude_stations))
    )

    counts = {
        row[REJECT_REASON]: row["count"]
        for row in parsed.groupBy(REJECT_REASON).count().collect()
    }
    rejected = [
        RowRejected(source=source, reason=reason, count=counts[reason])
        for reason in REJECT_REASONS
        if counts.get(reason)
    ]

    kept = parsed.filter(F.col(REJECT_REASON).isNull()).select(ROW_INDEX, *CANONICAL_COLUMNS)

    unknown = (
        kept
        .filter(F.col("member_type").isNull() | ~F.col("member_type").isin(MEMBER, CASUAL))
        .groupBy("member_type")
        .count()
        .collect()
    )
    unrecognized = {row["member_type"]: row["count"] for row in unknown}

    return kept, rejected, unrecognized


def normalize_trips(
    source_a: DataFrame,
    source_b: DataFrame,
    exclude_stations: Iterable[str] = (),
) -> NormalizeResult:
    """
    Normalize both sources and stack them into one canonical table.

    Both inputs are checked for required columns before anything else runs,
    so a schema mismatch in either one aborts without partial results.

    Args:
        source_a: Raw 2019-schema trips
        source_b: Raw 2020-schema trips
        exclude_stations: Start station names whose trips are dropped

    Returns:
        NormalizeResult with trips ordered source A first, then source B

    Raises:
        SchemaError: If a required column is missing in either source
    """
    validate_columns(source_a, SOURCE_SCHEMAS[SOURCE_A], SOURCE_A)
    validate_columns(source_b, SOURCE_SCHEMAS[SOURCE_B], SOURCE_B)
    exclude_stations = tuple(exclude_stations)

    trips_a, rejected_a, unknown_a = normalize_source(source_a, SOURCE_A, exclude_stations)
    trips_b, rejected_b, unknown_b = normalize_source(source_b, SOURCE_B, exclude_stations)

    unrecognized = dict(unknown_a)
    for value, count in unknown_b.items():
        unrecognized[value] = unrecognized.get(value, 0) + count

    trips = (
        trips_a.withColumn(SOURCE_ORDER, F.lit(0))
        .unionByName(trips_b.withColumn(SOURCE_ORDER, F.lit(1)))
        .orderBy(SOURCE_ORDER, ROW_INDEX)
        .select(*[F.col(f.name).cast(f.dataType).alias(f.name) for f in trip_schema.fields])
    )

    return NormalizeResult(
        trips=trips,
        rejected=rejected_a + rejected_b,
        unrecognized_member_types=unrecognized,
    )
