"""CSV input/output: raw trip files in, one flat snapshot file out."""

import csv
import shutil
import tempfile
from pathlib import Path

from pyspark.sql import DataFrame, SparkSession
from pyspark.sql import functions as F
from pyspark.sql.types import TimestampType

from config.settings import TIMESTAMP_FORMAT
from etl.normalize import ROW_INDEX


def read_source(spark: SparkSession, path: Path | str) -> DataFrame:
    """
    Read one raw trip CSV with every column as text.

    No schema is imposed at read time: Spark would map a fixed schema onto
    the file by position, hiding a missing or renamed column. The normalizer
    checks the header names instead.

    Args:
        spark: Active SparkSession
        path: CSV file with a header row

    Returns:
        DataFrame with the file's columns plus ROW_INDEX (position in file)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Trip file not found: {path}")

    df = (
        spark.read
        .option("header", True)
        .option("inferSchema", False)
        .option("escape", '"')
        .csv(str(path))
    )
    return df.withColumn(ROW_INDEX, F.monotonically_increasing_id())


def _as_text(df: DataFrame) -> DataFrame:
    """Render timestamps with a fixed pattern so reruns are byte-identical."""
    return df.select(*[
        F.date_format(F.col(f.name), TIMESTAMP_FORMAT).alias(f.name)
        if isinstance(f.dataType, TimestampType)
        else F.col(f.name)
        for f in df.schema.fields
    ])


def write_snapshot(df: DataFrame, path: Path | str) -> int:
    """
    Write a DataFrame to a single CSV file, replacing any existing file.

    Spark writes into a staging directory beside the target; the lone part
    file is then moved to `path`. Row order is the DataFrame's order.

    Args:
        df: DataFrame to write (typically NormalizeResult.trips)
        path: Target CSV file

    Returns:
        Number of data rows written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    text_df = _as_text(df).coalesce(1)
    staging = Path(tempfile.mkdtemp(prefix=f".{path.stem}-", dir=path.parent))
    try:
        parts_dir = staging / "parts"
        (
            text_df.write
            .mode("overwrite")
            .option("header", True)
            .option("emptyValue", "")
            .option("escape", '"')
            .option("ignoreLeadingWhiteSpace", False)
            .option("ignoreTrailingWhiteSpace", False)
            .csv(str(parts_dir))
        )

        parts = sorted(parts_dir.glob("part-*.csv"))
        if len(parts) > 1:
            raise RuntimeError(f"Expected one part file in {parts_dir}, found {len(parts)}")

        if parts:
            shutil.move(str(parts[0]), str(path))
        if not parts or path.stat().st_size == 0:
            # An empty DataFrame may come back without a header line
            with open(path, "w", newline="", encoding="utf-8") as f:
                csv.writer(f, lineterminator="\n").writerow(df.columns)
    finally:
        shutil.rmtree(staging, ignore_errors=True)

    with open(path, newline="", encoding="utf-8") as f:
        return max(sum(1 for _ in csv.reader(f)) - 1, 0)
