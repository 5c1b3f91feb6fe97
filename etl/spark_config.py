"""Spark configuration for the local trip normalization job."""

from pyspark.sql import SparkSession
from config.settings import TIMEZONE, SHUFFLE_PARTITIONS


def build_spark_session(
    app_name: str = "DivvyTripNormalizer",
    shuffle_partitions: int | str = SHUFFLE_PARTITIONS,
) -> SparkSession:
    """
    Build a simple Spark session for local batch processing.

    Unparseable timestamps must come back as null instead of failing the
    whole job, so ANSI mode is switched off and the CORRECTED time parser
    is used.

    Args:
        app_name: Name of the Spark application
        shuffle_partitions: Value for spark.sql.shuffle.partitions

    Returns:
        Configured SparkSession
    """
    spark = (
        SparkSession.builder
        .master("local[*]")
        .appName(app_name)
        .config("spark.sql.shuffle.partitions", str(shuffle_partitions))
        .config("spark.sql.session.timeZone", TIMEZONE)
        .config("spark.sql.ansi.enabled", "false")
        .config("spark.sql.legacy.timeParserPolicy", "CORRECTED")
        .config("spark.ui.enabled", "false")
        .getOrCreate()
    )
    spark.sparkContext.setLogLevel("WARN")
    return spark
