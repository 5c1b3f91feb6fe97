"""Descriptive ride-length statistics over the canonical trip table."""

from pyspark.sql import DataFrame
from pyspark.sql import functions as F


def ride_length_by_member_type(df: DataFrame) -> DataFrame:
    """
    Ride counts and ride_length spread per member_type.

    Args:
        df: Canonical trips (NormalizeResult.trips)

    Returns:
        DataFrame with member_type, rides, mean/median/min/max ride length
    """
    return (
        df.groupBy("member_type")
        .agg(
            F.count("*").alias("rides"),
            F.avg("ride_length").alias("mean_ride_length"),
            F.expr("percentile(ride_length, 0.5)").alias("median_ride_length"),
            F.min("ride_length").alias("min_ride_length"),
            F.max("ride_length").alias("max_ride_length"),
        )
        .orderBy("member_type")
    )


def rides_by_weekday(df: DataFrame) -> DataFrame:
    """
    Rides and mean ride_length per member_type and weekday of start_time.

    Weekdays are ordered Sunday first (Spark's dayofweek: 1 = Sunday).
    """
    return (
        df.withColumn("weekday", F.dayofweek("start_time"))
        .withColumn("day_of_week", F.date_format("start_time", "EEEE"))
        .groupBy("member_type", "weekday", "day_of_week")
        .agg(
            F.count("*").alias("rides"),
            F.avg("ride_length").alias("mean_ride_length"),
        )
        .orderBy("member_type", "weekday")
        .select("member_type", "day_of_week", "rides", "mean_ride_length")
    )
