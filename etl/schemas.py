from pyspark.sql.types import (
    StructType, StructField, StringType, TimestampType, DoubleType
)

SOURCE_A = "A"
SOURCE_B = "B"

# Divvy_Trips_2019 – required columns only, everything read as text.
# tripduration, gender, birthyear exist in the files but are ignored.
source_a_schema = StructType([
    StructField("trip_id",           StringType(), True),
    StructField("bikeid",            StringType(), True),
    StructField("start_time",        StringType(), True),
    StructField("end_time",          StringType(), True),

    StructField("from_station_id",   StringType(), True),
    StructField("from_station_name", StringType(), True),
    StructField("to_station_id",     StringType(), True),
    StructField("to_station_name",   StringType(), True),

    StructField("usertype",          StringType(), True),
])

# Divvy_Trips_2020 – rideable_type and lat/lng columns are ignored
source_b_schema = StructType([
    StructField("ride_id",            StringType(), True),
    StructField("started_at",         StringType(), True),
    StructField("ended_at",           StringType(), True),

    StructField("start_station_id",   StringType(), True),
    StructField("start_station_name", StringType(), True),
    StructField("end_station_id",     StringType(), True),
    StructField("end_station_name",   StringType(), True),

    StructField("member_casual",      StringType(), True),
])

# Canonical Trip Record, in output column order
trip_schema = StructType([
    StructField("ride_id",            StringType(),    True),
    StructField("start_time",         TimestampType(), True),
    StructField("end_time",           TimestampType(), True),
    StructField("ride_length",        DoubleType(),    True),

    StructField("start_station_id",   StringType(),    True),
    StructField("start_station_name", StringType(),    True),
    StructField("end_station_id",     StringType(),    True),
    StructField("end_station_name",   StringType(),    True),

    StructField("member_type",        StringType(),    True),
])

CANONICAL_COLUMNS = trip_schema.fieldNames()

# raw column -> canonical column, per source
COLUMN_MAPPING = {
    SOURCE_A: {
        "trip_id":           "ride_id",
        "start_time":        "start_time",
        "end_time":          "end_time",
        "from_station_id":   "start_station_id",
        "from_station_name": "start_station_name",
        "to_station_id":     "end_station_id",
        "to_station_name":   "end_station_name",
        "usertype":          "member_type",
    },
    SOURCE_B: {
        "ride_id":            "ride_id",
        "started_at":         "start_time",
        "ended_at":           "end_time",
        "start_station_id":   "start_station_id",
        "start_station_name": "start_station_name",
        "end_station_id":     "end_station_id",
        "end_station_name":   "end_station_name",
        "member_casual":      "member_type",
    },
}

SOURCE_SCHEMAS = {
    SOURCE_A: source_a_schema,
    SOURCE_B: source_b_schema,
}

MEMBER = "member"
CASUAL = "casual"

# Source vocabulary -> member_type. Anything else passes through unchanged.
MEMBER_TYPE_MAP = {
    "Subscriber": MEMBER,
    "Customer":   CASUAL,
    "member":     MEMBER,
    "casual":     CASUAL,
}
