import csv
import os
import shutil
import sys
import time
from pathlib import Path

import pytest

# collected timestamps are rendered in the local timezone; pin it to the session one
os.environ["TZ"] = "UTC"
if hasattr(time, "tzset"):
    time.tzset()

# ensure the project root is importable when the package isn't installed editable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from etl.spark_config import build_spark_session  # noqa: E402

SOURCE_A_HEADER = [
    "trip_id", "start_time", "end_time", "bikeid", "tripduration",
    "from_station_id", "from_station_name", "to_station_id", "to_station_name",
    "usertype", "gender", "birthyear",
]

SOURCE_B_HEADER = [
    "ride_id", "rideable_type", "started_at", "ended_at",
    "start_station_name", "start_station_id", "end_station_name", "end_station_id",
    "start_lat", "start_lng", "end_lat", "end_lng", "member_casual",
]


def _java_available() -> bool:
    return bool(os.environ.get("JAVA_HOME") or shutil.which("java"))


@pytest.fixture(scope="session")
def spark():
    if not _java_available():
        pytest.skip("Spark needs a Java runtime")
    session = build_spark_session("DivvyTripNormalizerTests", shuffle_partitions=2)
    yield session
    session.stop()


def a_row(trip_id, start, end, usertype, from_name="Clark St", to_name="State St"):
    return {
        "trip_id": trip_id, "start_time": start, "end_time": end,
        "bikeid": "2167", "tripduration": "390.0",
        "from_station_id": "199", "from_station_name": from_name,
        "to_station_id": "84", "to_station_name": to_name,
        "usertype": usertype, "gender": "Male", "birthyear": "1989",
    }


def b_row(ride_id, start, end, member_casual, start_name="Wells St", end_name="Lake St"):
    return {
        "ride_id": ride_id, "rideable_type": "docked_bike",
        "started_at": start, "ended_at": end,
        "start_station_name": start_name, "start_station_id": "239",
        "end_station_name": end_name, "end_station_id": "326",
        "start_lat": "41.9665", "start_lng": "-87.6884",
        "end_lat": "41.9671", "end_lng": "-87.6674",
        "member_casual": member_casual,
    }


def write_csv(path: Path, header, rows) -> Path:
    """Write dict rows as a raw trip CSV the way the Divvy files look."""
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=header, lineterminator="\n")
        writer.writeheader()
        for row in rows:
            writer.writerow({k: row.get(k, "") for k in header})
    return path


def raw_frame(spark, header, rows):
    """All-text DataFrame with the given header, like read_source without the file."""
    return spark.createDataFrame(
        [tuple(row.get(k) for k in header) for row in rows],
        schema=", ".join(f"`{k}` string" for k in header),
    )


@pytest.fixture
def source_a_rows():
    return [
        a_row("101", "2019-01-01 08:00:00", "2019-01-01 08:15:00", "Subscriber"),
        a_row("102", "2019-01-01 09:00:00", "2019-01-01 09:30:30", "Customer"),
        a_row("103", "not a timestamp", "2019-01-01 10:05:00", "Subscriber"),
        a_row("104", "2019-01-01 11:00:00", "2019-01-01 11:00:00", "Customer"),
        a_row("105", "2019-01-02 07:45:00", "2019-01-02 08:00:00", "Subscriber"),
    ]


@pytest.fixture
def source_b_rows():
    return [
        b_row("X1", "2020-03-05 08:00:00", "2020-03-05 08:20:00", "member"),
        b_row("X9", "2020-03-05 10:00:00", "2020-03-05 09:59:00", "casual"),
        b_row("X2", "2020-03-06 12:00:00", "2020-03-06 12:45:00", "casual"),
        b_row("X3", "", "2020-03-06 13:00:00", "member"),
    ]
