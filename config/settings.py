"""Pipeline configuration settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root directory
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Raw Divvy trip files (one per source schema)
DATA_DIR = PROJECT_ROOT / "data" / "tripdata"
SOURCE_A_PATH = DATA_DIR / "Divvy_Trips_2019_Q1.csv"
SOURCE_B_PATH = DATA_DIR / "Divvy_Trips_2020_Q1.csv"

# Merged snapshot + optional weekday summary
OUTPUT_DIR = PROJECT_ROOT / "data" / "processed"
OUTPUT_PATH = OUTPUT_DIR / "all_trips.csv"
SUMMARY_PATH = OUTPUT_DIR / "avg_ride_length.csv"

# Raw timestamps are naive wall-clock text; UTC keeps ride_length free of DST jumps
TIMEZONE = "UTC"
TIMESTAMP_FORMAT = "yyyy-MM-dd HH:mm:ss"

SHUFFLE_PARTITIONS = 4

# Start stations dropped on request (bikes taken out for quality checks)
SERVICE_STATIONS = ("HQ QR",)


def load_conf(env_path: str | Path = PROJECT_ROOT / "conf" / ".env") -> dict:
    """
    Load runtime settings, letting an optional .env file override the defaults.

    Args:
        env_path: Path to the .env file (ignored if it does not exist)

    Returns:
        Dict with input/output paths and Spark tuning values
    """
    if os.path.exists(env_path):
        load_dotenv(env_path)

    return {
        "SOURCE_A_PATH": Path(os.getenv("SOURCE_A_PATH", SOURCE_A_PATH)),
        "SOURCE_B_PATH": Path(os.getenv("SOURCE_B_PATH", SOURCE_B_PATH)),
        "OUTPUT_PATH":   Path(os.getenv("OUTPUT_PATH",   OUTPUT_PATH)),
        "SUMMARY_PATH":  Path(os.getenv("SUMMARY_PATH",  SUMMARY_PATH)),

        "SHUFFLE_PARTS": os.getenv("SHUFFLE_PARTS", str(SHUFFLE_PARTITIONS)),
    }
