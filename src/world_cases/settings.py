"""
Runtime settings, read once from the environment (and an optional .env).

All locations are logical storage keys, resolved by the StorageAdapter in use
(relative to --root-dir locally, relative to the bucket/prefix on S3).
"""

from __future__ import annotations

import os

from .env_loader import load_dotenv_if_present

load_dotenv_if_present()

TIME_SERIES_PREFIX = os.getenv(
    "WORLD_CASES_TIME_SERIES_PREFIX",
    "data/jhu-data/csse_covid_19_data/csse_covid_19_time_series",
)
TRANSLATIONS_PREFIX = os.getenv("WORLD_CASES_TRANSLATIONS_PREFIX", "data/map-translations")
MAP_KEY = os.getenv("WORLD_CASES_MAP_KEY", "public/maps/world-50m.json")
# The map is rewritten in place unless told otherwise
MAP_OUTPUT_KEY = os.getenv("WORLD_CASES_MAP_OUTPUT_KEY", MAP_KEY)
OUTPUT_PREFIX = os.getenv("WORLD_CASES_OUTPUT_PREFIX", "public/data")
TABLE_PREFIX = os.getenv("WORLD_CASES_TABLE_PREFIX", "processed/world_cases")
METADATA_KEY = os.getenv("WORLD_CASES_METADATA_KEY", "metadata/world_cases_runs.json")
LOG_LEVEL = os.getenv("WORLD_CASES_LOG_LEVEL", "INFO").upper()

S3_BUCKET_ENV = "WORLD_CASES_S3_BUCKET"
S3_BASE_PREFIX_ENV = "WORLD_CASES_S3_BASE_PREFIX"

WORLD_FILE_NAME = "world.json"
RUN_SCOPE = "world_cases_build"

__all__ = [
    "TIME_SERIES_PREFIX",
    "TRANSLATIONS_PREFIX",
    "MAP_KEY",
    "MAP_OUTPUT_KEY",
    "OUTPUT_PREFIX",
    "TABLE_PREFIX",
    "METADATA_KEY",
    "LOG_LEVEL",
    "S3_BUCKET_ENV",
    "S3_BASE_PREFIX_ENV",
    "WORLD_FILE_NAME",
    "RUN_SCOPE",
]
