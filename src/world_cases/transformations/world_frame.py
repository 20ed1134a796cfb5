"""
Tabular export of the world tree.

Flattens the consolidated tree into one row per (node, date), which is what
ad-hoc analysis in pandas/SQL wants, and persists it as Parquet:

    processed/world_cases/world_cases.parquet

Schema:
    level          string  ("global" | "country" | "province" | "subregion")
    country_key    string  (null for the Global row)
    province_key   string  (last path element below country level)
    path           string  (path elements joined with "/")
    english_name   string
    date           string  (ISO date)
    confirmedCount Int64   (null when the node has no series for the metric)
    curedCount     Int64
    deadCount      Int64
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import pandas as pd

from ..adapters import StorageAdapter
from .time_series import METRICS
from .world_tree import NodePath, WorldTree

logger = logging.getLogger("world_cases.frame")

TABLE_FILE_NAME = "world_cases.parquet"

COLUMNS = [
    "level",
    "country_key",
    "province_key",
    "path",
    "english_name",
    "date",
    *METRICS,
]

_LEVELS = {0: "global", 1: "country", 2: "province"}


def _level(path: NodePath) -> str:
    return _LEVELS.get(len(path), "subregion")


def build_world_cases_dataframe(tree: WorldTree) -> pd.DataFrame:
    """Long-format DataFrame with one row per node and date."""
    rows: List[Dict[str, Any]] = []
    for path, node in tree.nodes.items():
        dates = sorted({d for values in node.series.values() for d in values})
        for date in dates:
            row: Dict[str, Any] = {
                "level": _level(path),
                "country_key": path[0] if path else pd.NA,
                "province_key": path[-1] if len(path) > 1 else pd.NA,
                "path": "/".join(path),
                "english_name": node.english_name,
                "date": date,
            }
            for metric in METRICS:
                value: Optional[int] = node.series.get(metric, {}).get(date)
                row[metric] = pd.NA if value is None else value
            rows.append(row)

    df = pd.DataFrame(rows, columns=COLUMNS)

    for col in ["level", "country_key", "province_key", "path", "english_name", "date"]:
        df[col] = df[col].astype("string")
    for metric in METRICS:
        df[metric] = pd.to_numeric(df[metric], errors="coerce").astype("Int64")

    return df


def save_world_cases_parquet(
    df: pd.DataFrame,
    storage: StorageAdapter,
    *,
    prefix: str,
) -> str:
    """Write the frame under `<prefix>/world_cases.parquet`; returns its location."""
    key = f"{prefix.rstrip('/')}/{TABLE_FILE_NAME}"
    location = storage.write_parquet(df, key)
    logger.info("Wrote %d rows to %s", df.shape[0], location)
    return location


__all__ = [
    "TABLE_FILE_NAME",
    "COLUMNS",
    "build_world_cases_dataframe",
    "save_world_cases_parquet",
]
