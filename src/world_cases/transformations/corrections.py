"""
Manual corrections for known defects in the upstream time series
(see CSSEGISandData/COVID-19 issue #833: several countries were not updated
on 2020-03-12 and 2020-03-15).

Corrections live in `corrections.csv` next to this module:

    metric,country,province,date,value

`country`/`province` are the English names after location normalization
(e.g. "Metropolitan France", "United States of America"), before
translation. `value` is an absolute cumulative count that replaces the
parsed one; applying a correction twice yields the same result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

import pandas as pd

from .time_series import METRICS

logger = logging.getLogger("world_cases.corrections")

CORRECTIONS_CSV = Path(__file__).with_name("corrections.csv")

_REQUIRED_COLUMNS = {"metric", "country", "province", "date", "value"}


def correction_key(country: str, province: str, date: str) -> str:
    return f"{country}|{province}|{date}"


@dataclass(frozen=True)
class CorrectionTable:
    """One `key -> value` table per metric."""

    tables: Mapping[str, Mapping[str, int]] = field(default_factory=dict)

    def lookup(self, metric: str, country: str, province: str, date: str) -> Optional[int]:
        table = self.tables.get(metric)
        if not table:
            return None
        return table.get(correction_key(country, province, date))

    def apply(self, metric: str, country: str, province: str, date: str, count: int) -> int:
        corrected = self.lookup(metric, country, province, date)
        if corrected is None:
            return count
        logger.debug(
            "Correcting %s for %r/%r on %s: %d -> %d",
            metric, country, province, date, count, corrected,
        )
        return corrected

    def __len__(self) -> int:
        return sum(len(t) for t in self.tables.values())


def build_correction_table(df: pd.DataFrame) -> CorrectionTable:
    """Build a CorrectionTable from a DataFrame with the CSV's columns."""
    missing = _REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"Corrections are missing required columns: {sorted(missing)}")

    unknown = set(df["metric"]) - set(METRICS)
    if unknown:
        raise ValueError(f"Corrections reference unknown metrics: {sorted(unknown)}")

    values = pd.to_numeric(df["value"], errors="coerce")
    if values.isna().any() or (values < 0).any():
        raise ValueError("Correction values must be non-negative integers")

    tables: Dict[str, Dict[str, int]] = {metric: {} for metric in METRICS}
    for row, value in zip(df.itertuples(index=False), values):
        key = correction_key(str(row.country), str(row.province), str(row.date))
        tables[str(row.metric)][key] = int(value)
    return CorrectionTable(tables=tables)


def load_correction_table(path: Path | str = CORRECTIONS_CSV) -> CorrectionTable:
    """
    Load the corrections CSV. Empty provinces stay "" (not NaN) so keys
    match rows without a province.
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    table = build_correction_table(df)
    logger.info("Loaded %d manual corrections from %s", len(table), path)
    return table


__all__ = [
    "CORRECTIONS_CSV",
    "CorrectionTable",
    "correction_key",
    "build_correction_table",
    "load_correction_table",
]
