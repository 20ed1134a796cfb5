"""
Parsing of the JHU CSSE daily time-series tables.

Layout of each file (one per metric):

    Province/State,Country/Region,Lat,Long,1/22/20,1/23/20,...
    ,Afghanistan,33.0,65.0,0,0,...
    "Korea, South",...          <- commas inside quotes are literal

Only the quoting rule these files need is supported; this is not a general
CSV reader.
"""

from __future__ import annotations

import re
from typing import List, Optional

# Number of fixed metadata columns before the first date column
METADATA_COLUMNS = 4
PROVINCE_COLUMN = 0
COUNTRY_COLUMN = 1

# A quoted span, a run of non-separators, or a lone separator, each of which
# must be followed by a separator or the end of the line.
_FIELD_RE = re.compile(r'(\s*"[^"]+"\s*|\s*[^,]+|,)(?=,|$)')
_LEADING_DIGITS_RE = re.compile(r"\s*(\d+)")

CONFIRMED = "confirmedCount"
CURED = "curedCount"
DEAD = "deadCount"
METRICS = (CONFIRMED, CURED, DEAD)

# Upstream file per metric, in the order the trees are merged
TIME_SERIES_FILES = {
    CONFIRMED: "time_series_19-covid-Confirmed.csv",
    CURED: "time_series_19-covid-Recovered.csv",
    DEAD: "time_series_19-covid-Deaths.csv",
}


def split_row(line: str) -> Optional[List[str]]:
    """
    Split one data line into fields, honouring commas inside double quotes.

    Returns None when the line holds no recognizable field (blank line), so
    callers can skip it. Fields are trimmed and lose their surrounding quotes;
    an empty column becomes "". A line starting with a separator gets a
    leading "" so positions line up with every other row.
    """
    if not line or not line.strip():
        return None

    matches = _FIELD_RE.findall(line)
    if not matches:
        return None

    fields: List[str] = []
    for match in matches:
        value = match.strip()
        if value == ",":
            value = ""
        elif len(value) >= 2 and value[0] == '"' and value[-1] == '"':
            value = value[1:-1].strip()
        fields.append(value)

    if line[0] == ",":
        fields.insert(0, "")
    return fields


def _to_iso_date(token: str) -> str:
    parts = token.strip().split("/")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Unexpected date column header: {token!r}")
    month, day, year = parts
    if len(year) == 2:
        year = f"20{year}"
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def decode_date_header(header_line: str) -> List[str]:
    """
    Turn the header row into ISO dates.

    The four metadata columns are dropped and every "M/D/YY" column becomes
    "20YY-MM-DD". Index i of the result addresses field i + METADATA_COLUMNS
    of each data row.
    """
    tokens = header_line.strip().split(",")[METADATA_COLUMNS:]
    return [_to_iso_date(token) for token in tokens if token.strip()]


def parse_count(value: Optional[str]) -> int:
    """
    Parse a cumulative count; anything without leading digits counts as 0.
    """
    if value is None:
        return 0
    match = _LEADING_DIGITS_RE.match(value)
    if match is None:
        return 0
    return int(match.group(1))


__all__ = [
    "METADATA_COLUMNS",
    "PROVINCE_COLUMN",
    "COUNTRY_COLUMN",
    "CONFIRMED",
    "CURED",
    "DEAD",
    "METRICS",
    "TIME_SERIES_FILES",
    "split_row",
    "decode_date_header",
    "parse_count",
]
