from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Sequence

import pytest

from world_cases.adapters import LocalStorageAdapter
from world_cases.transformations.lookups import LookupTables

TRANSLATIONS: Dict[str, str] = {
    "Global": "全球",
    "China": "中国",
    "Mainland China": "中国大陆",
    "Hong Kong": "香港",
    "Macau": "澳门",
    "Taiwan": "台湾",
    "Hubei": "湖北",
    "Beijing": "北京",
    "United States of America": "美国",
    "France": "法国",
    "Metropolitan France": "法国本土",
    "French Guiana": "法属圭亚那",
    "Italy": "意大利",
    "Germany": "德国",
    "South Korea": "韩国",
    "International Conveyance": "国际运输",
    "Diamond Princess": "钻石公主号",
}

STATE_NAMES_EN: Dict[str, str] = {
    "CA": "California",
    "WA": "Washington",
    "NY": "New York",
}

STATE_NAMES_LOCAL: Dict[str, str] = {
    "CA": "加利福尼亚州",
    "WA": "华盛顿州",
    "NY": "纽约州",
}

ISO3166_LABELS: Dict[str, str] = {
    "ATA": "南极洲",
    "BRA": "巴西",
}

HEADER_PREFIX = "Province/State,Country/Region,Lat,Long"


def _csv_field(value: str) -> str:
    return f'"{value}"' if "," in value else value


def make_time_series(dates: Sequence[str], rows: Sequence[Sequence[object]]) -> str:
    """
    Build a time-series CSV text.

    `dates` are header tokens ("3/12/20"); each row is
    (province, country, *counts) and gets dummy Lat/Long columns.
    """
    lines: List[str] = [",".join([HEADER_PREFIX, *dates])]
    for row in rows:
        province, country, *counts = row
        fields = [
            _csv_field(str(province)),
            _csv_field(str(country)),
            "1.0",
            "2.0",
            *(str(c) for c in counts),
        ]
        lines.append(",".join(fields))
    return "\n".join(lines) + "\n"


@pytest.fixture
def lookups() -> LookupTables:
    return LookupTables(
        translations=dict(TRANSLATIONS),
        state_names_en=dict(STATE_NAMES_EN),
        state_names_local=dict(STATE_NAMES_LOCAL),
        iso3166_labels=dict(ISO3166_LABELS),
    )


@pytest.fixture
def storage(tmp_path: Path) -> LocalStorageAdapter:
    return LocalStorageAdapter(tmp_path)


@pytest.fixture
def write_lookup_files(storage: LocalStorageAdapter):
    def _write(prefix: str = "data/map-translations") -> str:
        files = {
            "en2zh.json": TRANSLATIONS,
            "us_states_abbr_en.json": STATE_NAMES_EN,
            "us_states_abbr_zh.json": STATE_NAMES_LOCAL,
            "iso3166_codes.json": ISO3166_LABELS,
        }
        for name, payload in files.items():
            storage.write_raw(
                f"{prefix}/{name}",
                json.dumps(payload, ensure_ascii=False).encode("utf-8"),
            )
        return prefix

    return _write
