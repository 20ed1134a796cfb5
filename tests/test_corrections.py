from __future__ import annotations

import pandas as pd
import pytest

from world_cases.transformations.corrections import (
    CorrectionTable,
    build_correction_table,
    correction_key,
    load_correction_table,
)


def test_bundled_corrections_load():
    table = load_correction_table()
    assert table.lookup("confirmedCount", "Italy", "", "2020-03-12") == 15113
    assert table.lookup("deadCount", "France", "Metropolitan France", "2020-03-15") == 127
    assert table.lookup("curedCount", "Germany", "", "2020-03-12") == 25


def test_corrections_are_scoped_per_metric():
    table = load_correction_table()
    # Switzerland only has a deaths correction
    assert table.lookup("deadCount", "Switzerland", "", "2020-03-12") == 4
    assert table.lookup("confirmedCount", "Switzerland", "", "2020-03-12") is None


def test_apply_replaces_value():
    table = CorrectionTable(tables={"confirmedCount": {correction_key("Italy", "", "2020-03-12"): 100}})
    assert table.apply("confirmedCount", "Italy", "", "2020-03-12", 7) == 100
    assert table.apply("confirmedCount", "Italy", "", "2020-03-13", 7) == 7
    assert table.apply("deadCount", "Italy", "", "2020-03-12", 7) == 7


def test_apply_is_idempotent():
    table = load_correction_table()
    once = table.apply("confirmedCount", "Spain", "", "2020-03-12", 2277)
    twice = table.apply("confirmedCount", "Spain", "", "2020-03-12", once)
    assert once == twice == 3146


def test_correction_key_format():
    assert correction_key("France", "Metropolitan France", "2020-03-12") == (
        "France|Metropolitan France|2020-03-12"
    )


def test_build_rejects_unknown_metric():
    df = pd.DataFrame(
        [{"metric": "activeCount", "country": "Italy", "province": "", "date": "2020-03-12", "value": "1"}]
    )
    with pytest.raises(ValueError, match="unknown metrics"):
        build_correction_table(df)


def test_build_rejects_missing_columns():
    df = pd.DataFrame([{"metric": "confirmedCount", "country": "Italy"}])
    with pytest.raises(ValueError, match="missing required columns"):
        build_correction_table(df)


def test_build_rejects_negative_values():
    df = pd.DataFrame(
        [{"metric": "deadCount", "country": "Italy", "province": "", "date": "2020-03-12", "value": "-1"}]
    )
    with pytest.raises(ValueError):
        build_correction_table(df)


def test_load_keeps_empty_province(tmp_path):
    path = tmp_path / "corrections.csv"
    path.write_text(
        "metric,country,province,date,value\n"
        "deadCount,Italy,,2020-03-12,9\n",
        encoding="utf-8",
    )
    table = load_correction_table(path)
    assert table.lookup("deadCount", "Italy", "", "2020-03-12") == 9
    assert len(table) == 1
