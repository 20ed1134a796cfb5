from __future__ import annotations

from world_cases.transformations.location_resolver import (
    LocationRecord,
    apply_country_alias,
    normalize_location,
    reclassify_france,
    reclassify_mainland_china,
    reclassify_taiwan,
    resolve_location,
    rewrite_cruise_ship,
    us_state_abbreviation,
)


# ---------------------------------------------------------------------------
# Individual rules
# ---------------------------------------------------------------------------


def test_cruise_ship_overrides_province():
    record = rewrite_cruise_ship(LocationRecord("Yokohama", "Cruise Ship"))
    assert record == LocationRecord("Diamond Princess", "International Conveyance")


def test_mainland_china_rule_skips_hong_kong_and_macau():
    assert reclassify_mainland_china(LocationRecord("Hubei", "China")).country == "Mainland China"
    assert reclassify_mainland_china(LocationRecord("Hong Kong", "China")).country == "China"
    assert reclassify_mainland_china(LocationRecord("Macau", "China")).country == "China"


def test_taiwan_rule():
    assert reclassify_taiwan(LocationRecord("", "Taiwan*")) == LocationRecord("Taiwan", "China")


def test_france_rules():
    assert reclassify_france(LocationRecord("France", "France")) == LocationRecord(
        "Metropolitan France", "France"
    )
    assert reclassify_france(LocationRecord("", "Martinique")) == LocationRecord(
        "Martinique", "France"
    )
    assert reclassify_france(LocationRecord("St Martin", "France")) == LocationRecord(
        "St Martin", "France"
    )


def test_country_alias():
    assert apply_country_alias(LocationRecord("", "US")).country == "United States of America"
    assert apply_country_alias(LocationRecord("", "Korea, South")).country == "South Korea"
    assert apply_country_alias(LocationRecord("", "Italy")).country == "Italy"


def test_rule_order_keeps_taiwan_out_of_mainland_china():
    # Taiwan becomes (Taiwan, China) after the Mainland China rule already ran
    assert normalize_location("", "Taiwan*") == LocationRecord("Taiwan", "China")


# ---------------------------------------------------------------------------
# Full resolution
# ---------------------------------------------------------------------------


def test_resolve_us_state_from_suffix(lookups):
    location = resolve_location("California, CA", "US", lookups)
    assert location.country_key == "美国"
    assert location.province_key == "加利福尼亚州"
    assert location.english_country == "United States of America"
    assert location.english_province == "California, CA"


def test_resolve_us_county_row_folds_into_state(lookups):
    location = resolve_location("King County, WA", "US", lookups)
    assert location.province_key == "华盛顿州"


def test_resolve_us_state_by_full_name(lookups):
    assert resolve_location("New York", "US", lookups).province_key == "纽约州"


def test_resolve_us_unknown_state_keeps_fallback(lookups):
    location = resolve_location("Grand Princess", "US", lookups)
    assert location.province_key == "Grand Princess"


def test_resolve_cruise_ship(lookups):
    location = resolve_location("Diamond Princess cruise ship", "Cruise Ship", lookups)
    assert location.country_key == "国际运输"
    assert location.province_key == "钻石公主号"
    assert location.english_country == "International Conveyance"
    assert location.english_province == "Diamond Princess"


def test_resolve_china_regions(lookups):
    assert resolve_location("Hubei", "China", lookups).country_key == "中国大陆"
    hong_kong = resolve_location("Hong Kong", "China", lookups)
    assert (hong_kong.country_key, hong_kong.province_key) == ("中国", "香港")
    taiwan = resolve_location("", "Taiwan*", lookups)
    assert (taiwan.country_key, taiwan.province_key) == ("中国", "台湾")


def test_resolve_without_province(lookups):
    location = resolve_location("", "Italy", lookups)
    assert location.country_key == "意大利"
    assert location.province_key is None
    assert location.english_province is None
    assert not location.has_province


def test_resolve_untranslated_falls_back_to_english(lookups):
    location = resolve_location("Faroe Islands", "Denmark", lookups)
    assert location.country_key == "Denmark"
    assert location.province_key == "Faroe Islands"


def test_resolve_is_deterministic(lookups):
    first = resolve_location("Los Angeles, CA", "US", lookups)
    second = resolve_location("Los Angeles, CA", "US", lookups)
    assert first == second


def test_us_state_abbreviation_prefers_suffix(lookups):
    assert us_state_abbreviation("Washington, CA", lookups) == "CA"
    assert us_state_abbreviation("Washington", lookups) == "WA"
    assert us_state_abbreviation("Nowhere", lookups) is None
