"""
Location resolver
-----------------

Maps a raw (province, country) pair from the time-series tables to the
canonical keys used by the world document and the map.

Resolution happens in two phases:

1. `NORMALIZATION_RULES`: an ordered tuple of pure rules, each taking a
   frozen `LocationRecord` (English names) and returning a possibly rewritten
   one. Order matters: Taiwan is reclassified under "China" *after* the
   Mainland China rule ran, so it is not itself turned into Mainland China.
2. Translation of the normalized names into display-language keys, with the
   US state handling on top.

`resolve_location` is referentially transparent. Its country keys are plain
translations of the normalized English name, the same lookup the map
enrichment performs, so geometry and case data agree on every key.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Mapping, Optional, Tuple

from .lookups import LookupTables

CRUISE_SHIP_COUNTRY = "Cruise Ship"
INTERNATIONAL_CONVEYANCE = "International Conveyance"
DIAMOND_PRINCESS = "Diamond Princess"

CHINA = "China"
MAINLAND_CHINA = "Mainland China"
HONG_KONG = "Hong Kong"
MACAU = "Macau"
TAIWAN = "Taiwan"
TAIWAN_COUNTRY_MARKER = "Taiwan*"

FRANCE = "France"
METROPOLITAN_FRANCE = "Metropolitan France"
FRENCH_OVERSEAS_TERRITORIES = frozenset({"French Guiana", "Martinique", "Reunion"})

UNITED_STATES = "United States of America"

# Source names that differ from the names used by the translation table/map
COUNTRY_ALIASES: Mapping[str, str] = {
    "US": UNITED_STATES,
    "Korea, South": "South Korea",
}


@dataclass(frozen=True)
class LocationRecord:
    province: str
    country: str


@dataclass(frozen=True)
class CanonicalLocation:
    country_key: str
    province_key: Optional[str]
    english_country: str
    english_province: Optional[str]

    @property
    def has_province(self) -> bool:
        return self.province_key is not None


Rule = Callable[[LocationRecord], LocationRecord]


def rewrite_cruise_ship(record: LocationRecord) -> LocationRecord:
    if record.country == CRUISE_SHIP_COUNTRY:
        return LocationRecord(province=DIAMOND_PRINCESS, country=INTERNATIONAL_CONVEYANCE)
    return record


def reclassify_mainland_china(record: LocationRecord) -> LocationRecord:
    if record.country == CHINA and record.province not in (HONG_KONG, MACAU):
        return replace(record, country=MAINLAND_CHINA)
    return record


def reclassify_taiwan(record: LocationRecord) -> LocationRecord:
    if record.country == TAIWAN_COUNTRY_MARKER:
        return LocationRecord(province=TAIWAN, country=CHINA)
    return record


def reclassify_france(record: LocationRecord) -> LocationRecord:
    if record.country == FRANCE and record.province == FRANCE:
        return replace(record, province=METROPOLITAN_FRANCE)
    if record.country in FRENCH_OVERSEAS_TERRITORIES:
        return LocationRecord(province=record.country, country=FRANCE)
    return record


def apply_country_alias(record: LocationRecord) -> LocationRecord:
    alias = COUNTRY_ALIASES.get(record.country)
    if alias is not None:
        return replace(record, country=alias)
    return record


NORMALIZATION_RULES: Tuple[Rule, ...] = (
    rewrite_cruise_ship,
    reclassify_mainland_china,
    reclassify_taiwan,
    reclassify_france,
    apply_country_alias,
)


def normalize_location(
    province: str,
    country: str,
    rules: Tuple[Rule, ...] = NORMALIZATION_RULES,
) -> LocationRecord:
    """Run the normalization rules in order over a raw (province, country)."""
    record = LocationRecord(province=province.strip(), country=country.strip())
    for rule in rules:
        record = rule(record)
    return record


def us_state_abbreviation(province: str, lookups: LookupTables) -> Optional[str]:
    """
    State abbreviation for a US province field.

    "Los Angeles, CA" -> "CA" (suffix wins); "California" -> reverse lookup.
    """
    parts = province.split(",")
    if len(parts) == 2 and parts[1].strip():
        return parts[1].strip()
    return lookups.state_abbreviation(province)


def resolve_location(province: str, country: str, lookups: LookupTables) -> CanonicalLocation:
    """
    Canonical keys and English names for a raw (province, country) pair.

    Untranslated names fall back to the English string, so keys are never
    empty for a non-empty country.
    """
    record = normalize_location(province, country)

    country_key = lookups.translate(record.country)
    province_key: Optional[str] = None
    if record.province:
        province_key = lookups.translate(record.province)

        if country_key == lookups.translate(UNITED_STATES):
            abbr = us_state_abbreviation(record.province, lookups)
            state_key = lookups.state_display_name(abbr) if abbr else None
            if state_key:
                province_key = state_key

    return CanonicalLocation(
        country_key=country_key,
        province_key=province_key,
        english_country=record.country,
        english_province=record.province or None,
    )


__all__ = [
    "CHINA",
    "MAINLAND_CHINA",
    "HONG_KONG",
    "MACAU",
    "TAIWAN",
    "UNITED_STATES",
    "COUNTRY_ALIASES",
    "LocationRecord",
    "CanonicalLocation",
    "NORMALIZATION_RULES",
    "rewrite_cruise_ship",
    "reclassify_mainland_china",
    "reclassify_taiwan",
    "reclassify_france",
    "apply_country_alias",
    "normalize_location",
    "us_state_abbreviation",
    "resolve_location",
]
