"""
Static lookup tables consumed by the resolver and the map enricher.

Files (JSON objects) under the translations prefix:

    en2zh.json              English place name -> display-language name
    us_states_abbr_en.json  state abbreviation -> English state name
    us_states_abbr_zh.json  state abbreviation -> display-language state name
    iso3166_codes.json      ISO 3166 alpha-3 code -> display-language label
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from ..adapters import StorageAdapter

logger = logging.getLogger("world_cases.lookups")

TRANSLATIONS_FILE = "en2zh.json"
STATES_EN_FILE = "us_states_abbr_en.json"
STATES_LOCAL_FILE = "us_states_abbr_zh.json"
ISO3166_FILE = "iso3166_codes.json"

GLOBAL_NAME = "Global"
CHINA_NAME = "China"


@dataclass(frozen=True)
class LookupTables:
    """Read-only view over the translation tables."""

    translations: Mapping[str, str]
    state_names_en: Mapping[str, str] = field(default_factory=dict)
    state_names_local: Mapping[str, str] = field(default_factory=dict)
    iso3166_labels: Mapping[str, str] = field(default_factory=dict)

    def translate(self, name: str) -> str:
        """Display-language name, or the English name itself when unmapped."""
        translated = self.translations.get(name)
        if not translated:
            logger.debug("No translation for %r, keeping the English name", name)
            return name
        return translated

    def state_abbreviation(self, state_name: str) -> Optional[str]:
        """Reverse lookup: full English state name -> abbreviation."""
        for abbr, english in self.state_names_en.items():
            if english == state_name:
                return abbr
        return None

    def state_display_name(self, abbr: str) -> Optional[str]:
        return self.state_names_local.get(abbr) or None

    def iso3166_label(self, iso_a3: Optional[str]) -> Optional[str]:
        if not iso_a3:
            return None
        return self.iso3166_labels.get(iso_a3)

    @property
    def global_key(self) -> str:
        return self.translate(GLOBAL_NAME)

    @property
    def china_key(self) -> str:
        return self.translate(CHINA_NAME)


def _read_json_object(storage: StorageAdapter, key: str, *, required: bool) -> Dict[str, str]:
    if not storage.exists(key):
        if required:
            raise FileNotFoundError(f"Lookup table not found: {key}")
        logger.warning("Optional lookup table %s not found, using an empty table", key)
        return {}

    data = json.loads(storage.read_text(key))
    if not isinstance(data, dict):
        raise ValueError(f"Lookup table {key} must be a JSON object")
    return {str(k): str(v) for k, v in data.items()}


def load_lookup_tables(storage: StorageAdapter, prefix: str) -> LookupTables:
    """
    Load all lookup tables from `prefix` through the storage adapter.

    The translation table is required; the others degrade to empty tables
    (untranslated names then fall back to English).
    """
    prefix = prefix.rstrip("/")
    tables = LookupTables(
        translations=_read_json_object(storage, f"{prefix}/{TRANSLATIONS_FILE}", required=True),
        state_names_en=_read_json_object(storage, f"{prefix}/{STATES_EN_FILE}", required=False),
        state_names_local=_read_json_object(storage, f"{prefix}/{STATES_LOCAL_FILE}", required=False),
        iso3166_labels=_read_json_object(storage, f"{prefix}/{ISO3166_FILE}", required=False),
    )
    logger.info(
        "Loaded %d translations, %d US states, %d ISO 3166 labels",
        len(tables.translations),
        len(tables.state_names_en),
        len(tables.iso3166_labels),
    )
    return tables


__all__ = [
    "GLOBAL_NAME",
    "CHINA_NAME",
    "LookupTables",
    "load_lookup_tables",
]
