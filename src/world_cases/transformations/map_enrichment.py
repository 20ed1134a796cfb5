"""
Map enrichment: tag each country geometry of the world topology with the
keys of the world document so the map can join geometry to case counts.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Mapping

from .location_resolver import CHINA, HONG_KONG, MACAU, TAIWAN
from .lookups import LookupTables
from .world_tree import WorldTree

logger = logging.getLogger("world_cases.map")

MAP_OBJECT_NAME = "ne_50m_admin_0_countries"

NAME_PROPERTY = "NAME"
ISO_A3_PROPERTY = "ISO_A3"
LOCAL_NAME_PROPERTY = "CHINESE_NAME"
REGION_PROPERTY = "REGION"

# Natural Earth display names that differ from the case-data names
MAP_NAME_VARIANTS: Mapping[str, str] = {
    "Macedonia": "North Macedonia",
    "Dominican Rep.": "Dominican Republic",
    "Dem. Rep. Congo": "Congo (Kinshasa)",
}

# Regions drawn and keyed as part of China on the map
CHINA_MAP_REGIONS = (HONG_KONG, MACAU, TAIWAN)


def enrich_geometry_properties(
    properties: Mapping[str, Any],
    world: WorldTree,
    lookups: LookupTables,
) -> Dict[str, Any]:
    """Return a new property bag with NAME, CHINESE_NAME and maybe REGION set."""
    props = dict(properties)

    name = str(props.get(NAME_PROPERTY) or "")
    name = MAP_NAME_VARIANTS.get(name, name)
    props[NAME_PROPERTY] = name

    key = lookups.translate(name)
    if key in {lookups.translate(region) for region in CHINA_MAP_REGIONS}:
        key = lookups.china_key
        props[NAME_PROPERTY] = CHINA

    props[LOCAL_NAME_PROPERTY] = key

    if world.has_country(key):
        props[REGION_PROPERTY] = key
    else:
        label = lookups.iso3166_label(props.get(ISO_A3_PROPERTY))
        if label:
            props[LOCAL_NAME_PROPERTY] = label
    return props


def enrich_topology(
    topology: Mapping[str, Any],
    world: WorldTree,
    lookups: LookupTables,
    *,
    object_name: str = MAP_OBJECT_NAME,
) -> Dict[str, Any]:
    """
    Copy of `topology` whose geometries of `object_name` carry canonical
    keys. The input document is left untouched.
    """
    objects = topology.get("objects") or {}
    if object_name not in objects:
        raise KeyError(f"Topology has no object named {object_name!r}")

    enriched = copy.deepcopy(dict(topology))
    geometries = enriched["objects"][object_name].get("geometries") or []

    linked = 0
    for geometry in geometries:
        geometry["properties"] = enrich_geometry_properties(
            geometry.get("properties") or {},
            world,
            lookups,
        )
        if REGION_PROPERTY in geometry["properties"]:
            linked += 1

    enriched["objects"][object_name]["geometries"] = geometries
    logger.info("Linked %d of %d map geometries to case data", linked, len(geometries))
    return enriched


__all__ = [
    "MAP_OBJECT_NAME",
    "NAME_PROPERTY",
    "ISO_A3_PROPERTY",
    "LOCAL_NAME_PROPERTY",
    "REGION_PROPERTY",
    "MAP_NAME_VARIANTS",
    "enrich_geometry_properties",
    "enrich_topology",
]
