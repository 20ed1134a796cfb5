from __future__ import annotations

import copy

import pytest

from world_cases.transformations.map_enrichment import (
    MAP_OBJECT_NAME,
    enrich_geometry_properties,
    enrich_topology,
)
from world_cases.transformations.world_tree import ROOT_PATH, LocationNode, WorldTree


@pytest.fixture
def world() -> WorldTree:
    series = {"confirmedCount": {"2020-03-12": 1}}
    return WorldTree(
        nodes={
            ROOT_PATH: LocationNode("Global", series),
            ("中国",): LocationNode("China", series),
            ("中国", "中国大陆"): LocationNode("Mainland China", series),
            ("意大利",): LocationNode("Italy", series),
            ("美国",): LocationNode("United States of America", series),
        }
    )


def _topology(*properties):
    return {
        "type": "Topology",
        "objects": {
            MAP_OBJECT_NAME: {
                "type": "GeometryCollection",
                "geometries": [
                    {"type": "Polygon", "arcs": [[i]], "properties": dict(p)}
                    for i, p in enumerate(properties)
                ],
            }
        },
        "arcs": [],
    }


def test_country_with_case_data_gets_region(world, lookups):
    props = enrich_geometry_properties({"NAME": "Italy", "ISO_A3": "ITA"}, world, lookups)
    assert props["CHINESE_NAME"] == "意大利"
    assert props["REGION"] == "意大利"
    assert props["ISO_A3"] == "ITA"


def test_china_regions_are_keyed_as_china(world, lookups):
    for name in ("Taiwan", "Hong Kong", "Macau"):
        props = enrich_geometry_properties({"NAME": name}, world, lookups)
        assert props["NAME"] == "China"
        assert props["CHINESE_NAME"] == "中国"
        assert props["REGION"] == "中国"


def test_country_without_case_data_uses_iso_label(world, lookups):
    props = enrich_geometry_properties({"NAME": "Brazil", "ISO_A3": "BRA"}, world, lookups)
    assert "REGION" not in props
    assert props["CHINESE_NAME"] == "巴西"


def test_country_without_case_data_or_iso_code(world, lookups):
    props = enrich_geometry_properties({"NAME": "Somaliland", "ISO_A3": "-99"}, world, lookups)
    assert "REGION" not in props
    assert props["CHINESE_NAME"] == "Somaliland"


def test_name_variants_are_normalized(world, lookups):
    props = enrich_geometry_properties({"NAME": "Dem. Rep. Congo"}, world, lookups)
    assert props["NAME"] == "Congo (Kinshasa)"


def test_map_key_matches_resolver_key(world, lookups):
    from world_cases.transformations.location_resolver import resolve_location

    resolved = resolve_location("", "US", lookups).country_key
    props = enrich_geometry_properties({"NAME": "United States of America"}, world, lookups)
    assert props["REGION"] == resolved


def test_enrich_topology_returns_copy(world, lookups):
    topology = _topology({"NAME": "Italy"}, {"NAME": "Antarctica", "ISO_A3": "ATA"})
    original = copy.deepcopy(topology)

    enriched = enrich_topology(topology, world, lookups)

    assert topology == original
    geometries = enriched["objects"][MAP_OBJECT_NAME]["geometries"]
    assert geometries[0]["properties"]["REGION"] == "意大利"
    assert geometries[1]["properties"]["CHINESE_NAME"] == "南极洲"
    assert geometries[1]["arcs"] == [[1]]
    assert enriched["arcs"] == []


def test_enrich_topology_requires_object(world, lookups):
    with pytest.raises(KeyError):
        enrich_topology({"objects": {}}, world, lookups)
