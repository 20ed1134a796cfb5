"""
World tree: aggregation, merge and consolidation of the case counts.

Nodes are addressed by path:

    ()                                  Global (synthetic root)
    (country_key,)                      country
    (country_key, province_key)         province
    (china_key, mainland_key, ...)      after consolidation only

Three pure stages produce the final tree:

    build_metric_tree  x3  ->  merge_metric_trees  ->  consolidate_china

Each builder pass owns its accumulator until it returns; later stages never
mutate their input and always return new trees.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .corrections import CorrectionTable
from .location_resolver import (
    CHINA,
    HONG_KONG,
    MACAU,
    MAINLAND_CHINA,
    TAIWAN,
    CanonicalLocation,
    resolve_location,
)
from .lookups import GLOBAL_NAME, LookupTables
from .time_series import (
    COUNTRY_COLUMN,
    METADATA_COLUMNS,
    METRICS,
    PROVINCE_COLUMN,
    decode_date_header,
    parse_count,
    split_row,
)

logger = logging.getLogger("world_cases.tree")

NodePath = Tuple[str, ...]
ROOT_PATH: NodePath = ()

ENGLISH_FIELD = "ENGLISH"

CHINESE_SUB_REGIONS = (MAINLAND_CHINA, HONG_KONG, MACAU, TAIWAN)


class RowLengthMismatchError(ValueError):
    """A data row does not have as many fields as the first row of its file."""

    def __init__(self, line: str, expected: int, actual: int) -> None:
        super().__init__(
            f"Error occurred when processing {line!r}: "
            f"expected {expected} fields, got {actual}"
        )
        self.line = line
        self.expected = expected
        self.actual = actual


@dataclass(frozen=True)
class LocationNode:
    english_name: str
    series: Mapping[str, Mapping[str, int]] = field(default_factory=dict)

    def count(self, metric: str, date: str) -> Optional[int]:
        return self.series.get(metric, {}).get(date)


@dataclass(frozen=True)
class MetricTree:
    """Result of one builder pass over a single metric's file."""

    metric: str
    nodes: Mapping[NodePath, LocationNode]
    dates: Tuple[str, ...] = ()
    rows_processed: int = 0


@dataclass(frozen=True)
class WorldTree:
    nodes: Mapping[NodePath, LocationNode]

    @property
    def root(self) -> LocationNode:
        return self.nodes[ROOT_PATH]

    def node(self, path: NodePath) -> Optional[LocationNode]:
        return self.nodes.get(path)

    def children(self, path: NodePath) -> List[NodePath]:
        depth = len(path) + 1
        return [p for p in self.nodes if len(p) == depth and p[: len(path)] == path]

    def country_keys(self) -> List[str]:
        return [p[0] for p in self.nodes if len(p) == 1]

    def has_country(self, key: str) -> bool:
        return (key,) in self.nodes

    def dates(self) -> List[str]:
        dates = set()
        for values in self.root.series.values():
            dates.update(values)
        return sorted(dates)

    def to_document(self, root_key: str) -> Dict[str, Any]:
        """
        Nested mapping written as world.json.

        The Global root and every country are top-level siblings; provinces
        (and Mainland China's provinces under China) nest under their parent
        key.
        """
        index: Dict[NodePath, List[NodePath]] = {}
        for path in self.nodes:
            if path:
                index.setdefault(path[:-1], []).append(path)

        def render(path: NodePath, *, with_children: bool = True) -> Dict[str, Any]:
            node = self.nodes[path]
            entry: Dict[str, Any] = {ENGLISH_FIELD: node.english_name}
            for metric in METRICS:
                if metric in node.series:
                    entry[metric] = dict(node.series[metric])
            if with_children:
                for child in index.get(path, []):
                    entry[child[-1]] = render(child)
            return entry

        document: Dict[str, Any] = {root_key: render(ROOT_PATH, with_children=False)}
        for country in index.get(ROOT_PATH, []):
            document[country[0]] = render(country)
        return document


class _TreeAccumulator:
    """Mutable path -> (english name, series) map owned by one builder pass."""

    def __init__(self, metric: str) -> None:
        self.metric = metric
        self._names: Dict[NodePath, str] = {ROOT_PATH: GLOBAL_NAME}
        self._series: Dict[NodePath, Dict[str, int]] = {ROOT_PATH: {}}

    def _add(self, path: NodePath, english_name: str, date: str, count: int) -> None:
        if path not in self._names:
            self._names[path] = english_name
            self._series[path] = {}
        series = self._series[path]
        series[date] = series.get(date, 0) + count

    def add(self, location: CanonicalLocation, date: str, count: int) -> None:
        self._add(ROOT_PATH, GLOBAL_NAME, date, count)
        country_path = (location.country_key,)
        self._add(country_path, location.english_country, date, count)
        if location.has_province:
            self._add(
                country_path + (location.province_key,),
                location.english_province or location.province_key,
                date,
                count,
            )

    def freeze(self) -> Dict[NodePath, LocationNode]:
        return {
            path: LocationNode(english_name=self._names[path], series={self.metric: series})
            for path, series in self._series.items()
        }


def build_metric_tree(
    text: str,
    metric: str,
    lookups: LookupTables,
    corrections: Optional[CorrectionTable] = None,
) -> MetricTree:
    """
    Aggregate one time-series file into a tree for `metric`.

    Every row adds its (corrected) count to Global and to its country, and to
    its province when it has one. Accumulation is always additive. Rows must
    all have as many fields as the first data row; otherwise the whole run
    is aborted with RowLengthMismatchError.
    """
    corrections = corrections or CorrectionTable()
    lines = text.splitlines()
    if not lines:
        logger.warning("Empty time series for %s", metric)
        return MetricTree(metric=metric, nodes={ROOT_PATH: LocationNode(GLOBAL_NAME, {metric: {}})})

    dates = decode_date_header(lines[0])
    accumulator = _TreeAccumulator(metric)
    expected_length: Optional[int] = None
    rows = 0

    for line in lines[1:]:
        fields = split_row(line)
        if fields is None:
            continue

        if expected_length is None:
            if len(fields) <= COUNTRY_COLUMN:
                raise RowLengthMismatchError(line, METADATA_COLUMNS + len(dates), len(fields))
            expected_length = len(fields)
        elif len(fields) != expected_length:
            raise RowLengthMismatchError(line, expected_length, len(fields))

        location = resolve_location(fields[PROVINCE_COLUMN], fields[COUNTRY_COLUMN], lookups)
        correction_province = location.english_province or ""

        for index, date in enumerate(dates):
            column = index + METADATA_COLUMNS
            raw_value = fields[column] if column < len(fields) else None
            count = corrections.apply(
                metric,
                location.english_country,
                correction_province,
                date,
                parse_count(raw_value),
            )
            accumulator.add(location, date, count)
        rows += 1

    nodes = accumulator.freeze()
    logger.info(
        "Built %s tree: %d rows, %d dates, %d countries",
        metric, rows, len(dates), sum(1 for p in nodes if len(p) == 1),
    )
    return MetricTree(metric=metric, nodes=nodes, dates=tuple(dates), rows_processed=rows)


def merge_metric_trees(trees: Sequence[MetricTree]) -> WorldTree:
    """
    Deep-merge per-metric trees by path.

    The English name comes from the first tree defining a node. Series are
    unioned by metric; a metric missing from a node's source trees stays
    absent. If a metric appears in several trees for the same path the later
    tree wins.
    """
    names: Dict[NodePath, str] = {}
    series: Dict[NodePath, Dict[str, Dict[str, int]]] = {}

    for tree in trees:
        for path, node in tree.nodes.items():
            names.setdefault(path, node.english_name)
            target = series.setdefault(path, {})
            for metric, values in node.series.items():
                target[metric] = dict(values)

    if ROOT_PATH not in names:
        names[ROOT_PATH] = GLOBAL_NAME
        series[ROOT_PATH] = {}

    return WorldTree(
        nodes={path: LocationNode(names[path], series[path]) for path in names}
    )


def _sum_series(nodes: Iterable[LocationNode]) -> Dict[str, Dict[str, int]]:
    totals: Dict[str, Dict[str, int]] = {}
    for node in nodes:
        for metric, values in node.series.items():
            target = totals.setdefault(metric, {})
            for date, count in values.items():
                target[date] = target.get(date, 0) + count
    return {metric: totals[metric] for metric in METRICS if metric in totals}


def consolidate_china(tree: WorldTree, lookups: LookupTables) -> WorldTree:
    """
    Fold Mainland China, Hong Kong, Macau and Taiwan into one China node.

    Each sub-region is collected from the top level and from under China
    (where the resolver places Hong Kong, Macau and Taiwan); a region present
    in both places contributes both. China's series become the per-date sum
    of every collected node; Mainland China, with its provinces, is
    re-attached as a child of China. Hong Kong, Macau and Taiwan are removed
    and survive only inside the China totals. Other children of China, if
    any, are kept.
    """
    china_key = lookups.china_key
    region_keys = {lookups.translate(name): name for name in CHINESE_SUB_REGIONS}
    mainland_key = lookups.translate(MAINLAND_CHINA)

    # key -> every path the region was found at
    found: Dict[str, List[NodePath]] = {}
    for key in region_keys:
        paths = [p for p in ((key,), (china_key, key)) if p in tree.nodes]
        if paths:
            found[key] = paths

    if not found:
        logger.info("No Chinese sub-regions found, skipping consolidation")
        return tree

    china_node = LocationNode(
        english_name=CHINA,
        series=_sum_series(tree.nodes[path] for paths in found.values() for path in paths),
    )

    def is_china_related(path: NodePath) -> bool:
        return bool(path) and (path[0] == china_key or path[0] in region_keys)

    def china_block() -> Dict[NodePath, LocationNode]:
        block: Dict[NodePath, LocationNode] = {(china_key,): china_node}
        for mainland_path in found.get(mainland_key, []):
            for path, node in tree.nodes.items():
                if path[: len(mainland_path)] == mainland_path:
                    block.setdefault((china_key, mainland_key) + path[len(mainland_path):], node)
        for path, node in tree.nodes.items():
            if len(path) >= 2 and path[0] == china_key and path[1] not in region_keys:
                block[path] = node
        return block

    nodes: Dict[NodePath, LocationNode] = {}
    emitted = False
    for path, node in tree.nodes.items():
        if not is_china_related(path):
            nodes[path] = node
        elif not emitted:
            nodes.update(china_block())
            emitted = True

    logger.info(
        "Consolidated %s into %s",
        ", ".join(region_keys[key] for key in found),
        CHINA,
    )
    return WorldTree(nodes=nodes)


__all__ = [
    "NodePath",
    "ROOT_PATH",
    "ENGLISH_FIELD",
    "CHINESE_SUB_REGIONS",
    "RowLengthMismatchError",
    "LocationNode",
    "MetricTree",
    "WorldTree",
    "build_metric_tree",
    "merge_metric_trees",
    "consolidate_china",
]
