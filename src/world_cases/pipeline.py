"""
End-to-end build shared by the local and cloud entrypoints.

Steps:

1. Load lookup tables and manual corrections
2. Build one tree per metric (confirmed, cured, dead)
3. Merge the three trees
4. Consolidate the Chinese sub-regions into China
5. Render world.json, the enriched topology and the tabular export
6. Write all outputs

Everything up to step 5 happens in memory; nothing is written unless the
whole build succeeded.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from . import settings
from .adapters import MetadataAdapter, StorageAdapter
from .transformations import (
    METRICS,
    TIME_SERIES_FILES,
    CorrectionTable,
    LookupTables,
    WorldTree,
    build_metric_tree,
    build_world_cases_dataframe,
    consolidate_china,
    enrich_topology,
    load_correction_table,
    load_lookup_tables,
    merge_metric_trees,
    save_world_cases_parquet,
)

logger = logging.getLogger("world_cases.pipeline")


@dataclass(frozen=True)
class PipelineOutputs:
    world: WorldTree
    world_document: Dict[str, Any]
    topology: Dict[str, Any]
    table: Optional[pd.DataFrame]
    rows_processed: int


def build_world_tree(
    storage: StorageAdapter,
    lookups: LookupTables,
    corrections: CorrectionTable,
    *,
    time_series_prefix: str = settings.TIME_SERIES_PREFIX,
) -> Tuple[WorldTree, int]:
    """Build, merge and consolidate the per-metric trees; returns (tree, rows)."""
    prefix = time_series_prefix.rstrip("/")
    trees = []
    for metric in METRICS:
        key = f"{prefix}/{TIME_SERIES_FILES[metric]}"
        logger.info("Aggregating %s from %s", metric, key)
        trees.append(build_metric_tree(storage.read_text(key), metric, lookups, corrections))

    merged = merge_metric_trees(trees)
    rows = sum(tree.rows_processed for tree in trees)
    return consolidate_china(merged, lookups), rows


def build_outputs(
    storage: StorageAdapter,
    *,
    time_series_prefix: str = settings.TIME_SERIES_PREFIX,
    translations_prefix: str = settings.TRANSLATIONS_PREFIX,
    map_key: str = settings.MAP_KEY,
    corrections: Optional[CorrectionTable] = None,
    with_table: bool = True,
) -> PipelineOutputs:
    """Compute every output in memory without writing anything."""
    lookups = load_lookup_tables(storage, translations_prefix)
    if corrections is None:
        corrections = load_correction_table()

    world, rows = build_world_tree(
        storage,
        lookups,
        corrections,
        time_series_prefix=time_series_prefix,
    )
    world_document = world.to_document(lookups.global_key)

    topology = json.loads(storage.read_text(map_key))
    enriched = enrich_topology(topology, world, lookups)

    table = build_world_cases_dataframe(world) if with_table else None

    return PipelineOutputs(
        world=world,
        world_document=world_document,
        topology=enriched,
        table=table,
        rows_processed=rows,
    )


def _dump_json(document: Dict[str, Any]) -> bytes:
    return json.dumps(document, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def write_outputs(
    outputs: PipelineOutputs,
    storage: StorageAdapter,
    *,
    output_prefix: str = settings.OUTPUT_PREFIX,
    map_output_key: str = settings.MAP_OUTPUT_KEY,
    table_prefix: str = settings.TABLE_PREFIX,
) -> Dict[str, List[str]]:
    """
    Persist the table, the enriched map and world.json, in that order.

    Payloads are serialized before the first write. world.json goes last:
    if it cannot be written, the map is put back to its previous content so
    the two published files never disagree.
    """
    world_payload = _dump_json(outputs.world_document)
    map_payload = _dump_json(outputs.topology)

    artefacts: Dict[str, List[str]] = {}
    if outputs.table is not None:
        artefacts["table"] = [
            save_world_cases_parquet(outputs.table, storage, prefix=table_prefix)
        ]

    world_key = f"{output_prefix.rstrip('/')}/{settings.WORLD_FILE_NAME}"
    previous_map = storage.read_raw(map_output_key) if storage.exists(map_output_key) else None

    artefacts["map"] = [storage.write_raw(map_output_key, map_payload)]
    try:
        artefacts["world"] = [storage.write_raw(world_key, world_payload)]
    except Exception:
        if previous_map is not None:
            logger.warning("Writing %s failed, restoring %s", world_key, map_output_key)
            storage.write_raw(map_output_key, previous_map)
        raise
    return artefacts


def run_pipeline(
    storage: StorageAdapter,
    metadata: MetadataAdapter,
    *,
    time_series_prefix: str = settings.TIME_SERIES_PREFIX,
    translations_prefix: str = settings.TRANSLATIONS_PREFIX,
    map_key: str = settings.MAP_KEY,
    map_output_key: str = settings.MAP_OUTPUT_KEY,
    output_prefix: str = settings.OUTPUT_PREFIX,
    table_prefix: str = settings.TABLE_PREFIX,
    with_table: bool = True,
    run_scope: str = settings.RUN_SCOPE,
) -> Dict[str, List[str]]:
    """
    Full build with run metadata.

    The run is recorded as FAILED (and the exception re-raised) if any step
    fails; in that case no output has been written.
    """
    run_id = metadata.start_run(run_scope)
    try:
        outputs = build_outputs(
            storage,
            time_series_prefix=time_series_prefix,
            translations_prefix=translations_prefix,
            map_key=map_key,
            with_table=with_table,
        )
        artefacts = write_outputs(
            outputs,
            storage,
            output_prefix=output_prefix,
            map_output_key=map_output_key,
            table_prefix=table_prefix,
        )
        dates = outputs.world.dates()
        metadata.end_run(
            run_id,
            status="SUCCESS",
            rows_processed=outputs.rows_processed,
            last_date=dates[-1] if dates else None,
        )
        logger.info(
            "Build %s finished: %d rows, %d countries",
            run_id, outputs.rows_processed, len(outputs.world.country_keys()),
        )
        return artefacts
    except Exception as exc:  # noqa: BLE001
        logger.error("Build %s failed: %s", run_id, exc)
        metadata.end_run(run_id, status="FAILED", error_message=str(exc))
        raise


__all__ = [
    "PipelineOutputs",
    "build_world_tree",
    "build_outputs",
    "write_outputs",
    "run_pipeline",
]
