"""
Local entrypoint for the world cases build.

Reads the JHU time series, translation tables and world map from the local
filesystem (relative to --root-dir) and writes:

    public/data/world.json
    public/maps/world-50m.json                   (enriched in place)
    processed/world_cases/world_cases.parquet
    metadata/world_cases_runs.json               (run records)

Intended usage:

    python -m world_cases.local_pipeline
    python -m world_cases.local_pipeline --root-dir /path/to/site --skip-table
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from . import settings
from .adapters import LocalStorageAdapter, StorageMetadataAdapter
from .pipeline import run_pipeline


def run_local_pipeline(
    *,
    root_dir: Path | str = ".",
    map_output_key: Optional[str] = None,
    with_table: bool = True,
) -> Dict[str, List[str]]:
    """
    Run the full build against the local filesystem.

    Returns a dictionary mapping output names to the written paths.
    """
    storage = LocalStorageAdapter(root_dir)
    metadata = StorageMetadataAdapter(storage, key=settings.METADATA_KEY)
    return run_pipeline(
        storage,
        metadata,
        map_output_key=map_output_key or settings.MAP_OUTPUT_KEY,
        with_table=with_table,
    )


def main(argv: Optional[List[str]] = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(
        description=(
            "Build world.json and the enriched world map from the JHU CSSE "
            "time series."
        ),
    )
    parser.add_argument(
        "--root-dir",
        type=str,
        default=".",
        help="Directory all data/ and public/ keys are relative to (default: .).",
    )
    parser.add_argument(
        "--map-output-key",
        type=str,
        default=None,
        help=f"Where to write the enriched map (default: {settings.MAP_OUTPUT_KEY}).",
    )
    parser.add_argument(
        "--skip-table",
        action="store_true",
        help="Do not write the Parquet export.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )

    artefacts = run_local_pipeline(
        root_dir=Path(args.root_dir),
        map_output_key=args.map_output_key,
        with_table=not args.skip_table,
    )
    for paths in artefacts.values():
        for p in paths:
            print(p)
    return 0


__all__ = ["run_local_pipeline", "main"]


if __name__ == "__main__":
    sys.exit(main())
