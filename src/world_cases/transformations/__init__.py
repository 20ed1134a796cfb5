"""
Transformations layer
----------------------

Turns the three JHU time-series tables into the consolidated world tree, the
world document and the enriched map topology.
"""

from .corrections import (  # noqa: F401
    CORRECTIONS_CSV,
    CorrectionTable,
    load_correction_table,
)
from .location_resolver import (  # noqa: F401
    CanonicalLocation,
    LocationRecord,
    NORMALIZATION_RULES,
    resolve_location,
)
from .lookups import (  # noqa: F401
    LookupTables,
    load_lookup_tables,
)
from .map_enrichment import (  # noqa: F401
    MAP_OBJECT_NAME,
    enrich_topology,
)
from .time_series import (  # noqa: F401
    METRICS,
    TIME_SERIES_FILES,
    decode_date_header,
    split_row,
)
from .world_frame import (  # noqa: F401
    build_world_cases_dataframe,
    save_world_cases_parquet,
)
from .world_tree import (  # noqa: F401
    RowLengthMismatchError,
    WorldTree,
    build_metric_tree,
    consolidate_china,
    merge_metric_trees,
)

__all__ = [
    "CORRECTIONS_CSV",
    "CorrectionTable",
    "load_correction_table",
    "CanonicalLocation",
    "LocationRecord",
    "NORMALIZATION_RULES",
    "resolve_location",
    "LookupTables",
    "load_lookup_tables",
    "MAP_OBJECT_NAME",
    "enrich_topology",
    "METRICS",
    "TIME_SERIES_FILES",
    "decode_date_header",
    "split_row",
    "build_world_cases_dataframe",
    "save_world_cases_parquet",
    "RowLengthMismatchError",
    "WorldTree",
    "build_metric_tree",
    "consolidate_china",
    "merge_metric_trees",
]
