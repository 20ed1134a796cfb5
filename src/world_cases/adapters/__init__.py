"""
Adapters package
----------------

I/O and run-metadata abstractions so the same pipeline runs against the
local filesystem or S3 without touching the transformation code.
"""

from .storage import (  # noqa: F401
    LocalStorageAdapter,
    S3StorageAdapter,
    StorageAdapter,
)
from .metadata import (  # noqa: F401
    DEFAULT_METADATA_KEY,
    MetadataAdapter,
    StorageMetadataAdapter,
)

__all__ = [
    "StorageAdapter",
    "LocalStorageAdapter",
    "S3StorageAdapter",
    "DEFAULT_METADATA_KEY",
    "MetadataAdapter",
    "StorageMetadataAdapter",
]
