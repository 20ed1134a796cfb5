"""
Cloud entrypoint: the same build, reading and writing S3.

Environment variables
---------------------

- WORLD_CASES_S3_BUCKET
    Bucket holding the inputs (data/...) and receiving the outputs
    (public/..., processed/..., metadata/...).

- WORLD_CASES_S3_BASE_PREFIX (optional)
    Logical prefix under the bucket; every key is resolved below it.

Run records go to the same bucket (WORLD_CASES_METADATA_KEY).

Lambda handler
--------------

    Handler: world_cases.cloud_pipeline.lambda_handler

The event may optionally include {"skip_table": true}.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Dict, List

from . import settings
from .adapters import S3StorageAdapter, StorageMetadataAdapter
from .pipeline import run_pipeline

logger = logging.getLogger("world_cases.cloud")


def _build_s3_storage_from_env() -> S3StorageAdapter:
    bucket = os.getenv(settings.S3_BUCKET_ENV)
    if not bucket:
        raise RuntimeError(
            f"Missing required environment variable {settings.S3_BUCKET_ENV!r} for S3 bucket name.",
        )
    base_prefix = os.getenv(settings.S3_BASE_PREFIX_ENV) or None
    return S3StorageAdapter(bucket=bucket, base_prefix=base_prefix)


def run_cloud_pipeline(*, with_table: bool = True) -> Dict[str, List[str]]:
    """Run the full build against S3; returns the written s3:// locations."""
    storage = _build_s3_storage_from_env()
    metadata = StorageMetadataAdapter(storage, key=settings.METADATA_KEY)
    logger.info("Running world cases build against s3://%s", storage.bucket)
    return run_pipeline(storage, metadata, with_table=with_table)


def lambda_handler(event, context):  # pragma: no cover - AWS entrypoint
    event = event or {}
    logging.getLogger("world_cases").setLevel(settings.LOG_LEVEL)

    artefacts = run_cloud_pipeline(with_table=not event.get("skip_table", False))
    return {
        "statusCode": 200,
        "body": json.dumps(
            {
                "message": "World cases build executed successfully.",
                "artefacts": artefacts,
            }
        ),
    }


__all__ = ["run_cloud_pipeline", "lambda_handler"]
