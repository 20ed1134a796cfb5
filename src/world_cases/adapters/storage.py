from __future__ import annotations

import io
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import pandas as pd


class StorageAdapter(ABC):
    """
    Abstraction over where the pipeline reads its inputs and writes its
    outputs (local filesystem, S3, ...).

    Keys are logical, slash-separated paths such as
    "data/map-translations/en2zh.json" or "public/data/world.json".
    """

    @abstractmethod
    def read_raw(self, key: str) -> bytes:
        """Read the bytes stored at the given key."""

    @abstractmethod
    def write_raw(self, key: str, content: bytes) -> str:
        """
        Persist bytes at the given key.

        Returns the fully-qualified location (for logging), e.g.
        "public/data/world.json" or "s3://bucket/public/data/world.json".
        """

    @abstractmethod
    def write_parquet(self, df: pd.DataFrame, key: str) -> str:
        """Persist a DataFrame as Parquet and return its location."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Whether an object is stored at the given key."""

    def read_text(self, key: str, encoding: str = "utf-8") -> str:
        # utf-8-sig drops the BOM some upstream CSV exports carry
        if encoding == "utf-8":
            encoding = "utf-8-sig"
        return self.read_raw(key).decode(encoding)


class LocalStorageAdapter(StorageAdapter):
    """
    Filesystem-backed adapter; keys are relative paths under `root_dir`.

        root_dir = Path(".")
        key      = "public/data/world.json"
        -> ./public/data/world.json
    """

    def __init__(self, root_dir: Path | str = ".") -> None:
        self.root_dir = Path(root_dir)

    def _resolve(self, key: str) -> Path:
        return self.root_dir / key.lstrip("/")

    def _resolve_for_write(self, key: str) -> Path:
        path = self._resolve(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    def read_raw(self, key: str) -> bytes:
        with self._resolve(key).open("rb") as f:
            return f.read()

    def write_raw(self, key: str, content: bytes) -> str:
        path = self._resolve_for_write(key)
        with path.open("wb") as f:
            f.write(content)
        return str(path)

    def write_parquet(self, df: pd.DataFrame, key: str) -> str:
        path = self._resolve_for_write(key)
        df.to_parquet(path, index=False)
        return str(path)

    def exists(self, key: str) -> bool:
        return self._resolve(key).is_file()


class S3StorageAdapter(StorageAdapter):
    """
    S3-backed adapter using boto3.

    Keys map to object keys under the configured bucket and optional base
    prefix.
    """

    def __init__(
        self,
        bucket: str,
        *,
        base_prefix: Optional[str] = None,
        boto3_client: Optional["boto3.client"] = None,
    ) -> None:
        if boto3_client is None:
            import boto3  # lazy import so local runs do not need AWS credentials

            boto3_client = boto3.client("s3")

        self.bucket = bucket
        self.base_prefix = (base_prefix or "").strip("/")
        self._s3 = boto3_client

    def _full_key(self, key: str) -> str:
        key = key.lstrip("/")
        if self.base_prefix:
            return f"{self.base_prefix}/{key}"
        return key

    def read_raw(self, key: str) -> bytes:
        resp = self._s3.get_object(Bucket=self.bucket, Key=self._full_key(key))
        return resp["Body"].read()

    def write_raw(self, key: str, content: bytes) -> str:
        full_key = self._full_key(key)
        self._s3.put_object(Bucket=self.bucket, Key=full_key, Body=content)
        return f"s3://{self.bucket}/{full_key}"

    def write_parquet(self, df: pd.DataFrame, key: str) -> str:
        buffer = io.BytesIO()
        df.to_parquet(buffer, index=False)
        return self.write_raw(key, buffer.getvalue())

    def exists(self, key: str) -> bool:
        resp = self._s3.list_objects_v2(
            Bucket=self.bucket,
            Prefix=self._full_key(key),
            MaxKeys=1,
        )
        contents = resp.get("Contents") or []
        return any(obj.get("Key") == self._full_key(key) for obj in contents)


__all__ = ["StorageAdapter", "LocalStorageAdapter", "S3StorageAdapter"]
