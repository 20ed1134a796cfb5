from __future__ import annotations

import json
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from .storage import StorageAdapter

# Default logical key of the JSON document holding run records
DEFAULT_METADATA_KEY = "metadata/world_cases_runs.json"


def _now_utc_iso() -> str:
    """Return current UTC time in ISO 8601 format."""
    return datetime.now(timezone.utc).isoformat()


class MetadataAdapter(ABC):
    """
    Abstraction over the store that records pipeline runs.
    """

    @abstractmethod
    def start_run(self, run_scope: str) -> str:
        """Register the start of a run and return its identifier."""

    @abstractmethod
    def end_run(
        self,
        run_id: str,
        status: str = "SUCCESS",
        *,
        rows_processed: Optional[int] = None,
        last_date: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Mark a run as finished and return its final record."""

    @abstractmethod
    def list_runs(self, run_scope: Optional[str] = None) -> List[Dict[str, Any]]:
        """List runs, optionally filtered by scope, oldest first."""


class StorageMetadataAdapter(MetadataAdapter):
    """
    Run records kept as a single JSON document behind a StorageAdapter.

    Structure:
    {
      "runs": [
        {
          "run_id": str,
          "run_scope": str,
          "start_ts": str,
          "end_ts": Optional[str],
          "status": "RUNNING" | "SUCCESS" | "FAILED",
          "rows_processed": Optional[int],
          "last_date": Optional[str],
          "error_message": Optional[str]
        },
        ...
      ]
    }

    Works the same against local disk and S3, so both entrypoints share it.
    """

    def __init__(self, storage: StorageAdapter, key: str = DEFAULT_METADATA_KEY) -> None:
        self.storage = storage
        self.key = key

    def _load(self) -> Dict[str, Any]:
        if not self.storage.exists(self.key):
            return {"runs": []}
        try:
            data = json.loads(self.storage.read_text(self.key))
        except json.JSONDecodeError as exc:
            raise RuntimeError(f"Metadata document {self.key} is corrupted") from exc
        if not isinstance(data, dict) or not isinstance(data.get("runs", []), list):
            raise RuntimeError(f"Metadata document {self.key} has invalid structure")
        data.setdefault("runs", [])
        return data

    def _save(self, store: Dict[str, Any]) -> None:
        payload = json.dumps(store, indent=2, ensure_ascii=False)
        self.storage.write_raw(self.key, payload.encode("utf-8"))

    def start_run(self, run_scope: str) -> str:
        store = self._load()
        run_id = str(uuid4())
        store["runs"].append(
            {
                "run_id": run_id,
                "run_scope": run_scope,
                "start_ts": _now_utc_iso(),
                "end_ts": None,
                "status": "RUNNING",
                "rows_processed": None,
                "last_date": None,
                "error_message": None,
            }
        )
        self._save(store)
        return run_id

    def end_run(
        self,
        run_id: str,
        status: str = "SUCCESS",
        *,
        rows_processed: Optional[int] = None,
        last_date: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> Dict[str, Any]:
        store = self._load()
        target = next(
            (run for run in reversed(store["runs"]) if run.get("run_id") == run_id),
            None,
        )
        if target is None:
            raise KeyError(f"No run found with id={run_id!r}")

        target["end_ts"] = _now_utc_iso()
        target["status"] = status
        if rows_processed is not None:
            target["rows_processed"] = int(rows_processed)
        if last_date is not None:
            target["last_date"] = last_date
        if error_message is not None:
            target["error_message"] = error_message

        self._save(store)
        return target

    def list_runs(self, run_scope: Optional[str] = None) -> List[Dict[str, Any]]:
        runs: List[Dict[str, Any]] = self._load()["runs"]
        if run_scope is None:
            return list(runs)
        return [r for r in runs if r.get("run_scope") == run_scope]


__all__ = ["DEFAULT_METADATA_KEY", "MetadataAdapter", "StorageMetadataAdapter"]
