"""
JSON file store used when no database is available.

The whole data set lives in one JSON document shaped as
``{"branches": [...], "sections": [...], ...}``.  The file is created on
first access and, unless disabled, seeded with the demo hierarchy so a
fresh install has something to browse.  A process-wide lock serialises
read-modify-write cycles, and every write goes through a temporary file
followed by ``os.replace`` so a crash never leaves a truncated document.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .errors import ConflictError, StorageUnavailableError
from .storage import COLLECTIONS, BaseStore, check_fields, collection_schema

logger = logging.getLogger(__name__)

_LOCK = threading.RLock()


class JSONStore(BaseStore):
    """Store keeping every collection in a single JSON file."""

    name = "json"

    def __init__(self, path: str, seed_on_create: bool = True) -> None:
        self.path = Path(path)
        self.seed_on_create = seed_on_create

    # ------------------------------------------------------------------
    # File handling
    # ------------------------------------------------------------------
    def _empty(self) -> Dict[str, List[Dict[str, Any]]]:
        data: Dict[str, List[Dict[str, Any]]] = {name: [] for name in COLLECTIONS}
        if self.seed_on_create:
            from ..services.seed import demo_data

            for collection, records in demo_data().items():
                data[collection].extend(records)
        return data

    def _load(self) -> Dict[str, List[Dict[str, Any]]]:
        if not self.path.exists():
            data = self._empty()
            self._save(data)
            logger.info("Created local store at %s", self.path)
            return data
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Cannot read local store %s: %s", self.path, exc)
            raise StorageUnavailableError() from exc
        for name in COLLECTIONS:
            data.setdefault(name, [])
        return data

    def _save(self, data: Dict[str, List[Dict[str, Any]]]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            logger.error("Cannot write local store %s: %s", self.path, exc)
            raise StorageUnavailableError() from exc

    # ------------------------------------------------------------------
    # BaseStore API
    # ------------------------------------------------------------------
    def initialise(self) -> None:
        with _LOCK:
            self._load()

    def list(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        collection_schema(collection)
        filters = {k: v for k, v in (filters or {}).items() if v is not None}
        check_fields(collection, filters)
        with _LOCK:
            records = self._load()[collection]
        return [
            copy.deepcopy(record)
            for record in records
            if all(record.get(field) == value for field, value in filters.items())
        ]

    def get(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        key_field, _ = collection_schema(collection)
        with _LOCK:
            for record in self._load()[collection]:
                if record.get(key_field) == key:
                    return copy.deepcopy(record)
        return None

    def insert(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        key_field, columns = collection_schema(collection)
        values = {column: record.get(column) for column in columns}
        with _LOCK:
            data = self._load()
            if any(existing.get(key_field) == values[key_field] for existing in data[collection]):
                raise ConflictError(f"{collection} record {values[key_field]} already exists")
            data[collection].append(values)
            self._save(data)
        return copy.deepcopy(values)

    def delete(self, collection: str, key: str) -> bool:
        key_field, _ = collection_schema(collection)
        with _LOCK:
            data = self._load()
            remaining = [r for r in data[collection] if r.get(key_field) != key]
            removed = len(remaining) != len(data[collection])
            if removed:
                data[collection] = remaining
                self._save(data)
        return removed

    def delete_where(self, collection: str, field: str, values: Iterable[str]) -> int:
        check_fields(collection, [field])
        targets = set(values)
        if not targets:
            return 0
        with _LOCK:
            data = self._load()
            remaining = [r for r in data[collection] if r.get(field) not in targets]
            removed = len(data[collection]) - len(remaining)
            if removed:
                data[collection] = remaining
                self._save(data)
        return removed
