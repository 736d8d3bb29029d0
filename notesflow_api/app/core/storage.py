"""
Storage backends for the NotesFlow collections.

Every collection is a flat list of records (plain dictionaries) keyed
by a single field.  ``BaseStore`` defines the handful of operations the
service layer needs; ``SQLiteStore`` implements them on top of
``core.db`` and ``JSONStore`` (see ``core.local_store``) on top of a
JSON file that mirrors the database when no server-side store is
available.

``get_store`` picks the backend named by ``settings.storage_backend``.
Stores are cheap to construct and read the settings on every call, so
tests can repoint them with ``monkeypatch``.
"""

from __future__ import annotations

import logging
import sqlite3
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .config import settings
from .db import get_cursor, init_db, resolve_path
from .errors import ConflictError, StorageUnavailableError

logger = logging.getLogger(__name__)


# collection name -> (key field, columns)
COLLECTIONS: Dict[str, Tuple[str, Tuple[str, ...]]] = {
    "branches": ("id", ("id", "branch_name", "created_at")),
    "sections": ("id", ("id", "branch_id", "section_name", "created_at")),
    "subjects": ("id", ("id", "section_id", "subject_name", "created_at")),
    "units": ("id", ("id", "subject_id", "unit_title", "created_at")),
    "topics": ("id", ("id", "unit_id", "topic_title", "description", "created_at")),
    "notes": ("id", ("id", "topic_id", "note_type", "note_url", "title", "created_at")),
    "students": ("usn", ("usn", "branch_id", "section_id", "created_at")),
    "admins": ("email", ("email", "password", "created_at")),
}


def collection_schema(collection: str) -> Tuple[str, Tuple[str, ...]]:
    """Return ``(key_field, columns)`` for ``collection``.

    Raises ``ValueError`` for unknown collections so that no
    caller-supplied name ever reaches an SQL statement.
    """
    try:
        return COLLECTIONS[collection]
    except KeyError:
        raise ValueError(f"Unknown collection: {collection}") from None


def check_fields(collection: str, fields: Iterable[str]) -> None:
    _, columns = collection_schema(collection)
    for field in fields:
        if field not in columns:
            raise ValueError(f"Unknown field {field!r} for collection {collection}")


class BaseStore(ABC):
    """Interface shared by all storage backends."""

    name: str = "base"

    @abstractmethod
    def initialise(self) -> None:
        """Prepare the backend (apply migrations, create files)."""

    @abstractmethod
    def list(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Return all records of ``collection`` whose fields equal ``filters``."""

    @abstractmethod
    def get(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        """Return the record with the given key or ``None``."""

    @abstractmethod
    def insert(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert ``record`` and return it.

        Raises ``ConflictError`` if a record with the same key exists.
        """

    @abstractmethod
    def delete(self, collection: str, key: str) -> bool:
        """Delete one record; return ``True`` if something was removed."""

    @abstractmethod
    def delete_where(self, collection: str, field: str, values: Iterable[str]) -> int:
        """Delete every record whose ``field`` is in ``values``; return the count."""


class SQLiteStore(BaseStore):
    """Store backed by the SQLite database configured in settings."""

    name = "sqlite"

    def initialise(self) -> None:
        init_db()

    def list(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        _, columns = collection_schema(collection)
        filters = {k: v for k, v in (filters or {}).items() if v is not None}
        check_fields(collection, filters)
        query = f"SELECT {', '.join(columns)} FROM {collection}"
        if filters:
            query += " WHERE " + " AND ".join(f"{field} = ?" for field in filters)
        with get_cursor() as cursor:
            rows = cursor.execute(query, tuple(filters.values())).fetchall()
        return [dict(row) for row in rows]

    def get(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        key_field, columns = collection_schema(collection)
        with get_cursor() as cursor:
            row = cursor.execute(
                f"SELECT {', '.join(columns)} FROM {collection} WHERE {key_field} = ?",
                (key,),
            ).fetchone()
        return dict(row) if row else None

    def insert(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        key_field, columns = collection_schema(collection)
        values = {column: record.get(column) for column in columns}
        placeholders = ", ".join("?" for _ in columns)
        try:
            with get_cursor() as cursor:
                cursor.execute(
                    f"INSERT INTO {collection} ({', '.join(columns)}) VALUES ({placeholders})",
                    tuple(values.values()),
                )
        except sqlite3.IntegrityError as exc:
            raise ConflictError(f"{collection} record {values[key_field]} already exists") from exc
        return values

    def delete(self, collection: str, key: str) -> bool:
        key_field, _ = collection_schema(collection)
        with get_cursor() as cursor:
            cursor.execute(f"DELETE FROM {collection} WHERE {key_field} = ?", (key,))
            return cursor.rowcount > 0

    def delete_where(self, collection: str, field: str, values: Iterable[str]) -> int:
        check_fields(collection, [field])
        values = list(values)
        if not values:
            return 0
        placeholders = ", ".join("?" for _ in values)
        with get_cursor() as cursor:
            cursor.execute(
                f"DELETE FROM {collection} WHERE {field} IN ({placeholders})",
                tuple(values),
            )
            return cursor.rowcount


def get_store() -> BaseStore:
    """Return the store selected by ``settings.storage_backend``."""
    backend = settings.storage_backend.strip().lower()
    if backend == "sqlite":
        return SQLiteStore()
    if backend == "json":
        from .local_store import JSONStore

        if not settings.local_store_path:
            raise StorageUnavailableError()
        return JSONStore(resolve_path(settings.local_store_path))
    logger.error("Unknown storage backend %r", settings.storage_backend)
    raise StorageUnavailableError()
