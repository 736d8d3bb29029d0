"""
The SQLite database behind ``SQLiteStore``.

One connection is opened per operation through ``get_cursor``.  The
schema is versioned: ``MIGRATIONS`` lists numbered SQL scripts and
``init_db`` runs those newer than the highest version recorded in the
``migrations`` table.  Parent
keys are plain indexed columns rather than ``REFERENCES`` clauses:
each level of the hierarchy is deleted independently, and parent
existence is checked by the service layer on insert.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from .config import settings
from .errors import StorageUnavailableError

logger = logging.getLogger(__name__)

# Directory containing the ``notesflow_api`` package.
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent


def resolve_path(path: str) -> str:
    """Return ``path`` unchanged if absolute, else resolve it against the project root."""
    if os.path.isabs(path):
        return path
    return str((PROJECT_ROOT / path).resolve())


def get_database_path() -> str:
    """Filesystem path of the database named by ``DATABASE_URL``.

    Raises ``StorageUnavailableError`` when ``settings.database_url`` is
    empty, i.e. no connection string has been configured.
    """
    db_url = settings.database_url.strip()
    if not db_url:
        raise StorageUnavailableError()
    if db_url.startswith("sqlite:///"):
        db_url = db_url[len("sqlite:///"):]
    return resolve_path(db_url)


def get_connection() -> sqlite3.Connection:
    """Open the database with ``sqlite3.Row`` rows.

    Timestamps are ISO strings and come back unchanged.
    """
    db_path = get_database_path()
    try:
        conn = sqlite3.connect(db_path)
    except sqlite3.Error as exc:
        logger.error("Cannot open database %s: %s", db_path, exc)
        raise StorageUnavailableError() from exc
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Yield a cursor; commit on success, roll back on error, always close."""
    conn = get_connection()
    try:
        with conn:
            yield conn.cursor()
    finally:
        conn.close()


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: the content hierarchy
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS branches (
            id TEXT PRIMARY KEY,
            branch_name TEXT NOT NULL,
            created_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS sections (
            id TEXT PRIMARY KEY,
            branch_id TEXT NOT NULL,
            section_name TEXT NOT NULL,
            created_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS subjects (
            id TEXT PRIMARY KEY,
            section_id TEXT NOT NULL,
            subject_name TEXT NOT NULL,
            created_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS units (
            id TEXT PRIMARY KEY,
            subject_id TEXT NOT NULL,
            unit_title TEXT NOT NULL,
            created_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS topics (
            id TEXT PRIMARY KEY,
            unit_id TEXT NOT NULL,
            topic_title TEXT NOT NULL,
            description TEXT,
            created_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS notes (
            id TEXT PRIMARY KEY,
            topic_id TEXT NOT NULL,
            note_type TEXT NOT NULL,
            note_url TEXT NOT NULL,
            title TEXT,
            created_at TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_sections_branch_id ON sections(branch_id);
        CREATE INDEX IF NOT EXISTS idx_subjects_section_id ON subjects(section_id);
        CREATE INDEX IF NOT EXISTS idx_units_subject_id ON units(subject_id);
        CREATE INDEX IF NOT EXISTS idx_topics_unit_id ON topics(unit_id);
        CREATE INDEX IF NOT EXISTS idx_notes_topic_id ON notes(topic_id);
        """,
    ),
    # Migration 2: students and administrators
    (
        2,
        """
        CREATE TABLE IF NOT EXISTS students (
            usn TEXT PRIMARY KEY,
            branch_id TEXT NOT NULL,
            section_id TEXT NOT NULL,
            created_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS admins (
            email TEXT PRIMARY KEY,
            password TEXT NOT NULL,
            created_at TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_students_section_id ON students(section_id);
        """,
    ),
]


def utc_now() -> str:
    """Current UTC time as an ISO‑8601 string."""
    return datetime.now(timezone.utc).isoformat()


def schema_version(cursor: sqlite3.Cursor) -> int:
    """Highest applied migration, 0 for a fresh database."""
    cursor.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
    return cursor.execute("SELECT COALESCE(MAX(version), 0) FROM migrations").fetchone()[0]


def init_db() -> None:
    """Bring the schema up to date.

    Only tables are created here; the admin account and the demo data
    are inserted through the store by ``services.seed``.
    """
    with get_cursor() as cursor:
        applied = schema_version(cursor)
        pending = [(v, sql) for v, sql in MIGRATIONS if v > applied]
        for version, sql in pending:
            cursor.executescript(sql)
            cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
            logger.info("Applied migration %d to %s", version, get_database_path())
