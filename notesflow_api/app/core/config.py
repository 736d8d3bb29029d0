"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts against a local SQLite file without any setup.  In a
production deployment you should override these via environment
variables.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "NotesFlow API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

    # Which store backs the collections: ``sqlite`` (the database) or
    # ``json`` (the local mirror file used when no database is available).
    storage_backend: str = os.getenv("STORAGE_BACKEND", "sqlite")

    # Path or connection string for the SQLite database.  A relative
    # path is resolved against the project root by the ``db`` module.
    # An empty value means no database is configured and every request
    # touching storage answers 500 "Database not connected".
    database_url: str = os.getenv("DATABASE_URL", "notesflow.db")

    # Location of the JSON local store.  Relative paths are resolved
    # like ``database_url``.
    local_store_path: str = os.getenv("LOCAL_STORE_PATH", "notesflow_local.json")

    # Populate an empty SQLite database with the demo hierarchy on
    # startup.  The JSON store is always seeded when its file is created.
    seed_demo_data: bool = _env_flag("SEED_DEMO_DATA")

    # Initial administrator account.  When ``admin_password`` is empty no
    # admin is seeded and one has to be created with
    # ``reset_admin_password.py``.
    admin_email: str = os.getenv("ADMIN_EMAIL", "admin@notesflow.local")
    admin_password: str = os.getenv("ADMIN_PASSWORD", "")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
