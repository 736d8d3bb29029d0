"""
Pytest configuration and shared fixtures for NotesFlow tests.
"""

import sys
from pathlib import Path
from typing import Dict

import pytest
from fastapi.testclient import TestClient

# Make the project root importable without installing it.
sys.path.insert(0, str(Path(__file__).parent.parent))

from notesflow_api.app.core.config import settings  # noqa: E402
from notesflow_api.app.core.security import ROLE_ADMIN, ROLE_STUDENT, create_access_token  # noqa: E402
from notesflow_api.app.main import create_app  # noqa: E402

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse-battery"


@pytest.fixture
def configured(tmp_path, monkeypatch):
    """Point every setting at ``tmp_path`` and enable the demo data."""
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "notesflow.db"))
    monkeypatch.setattr(settings, "local_store_path", str(tmp_path / "notesflow_local.json"))
    monkeypatch.setattr(settings, "storage_backend", "sqlite")
    monkeypatch.setattr(settings, "seed_demo_data", True)
    monkeypatch.setattr(settings, "admin_email", ADMIN_EMAIL)
    monkeypatch.setattr(settings, "admin_password", ADMIN_PASSWORD)
    monkeypatch.setattr(settings, "secret_key", "test-secret")
    return settings


@pytest.fixture(params=["sqlite", "json"])
def backend(request, configured, monkeypatch) -> str:
    """Run a test once per storage backend."""
    monkeypatch.setattr(settings, "storage_backend", request.param)
    return request.param


@pytest.fixture
def client(backend):
    with TestClient(create_app()) as c:
        yield c


def bearer(sub: str, role: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': sub, 'role': role})}"}


@pytest.fixture
def admin_headers(configured) -> Dict[str, str]:
    return bearer(ADMIN_EMAIL, ROLE_ADMIN)


@pytest.fixture
def student_headers(configured):
    """Factory returning auth headers for a student USN."""
    return lambda usn: bearer(usn.upper(), ROLE_STUDENT)
