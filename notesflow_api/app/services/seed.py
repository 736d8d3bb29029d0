"""
Initial data for a fresh store.

``demo_data`` returns a small but complete hierarchy (two branches down
to two notes) so a new installation has something to browse.
``seed_store`` is run at startup: it creates the administrator account
from settings and, when requested, inserts the demo hierarchy into an
empty store.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from notesflow_api.app.core.config import settings
from notesflow_api.app.core.db import utc_now
from notesflow_api.app.core.errors import ConflictError
from notesflow_api.app.core.security import hash_password
from notesflow_api.app.core.storage import BaseStore

logger = logging.getLogger(__name__)


def demo_data() -> Dict[str, List[Dict[str, Any]]]:
    """Return a fresh copy of the demo hierarchy, keyed by collection."""
    now = utc_now()
    return {
        "branches": [
            {"id": "b1", "branch_name": "Computer Science (CSE)", "created_at": now},
            {"id": "b2", "branch_name": "Mechanical (ME)", "created_at": now},
        ],
        "sections": [
            {"id": "s1", "branch_id": "b1", "section_name": "Section A", "created_at": now},
            {"id": "s2", "branch_id": "b1", "section_name": "Section B", "created_at": now},
        ],
        "subjects": [
            {"id": "sub1", "section_id": "s1", "subject_name": "Data Structures", "created_at": now},
            {"id": "sub2", "section_id": "s1", "subject_name": "Operating Systems", "created_at": now},
        ],
        "units": [
            {"id": "u1", "subject_id": "sub1", "unit_title": "Unit 1: Introduction to Arrays", "created_at": now},
            {"id": "u2", "subject_id": "sub1", "unit_title": "Unit 2: Linked Lists", "created_at": now},
        ],
        "topics": [
            {
                "id": "t1",
                "unit_id": "u1",
                "topic_title": "Array Basics",
                "description": "Definition and memory allocation",
                "created_at": now,
            },
            {
                "id": "t2",
                "unit_id": "u1",
                "topic_title": "Multi-dimensional Arrays",
                "description": "Matrices and vectors",
                "created_at": now,
            },
        ],
        "notes": [
            {
                "id": "n1",
                "topic_id": "t1",
                "note_type": "text",
                "note_url": "Arrays are contiguous memory blocks.",
                "title": "Lecture Summary",
                "created_at": now,
            },
            {
                "id": "n2",
                "topic_id": "t1",
                "note_type": "video",
                "note_url": "https://www.youtube.com/watch?v=RBSGKlAvoiM",
                "title": "Array Visualizer",
                "created_at": now,
            },
        ],
    }


def seed_store(store: BaseStore) -> None:
    """Create the configured admin and, if enabled, the demo hierarchy."""
    if settings.admin_password:
        email = settings.admin_email.strip().lower()
        if store.get("admins", email) is None:
            store.insert(
                "admins",
                {"email": email, "password": hash_password(settings.admin_password), "created_at": utc_now()},
            )
            logger.info("Created admin account %s", email)

    if settings.seed_demo_data and not store.list("branches"):
        for collection, records in demo_data().items():
            for record in records:
                try:
                    store.insert(collection, record)
                except ConflictError:
                    logger.debug("Demo record %s/%s already present", collection, record["id"])
        logger.info("Seeded demo hierarchy into %s store", store.name)
