"""
Service layer for students and their dashboard.

Students are registered by an administrator with a USN, a branch and a
section.  They log in with the USN alone and see the notes of their own
section only.  ``build_dashboard`` assembles the nested subject → unit →
topic → note tree for that section and narrows it with the dashboard
search term.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from typing import Dict, List, Optional

from notesflow_api.app.core.db import utc_now
from notesflow_api.app.core.errors import NotFoundError, ParentNotFoundError
from notesflow_api.app.core.storage import get_store
from notesflow_api.app.schemas.student import (
    USN_PATTERN,
    DashboardNote,
    DashboardSubject,
    DashboardTopic,
    DashboardUnit,
    StudentCreate,
    StudentDashboard,
    StudentRead,
)
from notesflow_api.app.services.search import expanded_unit_ids, filter_hierarchy

logger = logging.getLogger(__name__)

_USN_RE = re.compile(USN_PATTERN)


class InvalidUSNError(ValueError):
    """The supplied USN does not look like a University Seat Number."""


def normalise_usn(usn: str) -> str:
    """Validate ``usn`` and return it upper-cased.

    Raises ``InvalidUSNError`` for anything other than five or more
    letters and digits.
    """
    usn = (usn or "").strip()
    if not _USN_RE.match(usn):
        raise InvalidUSNError("Invalid USN format.")
    return usn.upper()


class StudentService:
    """Service class for the student roster and dashboards."""

    @classmethod
    async def list_students(
        cls,
        branch_id: Optional[str] = None,
        section_id: Optional[str] = None,
    ) -> List[StudentRead]:
        records = get_store().list("students", {"branch_id": branch_id, "section_id": section_id})
        return [StudentRead(**r) for r in sorted(records, key=lambda r: r["usn"])]

    @classmethod
    async def get_student(cls, usn: str) -> Optional[StudentRead]:
        record = get_store().get("students", usn.upper())
        return StudentRead(**record) if record else None

    @classmethod
    async def create_student(cls, data: StudentCreate) -> StudentRead:
        """Register a student in an existing section of an existing branch."""
        store = get_store()
        if store.get("branches", data.branch_id) is None:
            raise ParentNotFoundError(f"Branch {data.branch_id} not found")
        section = store.get("sections", data.section_id)
        if section is None:
            raise ParentNotFoundError(f"Section {data.section_id} not found")
        if section["branch_id"] != data.branch_id:
            raise ParentNotFoundError(
                f"Section {data.section_id} does not belong to branch {data.branch_id}"
            )
        record = store.insert(
            "students",
            {
                "usn": data.usn,
                "branch_id": data.branch_id,
                "section_id": data.section_id,
                "created_at": utc_now(),
            },
        )
        logger.info("Registered student %s in section %s", data.usn, data.section_id)
        return StudentRead(**record)

    @classmethod
    async def delete_student(cls, usn: str) -> None:
        if not get_store().delete("students", usn.upper()):
            raise NotFoundError("Student not found")
        logger.info("Removed student %s", usn.upper())

    @classmethod
    async def authenticate_student(cls, usn: str) -> Optional[StudentRead]:
        """Look a student up by USN.

        Raises ``InvalidUSNError`` for malformed input; returns ``None``
        when the USN is well formed but unknown.
        """
        return await cls.get_student(normalise_usn(usn))

    @classmethod
    async def build_dashboard(cls, usn: str, search: Optional[str] = None) -> StudentDashboard:
        """Return the content tree of the student's section, filtered by ``search``."""
        student = await cls.get_student(usn)
        if student is None:
            raise NotFoundError("Student not found")

        store = get_store()
        branch = store.get("branches", student.branch_id)
        section = store.get("sections", student.section_id)

        subjects = sorted(
            store.list("subjects", {"section_id": student.section_id}),
            key=lambda r: r["subject_name"].casefold(),
        )
        subject_ids = {s["id"] for s in subjects}
        units = [u for u in store.list("units") if u["subject_id"] in subject_ids]
        unit_ids = {u["id"] for u in units}
        topics = [t for t in store.list("topics") if t["unit_id"] in unit_ids]
        topic_ids = {t["id"] for t in topics}
        notes = [n for n in store.list("notes") if n["topic_id"] in topic_ids]

        notes_by_topic: Dict[str, List[DashboardNote]] = defaultdict(list)
        for note in sorted(notes, key=lambda r: r["created_at"]):
            notes_by_topic[note["topic_id"]].append(DashboardNote(**note))

        topics_by_unit: Dict[str, List[DashboardTopic]] = defaultdict(list)
        for topic in sorted(topics, key=lambda r: r["topic_title"].casefold()):
            topics_by_unit[topic["unit_id"]].append(
                DashboardTopic(
                    id=topic["id"],
                    topic_title=topic["topic_title"],
                    description=topic.get("description"),
                    notes=notes_by_topic[topic["id"]],
                )
            )

        units_by_subject: Dict[str, List[DashboardUnit]] = defaultdict(list)
        for unit in sorted(units, key=lambda r: r["unit_title"].casefold()):
            units_by_subject[unit["subject_id"]].append(
                DashboardUnit(id=unit["id"], unit_title=unit["unit_title"], topics=topics_by_unit[unit["id"]])
            )

        tree = [
            DashboardSubject(id=s["id"], subject_name=s["subject_name"], units=units_by_subject[s["id"]])
            for s in subjects
        ]
        filtered = filter_hierarchy(tree, search)
        searching = bool(search and search.strip())
        return StudentDashboard(
            student=student,
            branch_name=branch["branch_name"] if branch else None,
            section_name=section["section_name"] if section else None,
            search=search.strip() if searching else None,
            subjects=filtered,
            expanded_unit_ids=expanded_unit_ids(filtered) if searching else [],
        )
