"""
Substring filter for the student dashboard tree.

The dashboard shows subjects → units → topics.  A search term narrows
that tree without losing context: a subject whose name matches keeps
all of its units, a unit whose title matches keeps all of its topics,
and otherwise only the matching descendants survive.  Matching is a
case-insensitive substring test.  Notes are never matched; they travel
with their topic.
"""

from __future__ import annotations

from typing import List, Optional

from notesflow_api.app.schemas.student import DashboardSubject, DashboardUnit


def _matches(text: Optional[str], needle: str) -> bool:
    return needle in (text or "").lower()


def filter_hierarchy(subjects: List[DashboardSubject], term: Optional[str]) -> List[DashboardSubject]:
    """Return the part of ``subjects`` relevant to ``term``.

    A blank or missing term returns the input unchanged.  The input
    models are never mutated; narrowed nodes are copies.
    """
    if not term or not term.strip():
        return subjects
    needle = term.strip().lower()

    result: List[DashboardSubject] = []
    for subject in subjects:
        if _matches(subject.subject_name, needle):
            result.append(subject)
            continue
        units: List[DashboardUnit] = []
        for unit in subject.units:
            if _matches(unit.unit_title, needle):
                units.append(unit)
                continue
            topics = [t for t in unit.topics if _matches(t.topic_title, needle)]
            if topics:
                units.append(unit.model_copy(update={"topics": topics}))
        if units:
            result.append(subject.model_copy(update={"units": units}))
    return result


def expanded_unit_ids(subjects: List[DashboardSubject]) -> List[str]:
    """Ids of every unit in ``subjects``, in display order."""
    return [unit.id for subject in subjects for unit in subject.units]
