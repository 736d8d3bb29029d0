"""
Drill-down navigation over the content hierarchy.

Administrators browse the hierarchy one level at a time: the list of
branches, then the sections of one branch, and so on down to the notes
of one topic.  ``HierarchyNavigator`` keeps that position: the current
level, the id of the parent whose children are being listed, and the
breadcrumb trail that led there.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

LEVELS: List[str] = ["branches", "sections", "subjects", "units", "topics", "notes"]

# Level shown after drilling into an item of the given level.  ``notes``
# is terminal.
NEXT_LEVEL: Dict[str, str] = {level: LEVELS[min(i + 1, len(LEVELS) - 1)] for i, level in enumerate(LEVELS)}

# Query parameter naming the parent when listing a level.
PARENT_PARAM: Dict[str, Optional[str]] = {
    "branches": None,
    "sections": "branch_id",
    "subjects": "section_id",
    "units": "subject_id",
    "topics": "unit_id",
    "notes": "topic_id",
}


@dataclass
class Crumb:
    id: str
    name: str
    level: str


@dataclass
class HierarchyNavigator:
    """Current position in the branch → … → note tree."""

    current_level: str = "branches"
    parent_id: Optional[str] = None
    path: List[Crumb] = field(default_factory=list)

    @property
    def at_root(self) -> bool:
        return not self.path

    @property
    def at_leaf(self) -> bool:
        return self.current_level == "notes"

    @property
    def parent_param(self) -> Optional[str]:
        return PARENT_PARAM[self.current_level]

    def drill_down(self, item_id: str, name: str) -> bool:
        """Open ``item_id`` (an item of the current level).

        Returns ``False`` and leaves the state untouched at the notes
        level, which has nothing below it.
        """
        if self.at_leaf:
            return False
        self.path.append(Crumb(id=item_id, name=name, level=self.current_level))
        self.parent_id = item_id
        self.current_level = NEXT_LEVEL[self.current_level]
        return True

    def go_back(self) -> bool:
        """Return to the previous level; ``False`` if already at the root."""
        if not self.path:
            return False
        self.path.pop()
        if not self.path:
            self.reset()
        else:
            last = self.path[-1]
            self.current_level = NEXT_LEVEL[last.level]
            self.parent_id = last.id
        return True

    def reset(self) -> None:
        self.current_level = "branches"
        self.parent_id = None
        self.path.clear()

    def breadcrumbs(self, separator: str = " / ") -> str:
        return separator.join(["Branches"] + [crumb.name for crumb in self.path])
