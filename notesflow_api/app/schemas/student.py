"""
Pydantic schemas for students and the student dashboard.

A student is identified by a University Seat Number (USN) and belongs
to exactly one branch and section.  The dashboard is the nested
subject → unit → topic → note tree of that section.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .hierarchy import NoteType

USN_PATTERN = r"^[0-9A-Za-z]{5,}$"


class StudentCreate(BaseModel):
    """Schema for registering a student (admin only)."""

    model_config = {"str_strip_whitespace": True}

    usn: str = Field(..., pattern=USN_PATTERN, max_length=32, examples=["02JST24UCS043"])
    branch_id: str = Field(..., min_length=1)
    section_id: str = Field(..., min_length=1)

    @field_validator("usn")
    @classmethod
    def normalise_usn(cls, v: str) -> str:
        return v.upper()


class StudentRead(BaseModel):
    model_config = {"from_attributes": True}

    usn: str
    branch_id: str
    section_id: str
    created_at: Optional[str] = None


class DashboardNote(BaseModel):
    id: str
    note_type: NoteType
    note_url: str
    title: Optional[str] = None
    created_at: str


class DashboardTopic(BaseModel):
    id: str
    topic_title: str
    description: Optional[str] = None
    notes: List[DashboardNote] = []


class DashboardUnit(BaseModel):
    id: str
    unit_title: str
    topics: List[DashboardTopic] = []


class DashboardSubject(BaseModel):
    id: str
    subject_name: str
    units: List[DashboardUnit] = []


class StudentDashboard(BaseModel):
    """Everything a student sees after logging in."""

    student: StudentRead
    branch_name: Optional[str] = None
    section_name: Optional[str] = None
    search: Optional[str] = None
    subjects: List[DashboardSubject] = []
    expanded_unit_ids: List[str] = Field(
        default_factory=list,
        description="Units to show expanded; every unit left after a non-empty search",
    )
