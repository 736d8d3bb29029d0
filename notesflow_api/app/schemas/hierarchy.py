"""
Pydantic models for the content hierarchy.

Each level has a ``<Level>Create`` model (the client payload) and a
``<Level>Read`` model (what the API returns).  Clients may pass their
own ``id`` on create; otherwise the service assigns a UUID.  The
``created_at`` timestamp is always assigned by the server.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

NoteType = Literal["pdf", "img", "video", "text"]

# Inline text notes and URLs share the ``note_url`` field.
MAX_NOTE_PAYLOAD = 10 * 1024 * 1024

_create_config = {"str_strip_whitespace": True}
_read_config = {"from_attributes": True}


class BranchCreate(BaseModel):
    model_config = _create_config

    id: Optional[str] = Field(None, min_length=1, max_length=64)
    branch_name: str = Field(..., min_length=1, max_length=200, examples=["Computer Science (CSE)"])


class BranchRead(BaseModel):
    model_config = _read_config

    id: str
    branch_name: str
    created_at: str


class SectionCreate(BaseModel):
    model_config = _create_config

    id: Optional[str] = Field(None, min_length=1, max_length=64)
    branch_id: str = Field(..., min_length=1)
    section_name: str = Field(..., min_length=1, max_length=200, examples=["Section A"])


class SectionRead(BaseModel):
    model_config = _read_config

    id: str
    branch_id: str
    section_name: str
    created_at: str


class SubjectCreate(BaseModel):
    model_config = _create_config

    id: Optional[str] = Field(None, min_length=1, max_length=64)
    section_id: str = Field(..., min_length=1)
    subject_name: str = Field(..., min_length=1, max_length=200, examples=["Data Structures"])


class SubjectRead(BaseModel):
    model_config = _read_config

    id: str
    section_id: str
    subject_name: str
    created_at: str


class UnitCreate(BaseModel):
    model_config = _create_config

    id: Optional[str] = Field(None, min_length=1, max_length=64)
    subject_id: str = Field(..., min_length=1)
    unit_title: str = Field(..., min_length=1, max_length=200, examples=["Unit 1: Introduction to Arrays"])


class UnitRead(BaseModel):
    model_config = _read_config

    id: str
    subject_id: str
    unit_title: str
    created_at: str


class TopicCreate(BaseModel):
    model_config = _create_config

    id: Optional[str] = Field(None, min_length=1, max_length=64)
    unit_id: str = Field(..., min_length=1)
    topic_title: str = Field(..., min_length=1, max_length=200, examples=["Array Basics"])
    description: Optional[str] = Field(None, max_length=2000)


class TopicRead(BaseModel):
    model_config = _read_config

    id: str
    unit_id: str
    topic_title: str
    description: Optional[str] = None
    created_at: str


class NoteCreate(BaseModel):
    """Schema for adding a resource to a topic.

    ``note_url`` holds a link for pdf, img and video notes and the text
    itself for text notes.
    """

    model_config = _create_config

    id: Optional[str] = Field(None, min_length=1, max_length=64)
    topic_id: str = Field(..., min_length=1)
    note_type: NoteType = Field(..., examples=["video"])
    note_url: str = Field(..., min_length=1, max_length=MAX_NOTE_PAYLOAD)
    title: Optional[str] = Field(None, max_length=200)

    @model_validator(mode="after")
    def check_url_for_linked_types(self) -> "NoteCreate":
        if self.note_type != "text" and not self.note_url.lower().startswith(("http://", "https://")):
            raise ValueError(f"{self.note_type} notes require an http(s) URL")
        return self


class NoteRead(BaseModel):
    model_config = _read_config

    id: str
    topic_id: str
    note_type: NoteType
    note_url: str
    title: Optional[str] = None
    created_at: str


class DeleteResult(BaseModel):
    """Response body for DELETE requests."""

    success: bool = True
    deleted: int = Field(1, description="Number of records removed, descendants included")
