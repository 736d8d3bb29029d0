"""
Service layer for the six levels of the content hierarchy.

All levels share one shape: a string ``id``, a key pointing at the
parent level, a display field and a ``created_at`` timestamp.  The
``HierarchyService`` base class implements list / get / create /
delete once; one subclass per level only declares which collection,
parent and schema it works with.

Referential integrity is checked on insert only: a record can only be
created under an existing parent.  Deletes remove a single record
unless ``cascade`` is requested, in which case the whole subtree below
it goes too.
"""

from __future__ import annotations

import logging
import uuid
from typing import List, Optional, Type

from pydantic import BaseModel

from notesflow_api.app.core.db import utc_now
from notesflow_api.app.core.errors import NotFoundError, ParentNotFoundError
from notesflow_api.app.core.storage import get_store
from notesflow_api.app.schemas.hierarchy import (
    BranchRead,
    NoteRead,
    SectionRead,
    SubjectRead,
    TopicRead,
    UnitRead,
)

logger = logging.getLogger(__name__)


class HierarchyService:
    """Generic CRUD for one level of the hierarchy.

    Subclasses set:

    * ``collection`` – storage collection name;
    * ``label`` – human readable name used in messages;
    * ``parent_field`` – the foreign key column (``None`` for the root);
    * ``name_field`` – the display field;
    * ``order_by`` – field listings are sorted on;
    * ``read_schema`` – Pydantic model returned to callers;
    * ``parent`` / ``child`` – neighbouring services.
    """

    collection: str = ""
    label: str = ""
    parent_field: Optional[str] = None
    name_field: str = ""
    order_by: str = "created_at"
    read_schema: Type[BaseModel] = BaseModel
    parent: Optional[Type["HierarchyService"]] = None
    child: Optional[Type["HierarchyService"]] = None

    @classmethod
    def _sort_key(cls, record: dict) -> str:
        value = record.get(cls.order_by) or ""
        return value.casefold() if cls.order_by != "created_at" else value

    @classmethod
    async def list_items(cls, parent_id: Optional[str] = None) -> List[BaseModel]:
        """Return all records, or only the children of ``parent_id`` when given."""
        store = get_store()
        filters = {cls.parent_field: parent_id} if cls.parent_field and parent_id is not None else None
        records = sorted(store.list(cls.collection, filters), key=cls._sort_key)
        return [cls.read_schema(**record) for record in records]

    @classmethod
    async def get_item(cls, item_id: str) -> BaseModel:
        """Return a single record or raise ``NotFoundError``."""
        record = get_store().get(cls.collection, item_id)
        if record is None:
            raise NotFoundError(f"{cls.label} not found")
        return cls.read_schema(**record)

    @classmethod
    async def create_item(cls, data: BaseModel) -> BaseModel:
        """Insert a new record below an existing parent.

        The caller's ``id`` is kept when supplied, otherwise a UUID4 is
        generated.  Raises ``ParentNotFoundError`` when the parent does
        not exist and ``ConflictError`` when the id is taken.
        """
        store = get_store()
        payload = data.model_dump()
        if cls.parent is not None and cls.parent_field:
            parent_id = payload.get(cls.parent_field)
            if store.get(cls.parent.collection, parent_id) is None:
                raise ParentNotFoundError(f"{cls.parent.label} {parent_id} not found")
        payload["id"] = payload.get("id") or str(uuid.uuid4())
        payload["created_at"] = utc_now()
        record = store.insert(cls.collection, payload)
        logger.info("Created %s %s (%s)", cls.label.lower(), record["id"], record.get(cls.name_field))
        return cls.read_schema(**record)

    @classmethod
    async def delete_item(cls, item_id: str, cascade: bool = False) -> int:
        """Delete a record and, with ``cascade``, everything below it.

        Returns the number of records removed.  Raises ``NotFoundError``
        if ``item_id`` does not exist.
        """
        store = get_store()
        if not store.delete(cls.collection, item_id):
            raise NotFoundError(f"{cls.label} not found")
        deleted = 1
        if cascade:
            parent_ids = [item_id]
            service = cls.child
            while service is not None and parent_ids:
                wanted = set(parent_ids)
                child_ids = [
                    record["id"]
                    for record in store.list(service.collection)
                    if record.get(service.parent_field) in wanted
                ]
                deleted += store.delete_where(service.collection, service.parent_field, parent_ids)
                parent_ids = child_ids
                service = service.child
        logger.info("Deleted %s %s (%d record(s))", cls.label.lower(), item_id, deleted)
        return deleted


class BranchService(HierarchyService):
    collection = "branches"
    label = "Branch"
    name_field = "branch_name"
    order_by = "created_at"
    read_schema = BranchRead


class SectionService(HierarchyService):
    collection = "sections"
    label = "Section"
    parent_field = "branch_id"
    name_field = "section_name"
    order_by = "section_name"
    read_schema = SectionRead
    parent = BranchService


class SubjectService(HierarchyService):
    collection = "subjects"
    label = "Subject"
    parent_field = "section_id"
    name_field = "subject_name"
    order_by = "subject_name"
    read_schema = SubjectRead
    parent = SectionService


class UnitService(HierarchyService):
    collection = "units"
    label = "Unit"
    parent_field = "subject_id"
    name_field = "unit_title"
    order_by = "unit_title"
    read_schema = UnitRead
    parent = SubjectService


class TopicService(HierarchyService):
    collection = "topics"
    label = "Topic"
    parent_field = "unit_id"
    name_field = "topic_title"
    order_by = "topic_title"
    read_schema = TopicRead
    parent = UnitService


class NoteService(HierarchyService):
    collection = "notes"
    label = "Note"
    parent_field = "topic_id"
    name_field = "title"
    order_by = "created_at"
    read_schema = NoteRead
    parent = TopicService


BranchService.child = SectionService
SectionService.child = SubjectService
SubjectService.child = UnitService
UnitService.child = TopicService
TopicService.child = NoteService
