"""
Collection endpoints for the six hierarchy levels.

Every level exposes the same four routes:

* ``GET /`` – list records, optionally only the children of one parent
  (``?branch_id=`` for sections, ``?section_id=`` for subjects, …);
* ``GET /{item_id}`` – fetch one record;
* ``POST /`` – insert a record (admin only);
* ``DELETE /{item_id}`` – delete a record, with ``?cascade=true`` its
  whole subtree (admin only).

There is no update route; records are replaced by deleting
and re-creating them.  ``build_router`` generates the routes from the
level's service and schemas.
"""

from typing import List, Optional, Type

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from notesflow_api.app.core.security import ROLE_ADMIN, require_roles
from notesflow_api.app.schemas.hierarchy import (
    BranchCreate,
    DeleteResult,
    NoteCreate,
    SectionCreate,
    SubjectCreate,
    TopicCreate,
    UnitCreate,
)
from notesflow_api.app.services.hierarchy_service import (
    BranchService,
    HierarchyService,
    NoteService,
    SectionService,
    SubjectService,
    TopicService,
    UnitService,
)


def build_router(service: Type[HierarchyService], create_schema: Type[BaseModel]) -> APIRouter:
    """Create the CRUD router for one hierarchy level."""
    router = APIRouter()
    read_schema = service.read_schema
    label = service.label.lower()

    if service.parent_field:

        @router.get("/", response_model=List[read_schema], name=f"list_{service.collection}")
        async def list_children(
            parent_id: Optional[str] = Query(
                None,
                alias=service.parent_field,
                description=f"Only return {service.collection} of this {service.parent.label.lower()}",
            ),
        ):
            return await service.list_items(parent_id)

    else:

        @router.get("/", response_model=List[read_schema], name=f"list_{service.collection}")
        async def list_roots():
            return await service.list_items()

    @router.get("/{item_id}", response_model=read_schema, name=f"get_{label}")
    async def get_item(item_id: str):
        """Retrieve a single record by id.  Returns 404 if it does not exist."""
        return await service.get_item(item_id)

    @router.post(
        "/",
        response_model=read_schema,
        status_code=status.HTTP_201_CREATED,
        name=f"create_{label}",
    )
    async def create_item(
        payload: create_schema,
        current_user: dict = Depends(require_roles(ROLE_ADMIN)),
    ):
        """Insert a record (admin only).

        Returns 400 if the parent does not exist and 409 if the supplied
        id is already taken.
        """
        return await service.create_item(payload)

    @router.delete("/{item_id}", response_model=DeleteResult, name=f"delete_{label}")
    async def delete_item(
        item_id: str,
        cascade: bool = Query(False, description="Also delete everything below this record"),
        current_user: dict = Depends(require_roles(ROLE_ADMIN)),
    ) -> DeleteResult:
        """Delete a record (admin only).  Returns 404 if it does not exist."""
        deleted = await service.delete_item(item_id, cascade=cascade)
        return DeleteResult(success=True, deleted=deleted)

    return router


branches = build_router(BranchService, BranchCreate)
sections = build_router(SectionService, SectionCreate)
subjects = build_router(SubjectService, SubjectCreate)
units = build_router(UnitService, UnitCreate)
topics = build_router(TopicService, TopicCreate)
notes = build_router(NoteService, NoteCreate)
