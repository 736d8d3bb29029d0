"""
Student endpoints for API v1.

Administrators manage the roster; a logged-in student may read only
their own dashboard, i.e. the notes of their branch and section.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from notesflow_api.app.core.security import ROLE_ADMIN, ROLE_STUDENT, require_roles
from notesflow_api.app.schemas.hierarchy import DeleteResult
from notesflow_api.app.schemas.student import StudentCreate, StudentDashboard, StudentRead
from notesflow_api.app.services.student_service import StudentService

router = APIRouter()


@router.get("/", response_model=List[StudentRead])
async def list_students(
    branch_id: Optional[str] = Query(None),
    section_id: Optional[str] = Query(None),
    current_user: dict = Depends(require_roles(ROLE_ADMIN)),
) -> List[StudentRead]:
    """List registered students, optionally of one branch or section (admin only)."""
    return await StudentService.list_students(branch_id=branch_id, section_id=section_id)


@router.post("/", response_model=StudentRead, status_code=status.HTTP_201_CREATED)
async def create_student(
    student: StudentCreate,
    current_user: dict = Depends(require_roles(ROLE_ADMIN)),
) -> StudentRead:
    """Register a student (admin only).

    The USN is stored upper-case.  Returns 400 if the branch or section
    does not exist or the section belongs to another branch, 409 if the
    USN is already registered.
    """
    return await StudentService.create_student(student)


@router.delete("/{usn}", response_model=DeleteResult)
async def delete_student(
    usn: str,
    current_user: dict = Depends(require_roles(ROLE_ADMIN)),
) -> DeleteResult:
    """Remove a student from the roster (admin only)."""
    await StudentService.delete_student(usn)
    return DeleteResult(success=True, deleted=1)


@router.get("/{usn}/dashboard", response_model=StudentDashboard)
async def get_dashboard(
    usn: str,
    q: Optional[str] = Query(None, description="Filter subjects, units and topics by substring"),
    current_user: dict = Depends(require_roles(ROLE_ADMIN, ROLE_STUDENT)),
) -> StudentDashboard:
    """Return the student's content tree.

    Students may only open their own dashboard; administrators may open
    any.
    """
    if current_user.get("role") == ROLE_STUDENT and current_user.get("sub") != usn.upper():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
    return await StudentService.build_dashboard(usn, search=q)
