"""
Authentication endpoints for API v1.

Administrators log in with e‑mail and password; students log in with
their University Seat Number only.  Both receive a bearer token whose
``role`` claim decides what they may do.
"""

from fastapi import APIRouter, HTTPException, status

from notesflow_api.app.core.security import ROLE_ADMIN, ROLE_STUDENT, create_access_token
from notesflow_api.app.schemas.auth import AdminLogin, StudentLogin, StudentToken, Token
from notesflow_api.app.services.auth_service import AuthService
from notesflow_api.app.services.student_service import InvalidUSNError, StudentService

router = APIRouter()


@router.post("/admin-login", response_model=Token)
async def admin_login(credentials: AdminLogin) -> Token:
    """Check administrator credentials and return a token."""
    email = await AuthService.authenticate_admin(credentials.email, credentials.password)
    if email is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    token = create_access_token({"sub": email, "role": ROLE_ADMIN})
    return Token(access_token=token, role=ROLE_ADMIN)


@router.post("/student-login", response_model=StudentToken)
async def student_login(payload: StudentLogin) -> StudentToken:
    """Log a student in by USN.

    Returns 400 for a malformed USN and 404 when the USN is not on the
    roster.
    """
    try:
        student = await StudentService.authenticate_student(payload.usn)
    except InvalidUSNError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    if student is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found. Please contact administration.",
        )
    token = create_access_token({"sub": student.usn, "role": ROLE_STUDENT})
    return StudentToken(access_token=token, role=ROLE_STUDENT, student=student)
