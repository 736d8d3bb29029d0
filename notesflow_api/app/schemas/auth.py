"""Login payloads and token responses."""

from pydantic import BaseModel, Field

from .student import StudentRead


class AdminLogin(BaseModel):
    email: str = Field(..., min_length=3, examples=["admin@college.edu"])
    password: str = Field(..., min_length=1)


class StudentLogin(BaseModel):
    usn: str = Field(..., min_length=1, examples=["02JST24UCS043"])


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: str


class StudentToken(Token):
    student: StudentRead
