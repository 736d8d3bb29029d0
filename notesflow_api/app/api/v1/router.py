"""
Top‑level router for version 1 of the API.

This router aggregates the hierarchy routers (one per level), the
authentication and student routers and the health check under a
unified prefix.
"""

from fastapi import APIRouter

from .endpoints import auth, health, hierarchy, students

router = APIRouter()

router.include_router(hierarchy.branches, prefix="/branches", tags=["branches"])
router.include_router(hierarchy.sections, prefix="/sections", tags=["sections"])
router.include_router(hierarchy.subjects, prefix="/subjects", tags=["subjects"])
router.include_router(hierarchy.units, prefix="/units", tags=["units"])
router.include_router(hierarchy.topics, prefix="/topics", tags=["topics"])
router.include_router(hierarchy.notes, prefix="/notes", tags=["notes"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(students.router, prefix="/students", tags=["students"])
router.include_router(health.router, prefix="/health", tags=["health"])
