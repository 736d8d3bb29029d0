"""Liveness endpoint reporting the active storage backend."""

from typing import Any, Dict

from fastapi import APIRouter

from notesflow_api.app.core.storage import get_store

router = APIRouter()


@router.get("/")
async def health() -> Dict[str, Any]:
    store = get_store()
    return {"ok": True, "storage": store.name}
