"""
Main entrypoint for the NotesFlow API.

This module assembles the FastAPI application, sets up logging,
registers the error handlers and includes versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``, e.g.::

    uvicorn notesflow_api.app.main:app --reload
"""

import logging

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.errors import StorageUnavailableError, register_exception_handlers
from .core.logging_config import setup_logging
from .core.storage import get_store
from .services.seed import seed_store

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Build the NotesFlow app: logging, error handlers and the v1 routes.

    Storage is opened (and seeded) on startup, not here, so building an
    app never touches the database.
    """
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    register_exception_handlers(app)
    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        # A missing database is not fatal: the service still starts and
        # every storage-backed request answers 500 "Database not connected".
        try:
            store = get_store()
            store.initialise()
            seed_store(store)
        except StorageUnavailableError:
            logger.error("Storage backend %r is not available", settings.storage_backend)
            return
        logger.info("Using %s storage", store.name)

    return app


app = create_app()
