"""Entry point for the NotesFlow API server.

Starts the FastAPI application under Uvicorn. It is intended to be
executed from the project root, for example under Docker, where you
only specify a single Python file to run.

Host and port are read from the environment variables
``NOTESFLOW_HOST`` and ``NOTESFLOW_PORT`` (defaults ``0.0.0.0`` and
``8000``). Storage, secrets and the admin account are configured
through the variables listed in ``notesflow_api/app/core/config.py``.

Usage:
    python run.py
"""
import asyncio
import logging
import os

from uvicorn import Config, Server

from notesflow_api.app.main import app


async def run_api() -> None:
    """Serve the API until interrupted."""
    host = os.getenv("NOTESFLOW_HOST", "0.0.0.0")
    port = int(os.getenv("NOTESFLOW_PORT", "8000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level="info")
    server = Server(config)
    await server.serve()


def main() -> None:
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Server stopped")


if __name__ == "__main__":
    main()
