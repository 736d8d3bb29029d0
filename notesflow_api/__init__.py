"""
Top‑level package for the NotesFlow API.

This file makes ``notesflow_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``notesflow_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
