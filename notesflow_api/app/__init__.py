"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules.  Each level of the academic hierarchy (branches, sections,
subjects, units, topics, notes) exposes a router defined in
``api/v1/endpoints`` backed by a service class in ``services``.
"""

from .main import app  # noqa: F401
