"""
Pydantic schema definitions for API payloads.

Schemas are separated from the storage records to decouple the API
representation from persistence.  ``hierarchy`` covers the six content
levels, ``student`` the student roster and dashboard, ``auth`` the
login payloads.
"""
