"""
Service layer abstraction.

Each service encapsulates the logic for one collection and talks to the
configured store (SQLite or the JSON local store) so the API handlers
never deal with persistence directly.
"""
