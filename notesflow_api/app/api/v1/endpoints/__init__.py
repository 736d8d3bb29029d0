"""
Endpoint subpackage for API v1.

``hierarchy`` builds one router per content level; the remaining
modules cover authentication, the student roster and service health.
The routers are aggregated in ``router.py`` at the package level.
"""
