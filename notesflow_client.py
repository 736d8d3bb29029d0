"""NotesFlow API client.

This module defines a small client wrapper around the NotesFlow REST
API.  It mirrors the operations of the portal's data service: for every
level of the hierarchy (branches, sections, subjects, units, topics,
notes) there is a ``get_*``, an ``add_*`` and a ``delete_*`` method.
The client uses the ``requests`` library internally to make HTTP calls.

Every public method returns a tuple ``(data, error)``.  On success
``error`` is ``None``; on failure ``data`` is empty and ``error`` is a
dictionary with keys ``status_code`` and ``message``.  Errors are
logged, never raised, so callers can surface them however they like.

Authentication: after a successful :meth:`NotesFlowClient.admin_login`
or :meth:`NotesFlowClient.student_login` the returned token is kept and
sent as ``Authorization: Bearer <token>`` on later calls.  A token can
also be passed up front via ``api_key``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from notesflow_api.app.services.navigation import PARENT_PARAM

logger = logging.getLogger(__name__)

Error = Dict[str, Any]


class NotesFlowClient:
    """Client for interacting with the NotesFlow API."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
        api_prefix: str = "/api/v1",
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:8000``.
            api_key: Optional bearer token sent with every request.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
            api_prefix: Path prefix of the versioned API.
        """
        self.base_url = base_url.rstrip("/") + api_prefix
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------
    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Call ``path`` (relative to the API prefix) and unpack the reply.

        Returns ``(parsed JSON or None, None)`` for a 2xx answer and
        ``(None, error)`` for an error status or a transport failure.
        """
        url = self.base_url + path
        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            return None, {"status_code": None, "message": str(exc)}

        if response.status_code >= 400:
            error = self._error_from(response)
            logger.error("%s %s -> %s: %s", method, url, error["status_code"], error["message"])
            return None, error
        return (response.json() if response.content else None), None

    @classmethod
    def _error_from(cls, response: Any) -> Error:
        """Build the error dict from a FastAPI ``{"detail": ...}`` body."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = cls._describe(body.get("detail") or body.get("message") or body)
        else:
            message = response.text
        return {"status_code": response.status_code, "message": message or f"HTTP {response.status_code}"}

    @staticmethod
    def _describe(detail: Any) -> str:
        """Flatten FastAPI validation errors into one line."""
        if not isinstance(detail, list):
            return str(detail)
        parts = []
        for item in detail:
            if not isinstance(item, dict):
                parts.append(str(item))
                continue
            loc = ".".join(str(p) for p in item.get("loc", []) if p != "body")
            parts.append(f"{loc}: {item.get('msg')}" if loc else str(item.get("msg")))
        return "; ".join(parts)

    # ------------------------------------------------------------------
    # Generic level operations
    # ------------------------------------------------------------------
    def list_items(self, level: str, parent_id: Optional[str] = None) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """List the records of ``level``, optionally the children of ``parent_id``."""
        self._check_level(level)
        params = None
        parent_param = PARENT_PARAM[level]
        if parent_param and parent_id is not None:
            params = {parent_param: parent_id}
        data, error = self._request("GET", f"/{level}/", params=params)
        if error:
            return [], error
        return data or [], None

    def add_item(self, level: str, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Insert a record into ``level``.  Requires an admin token."""
        self._check_level(level)
        return self._request("POST", f"/{level}/", json_body=payload)

    def delete_item(self, level: str, item_id: str, cascade: bool = False) -> Tuple[bool, Optional[Error]]:
        """Delete a record of ``level``.  Requires an admin token."""
        self._check_level(level)
        params = {"cascade": "true"} if cascade else None
        data, error = self._request("DELETE", f"/{level}/{item_id}", params=params)
        if error:
            return False, error
        return bool(data and data.get("success")), None

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------
    def get_branches(self):
        return self.list_items("branches")

    def add_branch(self, name: str, item_id: Optional[str] = None):
        return self.add_item("branches", self._with_id({"branch_name": name}, item_id))

    def delete_branch(self, item_id: str, cascade: bool = False):
        return self.delete_item("branches", item_id, cascade)

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------
    def get_sections(self, branch_id: Optional[str] = None):
        return self.list_items("sections", branch_id)

    def add_section(self, branch_id: str, name: str, item_id: Optional[str] = None):
        return self.add_item("sections", self._with_id({"branch_id": branch_id, "section_name": name}, item_id))

    def delete_section(self, item_id: str, cascade: bool = False):
        return self.delete_item("sections", item_id, cascade)

    # ------------------------------------------------------------------
    # Subjects
    # ------------------------------------------------------------------
    def get_subjects(self, section_id: Optional[str] = None):
        return self.list_items("subjects", section_id)

    def add_subject(self, section_id: str, name: str, item_id: Optional[str] = None):
        return self.add_item("subjects", self._with_id({"section_id": section_id, "subject_name": name}, item_id))

    def delete_subject(self, item_id: str, cascade: bool = False):
        return self.delete_item("subjects", item_id, cascade)

    # ------------------------------------------------------------------
    # Units
    # ------------------------------------------------------------------
    def get_units(self, subject_id: Optional[str] = None):
        return self.list_items("units", subject_id)

    def add_unit(self, subject_id: str, title: str, item_id: Optional[str] = None):
        return self.add_item("units", self._with_id({"subject_id": subject_id, "unit_title": title}, item_id))

    def delete_unit(self, item_id: str, cascade: bool = False):
        return self.delete_item("units", item_id, cascade)

    # ------------------------------------------------------------------
    # Topics
    # ------------------------------------------------------------------
    def get_topics(self, unit_id: Optional[str] = None):
        return self.list_items("topics", unit_id)

    def add_topic(self, unit_id: str, title: str, description: Optional[str] = None, item_id: Optional[str] = None):
        payload = {"unit_id": unit_id, "topic_title": title, "description": description}
        return self.add_item("topics", self._with_id(payload, item_id))

    def delete_topic(self, item_id: str, cascade: bool = False):
        return self.delete_item("topics", item_id, cascade)

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------
    def get_notes(self, topic_id: Optional[str] = None):
        return self.list_items("notes", topic_id)

    def add_note(
        self,
        topic_id: str,
        note_type: str,
        note_url: str,
        title: Optional[str] = None,
        item_id: Optional[str] = None,
    ):
        """Attach a resource to a topic.

        For ``note_type="text"`` pass the text itself as ``note_url``.
        """
        payload = {"topic_id": topic_id, "note_type": note_type, "note_url": note_url, "title": title}
        return self.add_item("notes", self._with_id(payload, item_id))

    def delete_note(self, item_id: str):
        return self.delete_item("notes", item_id)

    # ------------------------------------------------------------------
    # Authentication and students
    # ------------------------------------------------------------------
    def admin_login(self, email: str, password: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Log in as administrator and keep the token for later calls."""
        data, error = self._request("POST", "/auth/admin-login", json_body={"email": email, "password": password})
        if data:
            self.api_key = data.get("access_token")
        return data, error

    def student_login(self, usn: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Log in as a student and keep the token for later calls."""
        data, error = self._request("POST", "/auth/student-login", json_body={"usn": usn})
        if data:
            self.api_key = data.get("access_token")
        return data, error

    def get_dashboard(self, usn: str, search: Optional[str] = None):
        params = {"q": search} if search else None
        return self._request("GET", f"/students/{usn}/dashboard", params=params)

    def list_students(self, branch_id: Optional[str] = None, section_id: Optional[str] = None):
        params = {k: v for k, v in {"branch_id": branch_id, "section_id": section_id}.items() if v}
        data, error = self._request("GET", "/students/", params=params or None)
        if error:
            return [], error
        return data or [], None

    def add_student(self, usn: str, branch_id: str, section_id: str):
        return self._request(
            "POST", "/students/", json_body={"usn": usn, "branch_id": branch_id, "section_id": section_id}
        )

    def delete_student(self, usn: str) -> Tuple[bool, Optional[Error]]:
        data, error = self._request("DELETE", f"/students/{usn}")
        if error:
            return False, error
        return bool(data and data.get("success")), None

    def health(self):
        return self._request("GET", "/health/")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _check_level(level: str) -> None:
        if level not in PARENT_PARAM:
            raise ValueError(f"Unknown level {level!r}")

    @staticmethod
    def _with_id(payload: Dict[str, Any], item_id: Optional[str]) -> Dict[str, Any]:
        if item_id:
            payload["id"] = item_id
        return payload
