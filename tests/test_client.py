from __future__ import annotations

import json

import pytest
import requests

import notesflow_client
from notesflow_api.app.services import navigation
from notesflow_client import NotesFlowClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else (json.dumps(payload) if payload is not None else "")
        self.content = self.text.encode("utf-8")

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:
    """Records requests and replays queued responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, **kwargs):
        self.calls.append(kwargs)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _client(*responses, **kwargs):
    session = FakeSession(*responses)
    return NotesFlowClient(base_url="http://notes.test/", session=session, **kwargs), session


def test_list_items_sends_parent_filter():
    client, session = _client(FakeResponse(payload=[{"id": "s1"}]))
    data, error = client.get_sections("b1")
    assert error is None
    assert data == [{"id": "s1"}]
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "http://notes.test/api/v1/sections/"
    assert call["params"] == {"branch_id": "b1"}
    assert "Authorization" not in call["headers"]


def test_branches_have_no_parent_filter():
    client, session = _client(FakeResponse(payload=[]))
    client.get_branches()
    assert session.calls[0]["params"] is None


def test_add_note_sends_token_and_payload():
    client, session = _client(FakeResponse(201, {"id": "n9"}), api_key="tok")
    data, error = client.add_note("t1", "video", "https://youtu.be/x", title="Intro", item_id="n9")
    assert error is None
    assert data == {"id": "n9"}
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["headers"]["Authorization"] == "Bearer tok"
    assert call["json"] == {
        "topic_id": "t1",
        "note_type": "video",
        "note_url": "https://youtu.be/x",
        "title": "Intro",
        "id": "n9",
    }


def test_delete_with_cascade():
    client, session = _client(FakeResponse(payload={"success": True, "deleted": 4}))
    ok, error = client.delete_unit("u1", cascade=True)
    assert ok is True
    assert error is None
    assert session.calls[0]["url"].endswith("/units/u1")
    assert session.calls[0]["params"] == {"cascade": "true"}


def test_http_error_is_returned_not_raised():
    client, _ = _client(FakeResponse(409, {"detail": "branches record b1 already exists"}))
    data, error = client.add_branch("CSE", item_id="b1")
    assert data is None
    assert error == {"status_code": 409, "message": "branches record b1 already exists"}


def test_validation_errors_are_flattened():
    detail = [{"loc": ["body", "note_url"], "msg": "String should have at least 1 character"}]
    client, _ = _client(FakeResponse(422, {"detail": detail}))
    _, error = client.add_note("t1", "text", "")
    assert error["status_code"] == 422
    assert error["message"] == "note_url: String should have at least 1 character"


def test_non_json_error_body():
    client, _ = _client(FakeResponse(502, text="Bad Gateway"))
    items, error = client.get_topics("u1")
    assert items == []
    assert error == {"status_code": 502, "message": "Bad Gateway"}


def test_connection_failure():
    client, _ = _client(requests.ConnectionError("refused"))
    ok, error = client.delete_branch("b1")
    assert ok is False
    assert error["status_code"] is None
    assert "refused" in error["message"]


def test_login_keeps_token():
    client, session = _client(
        FakeResponse(payload={"access_token": "abc", "token_type": "bearer", "role": "admin"}),
        FakeResponse(payload=[]),
    )
    data, error = client.admin_login("admin@example.com", "pw")
    assert error is None
    assert client.api_key == "abc"
    client.list_students(section_id="s1")
    assert session.calls[1]["headers"]["Authorization"] == "Bearer abc"
    assert session.calls[1]["params"] == {"section_id": "s1"}


def test_failed_login_keeps_previous_token():
    client, _ = _client(FakeResponse(401, {"detail": "Invalid credentials"}), api_key="old")
    _, error = client.admin_login("admin@example.com", "bad")
    assert error["status_code"] == 401
    assert client.api_key == "old"


def test_dashboard_search_param():
    client, session = _client(FakeResponse(payload={"subjects": []}))
    client.get_dashboard("1AB23CS001", search="array")
    assert session.calls[0]["url"].endswith("/students/1AB23CS001/dashboard")
    assert session.calls[0]["params"] == {"q": "array"}


def test_unknown_level():
    client, session = _client()
    with pytest.raises(ValueError):
        client.add_item("courses", {})
    assert session.calls == []


def test_parent_params_follow_navigation_table():
    assert notesflow_client.PARENT_PARAM is navigation.PARENT_PARAM
    for level, param in navigation.PARENT_PARAM.items():
        client, session = _client(FakeResponse(payload=[]))
        client.list_items(level, "p1")
        assert session.calls[0]["params"] == ({param: "p1"} if param else None)


def test_empty_parent_id_is_still_sent():
    client, session = _client(FakeResponse(payload=[]))
    client.get_sections("")
    assert session.calls[0]["params"] == {"branch_id": ""}
