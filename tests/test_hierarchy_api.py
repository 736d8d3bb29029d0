from __future__ import annotations

import uuid

from notesflow_api.app.core.config import settings

API = "/api/v1"


def test_health_reports_backend(client, backend):
    resp = client.get(f"{API}/health/")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "storage": backend}


def test_list_branches_returns_demo_data(client):
    resp = client.get(f"{API}/branches/")
    assert resp.status_code == 200
    body = resp.json()
    assert [b["id"] for b in body] == ["b1", "b2"]
    assert body[0]["branch_name"] == "Computer Science (CSE)"
    assert body[0]["created_at"]


def test_list_children_filters_by_parent(client):
    resp = client.get(f"{API}/sections/", params={"branch_id": "b1"})
    assert resp.status_code == 200
    assert [s["section_name"] for s in resp.json()] == ["Section A", "Section B"]

    resp = client.get(f"{API}/sections/", params={"branch_id": "b2"})
    assert resp.status_code == 200
    assert resp.json() == []

    # Without a parent every record of the level is returned.
    resp = client.get(f"{API}/units/")
    assert {u["id"] for u in resp.json()} == {"u1", "u2"}


def test_get_single_record(client):
    resp = client.get(f"{API}/topics/t1")
    assert resp.status_code == 200
    body = resp.json()
    assert body["topic_title"] == "Array Basics"
    assert body["description"] == "Definition and memory allocation"

    resp = client.get(f"{API}/topics/does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Topic not found"


def test_reads_are_public_but_writes_need_admin(client, student_headers):
    assert client.get(f"{API}/notes/", params={"topic_id": "t1"}).status_code == 200

    resp = client.post(f"{API}/branches/", json={"branch_name": "Civil (CV)"})
    assert resp.status_code == 401

    resp = client.post(
        f"{API}/branches/", json={"branch_name": "Civil (CV)"}, headers=student_headers("1AB23CS001")
    )
    assert resp.status_code == 403

    resp = client.delete(f"{API}/branches/b2", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


def test_create_assigns_id_and_timestamp(client, admin_headers):
    resp = client.post(f"{API}/branches/", json={"branch_name": "  Civil (CV)  "}, headers=admin_headers)
    assert resp.status_code == 201
    body = resp.json()
    assert body["branch_name"] == "Civil (CV)"
    uuid.UUID(body["id"])
    assert body["created_at"]

    ids = [b["id"] for b in client.get(f"{API}/branches/").json()]
    assert body["id"] in ids


def test_create_keeps_client_id(client, admin_headers):
    resp = client.post(
        f"{API}/sections/",
        json={"id": "s3", "branch_id": "b2", "section_name": "Section A"},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["id"] == "s3"
    assert client.get(f"{API}/sections/s3").json()["branch_id"] == "b2"


def test_create_under_unknown_parent_is_rejected(client, admin_headers):
    resp = client.post(
        f"{API}/subjects/", json={"section_id": "nope", "subject_name": "Maths"}, headers=admin_headers
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Section nope not found"


def test_duplicate_id_conflicts(client, admin_headers):
    resp = client.post(f"{API}/branches/", json={"id": "b1", "branch_name": "Again"}, headers=admin_headers)
    assert resp.status_code == 409
    assert client.get(f"{API}/branches/b1").json()["branch_name"] == "Computer Science (CSE)"


def test_create_validates_payload(client, admin_headers):
    resp = client.post(f"{API}/units/", json={"subject_id": "sub1", "unit_title": ""}, headers=admin_headers)
    assert resp.status_code == 422

    resp = client.post(
        f"{API}/notes/",
        json={"topic_id": "t1", "note_type": "pdf", "note_url": "lecture.pdf"},
        headers=admin_headers,
    )
    assert resp.status_code == 422

    resp = client.post(
        f"{API}/notes/",
        json={"topic_id": "t1", "note_type": "audio", "note_url": "https://example.com/a.mp3"},
        headers=admin_headers,
    )
    assert resp.status_code == 422


def test_notes_of_every_type(client, admin_headers):
    payloads = [
        {"note_type": "pdf", "note_url": "https://example.com/arrays.pdf", "title": "Slides"},
        {"note_type": "img", "note_url": "https://example.com/diagram.png"},
        {"note_type": "text", "note_url": "Arrays start at index zero."},
    ]
    for payload in payloads:
        resp = client.post(f"{API}/notes/", json={"topic_id": "t2", **payload}, headers=admin_headers)
        assert resp.status_code == 201, resp.text

    notes = client.get(f"{API}/notes/", params={"topic_id": "t2"}).json()
    assert [n["note_type"] for n in notes] == ["pdf", "img", "text"]
    assert notes[1]["title"] is None


def test_delete_single_record(client, admin_headers):
    resp = client.delete(f"{API}/branches/b2", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "deleted": 1}
    assert client.get(f"{API}/branches/b2").status_code == 404

    resp = client.delete(f"{API}/branches/b2", headers=admin_headers)
    assert resp.status_code == 404


def test_delete_without_cascade_leaves_children(client, admin_headers):
    resp = client.delete(f"{API}/units/u1", headers=admin_headers)
    assert resp.json()["deleted"] == 1
    assert client.get(f"{API}/topics/t1").status_code == 200


def test_cascade_delete_removes_subtree(client, admin_headers):
    resp = client.delete(f"{API}/branches/b1", params={"cascade": "true"}, headers=admin_headers)
    assert resp.status_code == 200
    # b1, s1, s2, sub1, sub2, u1, u2, t1, t2, n1, n2
    assert resp.json()["deleted"] == 11

    for level in ("sections", "subjects", "units", "topics", "notes"):
        assert client.get(f"{API}/{level}/").json() == []
    assert [b["id"] for b in client.get(f"{API}/branches/").json()] == ["b2"]


def test_missing_database_answers_500(client, monkeypatch):
    monkeypatch.setattr(settings, "storage_backend", "sqlite")
    monkeypatch.setattr(settings, "database_url", "")
    resp = client.get(f"{API}/branches/")
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Database not connected"}


def test_empty_parent_filter_matches_nothing(client):
    resp = client.get(f"{API}/sections/", params={"branch_id": ""})
    assert resp.status_code == 200
    assert resp.json() == []
