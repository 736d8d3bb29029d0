from __future__ import annotations

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD

from notesflow_api.app.core.security import (
    ROLE_ADMIN,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

API = "/api/v1"


def test_admin_login_issues_usable_token(client):
    resp = client.post(f"{API}/auth/admin-login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    body = resp.json()
    assert body["role"] == "admin"
    assert body["token_type"] == "bearer"

    headers = {"Authorization": f"Bearer {body['access_token']}"}
    resp = client.post(f"{API}/branches/", json={"branch_name": "Civil (CV)"}, headers=headers)
    assert resp.status_code == 201


def test_admin_login_email_is_case_insensitive(client):
    resp = client.post(
        f"{API}/auth/admin-login", json={"email": "  Admin@Example.COM ", "password": ADMIN_PASSWORD}
    )
    assert resp.status_code == 200


def test_admin_login_rejects_bad_credentials(client):
    resp = client.post(f"{API}/auth/admin-login", json={"email": ADMIN_EMAIL, "password": "wrong"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid credentials"

    resp = client.post(
        f"{API}/auth/admin-login", json={"email": "someone@example.com", "password": ADMIN_PASSWORD}
    )
    assert resp.status_code == 401


def test_student_login(client, admin_headers):
    client.post(
        f"{API}/students/",
        json={"usn": "1AB23CS001", "branch_id": "b1", "section_id": "s1"},
        headers=admin_headers,
    )

    resp = client.post(f"{API}/auth/student-login", json={"usn": " 1ab23cs001 "})
    assert resp.status_code == 200
    body = resp.json()
    assert body["role"] == "student"
    assert body["student"]["usn"] == "1AB23CS001"

    headers = {"Authorization": f"Bearer {body['access_token']}"}
    resp = client.get(f"{API}/students/1AB23CS001/dashboard", headers=headers)
    assert resp.status_code == 200

    # Students cannot write.
    resp = client.post(f"{API}/branches/", json={"branch_name": "X"}, headers=headers)
    assert resp.status_code == 403


def test_student_login_errors(client):
    resp = client.post(f"{API}/auth/student-login", json={"usn": "a-1"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid USN format."

    resp = client.post(f"{API}/auth/student-login", json={"usn": "9ZZ99ZZ999"})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Student not found. Please contact administration."


def test_expired_token_is_rejected(client):
    token = create_access_token({"sub": ADMIN_EMAIL, "role": ROLE_ADMIN}, expires_delta=-10)
    resp = client.post(
        f"{API}/branches/", json={"branch_name": "X"}, headers={"Authorization": f"Bearer {token}"}
    )
    assert resp.status_code == 401


def test_token_with_unknown_role_is_rejected(client):
    token = create_access_token({"sub": "x", "role": "guest"})
    resp = client.get(f"{API}/students/", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


def test_token_roundtrip_and_tampering(configured):
    token = create_access_token({"sub": ADMIN_EMAIL, "role": ROLE_ADMIN})
    payload = decode_access_token(token)
    assert payload["sub"] == ADMIN_EMAIL
    assert payload["role"] == ROLE_ADMIN

    header, body, signature = token.split(".")
    assert decode_access_token(f"{header}.{body}.{signature[::-1]}") is None
    assert decode_access_token("garbage") is None

    configured.secret_key = "another-secret"
    assert decode_access_token(token) is None


def test_password_hashing():
    hashed = hash_password("pa55word")
    assert "$" in hashed
    assert "pa55word" not in hashed
    assert verify_password("pa55word", hashed)
    assert not verify_password("Pa55word", hashed)
    assert not verify_password("pa55word", "not-a-hash")
    assert hash_password("pa55word") != hashed
