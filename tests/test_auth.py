# File: tests/test_auth.py | Version: 1.0 | Path: /tests/test_auth.py
from fastapi.testclient import TestClient


def _login(client: TestClient, email: str, password: str = "secret123") -> str:
    client.post("/auth/register", json={"email": email, "password": password})
    resp = client.post(
        "/auth/login",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def test_register_and_login(client: TestClient):
    reg = client.post(
        "/auth/register", json={"email": "Test@Example.com", "password": "secret123"}
    )
    assert reg.status_code == 200
    assert reg.json()["email"] == "test@example.com"

    login = client.post(
        "/auth/login",
        data={"username": "test@example.com", "password": "secret123"},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert login.status_code == 200
    data = login.json()
    assert "access_token" in data
    assert data.get("token_type") == "bearer"

    form = client.post("/auth/token", data={"username": "test@example.com", "password": "secret123"})
    assert form.status_code == 200


def test_register_twice_with_other_password_conflicts(client: TestClient):
    client.post("/auth/register", json={"email": "dup@example.com", "password": "one"})
    again = client.post("/auth/register", json={"email": "dup@example.com", "password": "one"})
    assert again.status_code == 200
    other = client.post("/auth/register", json={"email": "dup@example.com", "password": "two"})
    assert other.status_code == 409


def test_bad_credentials(client: TestClient):
    _login(client, "creds@example.com")
    r = client.post("/auth/token", data={"username": "creds@example.com", "password": "wrong"})
    assert r.status_code == 401
    r = client.post("/auth/login", json={"email": "creds@example.com"})
    assert r.status_code == 422


def test_me_endpoint(client: TestClient):
    token = _login(client, "p2@example.com")
    r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["email"] == "p2@example.com"

    r = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401
