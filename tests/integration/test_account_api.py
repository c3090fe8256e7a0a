"""
Integration tests for registration, login and sessions.
"""

import pytest

from helpers import PASSWORD, register


@pytest.mark.integration
def test_register_starts_a_session(client):
    response = register(client)

    assert response.status_code == 201
    body = response.json()["user"]
    assert body["email"] == "jane@example.com"
    assert body["isPro"] is False
    assert body["resumeCount"] == 0
    assert "access_token" in client.cookies

    me = client.get("/api/me").json()["user"]
    assert me["id"] == body["id"]


@pytest.mark.integration
def test_register_normalises_email(client):
    response = register(client, email="  Jane@Example.COM ")
    assert response.json()["user"]["email"] == "jane@example.com"


@pytest.mark.integration
@pytest.mark.parametrize("overrides,message", [
    ({"password": "secret123"}, "Password must contain at least one uppercase letter"),
    ({"password": "Sh0rt"}, "Password must be at least 8 characters long"),
    ({"email": "not-an-email"}, "Please enter a valid email address"),
    ({"name": "   "}, "Name is required"),
])
def test_register_validation(client, overrides, message):
    response = register(client, **overrides)

    assert response.status_code == 400
    assert response.json() == {"error": message}


@pytest.mark.integration
def test_duplicate_email_is_rejected(client):
    register(client)
    response = register(client, name="Someone Else")

    assert response.status_code == 400
    assert response.json() == {"error": "An account with this email already exists."}


@pytest.mark.integration
def test_login_and_logout(client):
    register(client)
    client.post("/api/auth/logout")
    assert client.get("/api/me").json() == {"user": None}

    wrong = client.post("/api/auth/login", json={"email": "jane@example.com", "password": "Wrong1234"})
    assert wrong.status_code == 401
    assert wrong.json() == {"error": "Invalid email or password."}

    ok = client.post("/api/auth/login", json={"email": "JANE@example.com", "password": PASSWORD})
    assert ok.status_code == 200
    assert client.get("/api/me").json()["user"]["email"] == "jane@example.com"


@pytest.mark.integration
def test_bearer_token_is_accepted(client):
    register(client)
    token = client.cookies.get("access_token")
    client.cookies.clear()

    assert client.get("/api/generations").status_code == 401
    response = client.get("/api/generations", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


@pytest.mark.integration
def test_tampered_token_is_rejected(client):
    response = client.get("/api/generations", headers={"Authorization": "Bearer not.a.token"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid or expired token"}


@pytest.mark.integration
def test_auth_endpoints_are_rate_limited(client):
    for _ in range(5):
        client.post("/api/auth/login", json={"email": "x@example.com", "password": "Wrong1234"})

    response = client.post("/api/auth/login", json={"email": "x@example.com", "password": "Wrong1234"})

    assert response.status_code == 429
    assert response.json() == {"error": "Too many authentication attempts, please try again in 15 minutes."}
    assert int(response.headers["Retry-After"]) > 0
