"""Registration, login, logout and profile endpoints."""

import threading

import pytest
from fastapi.testclient import TestClient

from core.session import SessionStore
from tests.conftest import PASSWORD, register


def test_register_login_current_user_scenario(client):
    """Register demo, log in again with the same credentials, read current user."""
    res = register(client, "demo", email="demo@example.com", password="password123")
    assert res.status_code == 201
    user = res.json()["user"]
    assert user["username"] == "demo"
    assert user["email"] == "demo@example.com"
    assert "password" not in user and "passwordHash" not in user

    client.post("/api/auth/logout")
    res = client.post("/api/auth/login", json={"username": "demo", "password": "password123"})
    assert res.status_code == 200
    assert res.json()["user"]["id"] == user["id"]

    res = client.get("/api/auth/current-user")
    assert res.status_code == 200
    current = res.json()["user"]
    assert (current["id"], current["username"], current["email"]) == (user["id"], "demo", "demo@example.com")


def test_register_authenticates_immediately(client):
    register(client, "carol")
    res = client.get("/api/auth/current-user")
    assert res.status_code == 200
    assert res.json()["user"]["username"] == "carol"


def test_current_user_requires_session(client):
    res = client.get("/api/auth/current-user")
    assert res.status_code == 401
    assert res.json()["error"]["message"] == "Not authenticated"


@pytest.mark.parametrize("username,email,field", [
    ("alice", "new@example.com", "username"),
    ("ALICE", "new@example.com", "username"),
    ("newbie", "Alice@Example.com", "email"),
])
def test_register_rejects_duplicates(client, other_client, user, username, email, field):
    res = register(other_client, username, email=email)
    assert res.status_code == 400
    assert res.json()["error"]["details"]["fields"] == [field]


def test_concurrent_registration_creates_one_user(app):
    """Simultaneous sign-ups for one username: exactly one wins, the rest get 400."""
    barrier = threading.Barrier(4)
    statuses = []

    def sign_up(i):
        client = TestClient(app)
        barrier.wait()
        res = register(client, "zed" if i % 2 else "ZED", email="zed@example.com")
        statuses.append(res.status_code)

    threads = [threading.Thread(target=sign_up, args=(i,)) for i in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(statuses) == [201, 400, 400, 400]
    assert app.state.store.users.count() == 1


def test_register_rejects_password_mismatch(client):
    res = client.post("/api/auth/register", json={
        "username": "dave",
        "email": "dave@example.com",
        "password": PASSWORD,
        "confirmPassword": "different1",
    })
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "Passwords don't match"
    assert client.get("/api/auth/current-user").status_code == 401


def test_register_validation_lists_failing_fields(client):
    res = client.post("/api/auth/register", json={"username": "ab", "email": "nope", "password": "123"})
    assert res.status_code == 400
    fields = set(res.json()["error"]["details"]["fields"])
    assert {"username", "email", "password", "confirmPassword"} <= fields


def test_login_wrong_password_is_401(client, other_client, user):
    res = other_client.post("/api/auth/login", json={"username": "alice", "password": "wrongpass"})
    assert res.status_code == 401
    assert other_client.get("/api/auth/current-user").status_code == 401


def test_login_unknown_user_is_401(client):
    res = client.post("/api/auth/login", json={"username": "nobody", "password": PASSWORD})
    assert res.status_code == 401


def test_login_is_case_insensitive_on_username(client, other_client, user):
    res = other_client.post("/api/auth/login", json={"username": "ALICE", "password": PASSWORD})
    assert res.status_code == 200
    assert res.json()["user"]["id"] == user["id"]


def test_logout_ends_session(client, user):
    res = client.post("/api/auth/logout")
    assert res.status_code == 200
    assert res.json() == {"message": "Logged out successfully"}
    assert client.get("/api/auth/current-user").status_code == 401
    assert client.get("/api/glucose").status_code == 401


def test_stale_session_cookie_is_cleared(client, app, user):
    token = client.cookies.get("glucose_session")
    app.state.sessions.destroy(token)
    res = client.get("/api/auth/current-user")
    assert res.status_code == 401
    assert "glucose_session" in res.headers.get("set-cookie", "")
    assert client.cookies.get("glucose_session") is None


def test_password_is_stored_hashed(client, app, user):
    stored = app.state.store.users.get(user["id"])
    assert stored.password_hash != PASSWORD
    assert stored.password_hash.startswith("$pbkdf2-sha256$")


def test_update_profile(client, user):
    res = client.put("/api/auth/update-profile", json={"name": "Alice A.", "email": "alice@new.example.com"})
    assert res.status_code == 200
    assert res.json()["user"]["name"] == "Alice A."
    assert res.json()["user"]["email"] == "alice@new.example.com"


def test_update_profile_rejects_taken_email(client, other_client, user, other_user):
    res = client.put("/api/auth/update-profile", json={"email": "bob@example.com"})
    assert res.status_code == 400
    assert client.get("/api/auth/current-user").json()["user"]["email"] == "alice@example.com"


def test_update_profile_changes_password(client, other_client, user):
    res = client.put("/api/auth/update-profile", json={"newPassword": "n3wpassword"})
    assert res.status_code == 200
    bad = other_client.post("/api/auth/login", json={"username": "alice", "password": PASSWORD})
    assert bad.status_code == 401
    good = other_client.post("/api/auth/login", json={"username": "alice", "password": "n3wpassword"})
    assert good.status_code == 200


def test_update_allergies(client, user):
    res = client.put("/api/auth/update-allergies", json={"allergies": [" Shellfish ", "", "shellfish", "Gluten"]})
    assert res.status_code == 200
    assert res.json()["user"]["allergies"] == ["Shellfish", "Gluten"]


def test_profile_updates_require_session(client):
    assert client.put("/api/auth/update-profile", json={"name": "x"}).status_code == 401
    assert client.put("/api/auth/update-allergies", json={"allergies": []}).status_code == 401


def test_session_expires():
    now = [1000.0]
    sessions = SessionStore(max_age=60, clock=lambda: now[0])
    token = sessions.create(7)
    assert sessions.get_user_id(token) == 7
    now[0] += 61
    assert sessions.get_user_id(token) is None
    assert len(sessions) == 0


def test_session_store_ignores_unknown_tokens():
    sessions = SessionStore()
    assert sessions.get_user_id(None) is None
    assert sessions.get_user_id("bogus") is None
    sessions.destroy("bogus")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
