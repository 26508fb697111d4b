from datetime import timedelta

from bulkmod.config import settings
from bulkmod.main import app
from bulkmod.tokens import TokenIssuer

API = settings.api_prefix


def test_register(client):
    response = client.post(f"{API}/auth/register", json={
        "username": "newbie",
        "email": "newbie@test.com",
        "password": "hunter22",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["user"]["username"] == "newbie"
    assert data["user"]["email"] == "newbie@test.com"
    assert "passwordHash" not in data["user"]
    assert app.state.token_issuer.verify(data["token"]) == data["user"]["id"]


def test_register_duplicate_email(client, alice):
    response = client.post(f"{API}/auth/register", json={
        "username": "someone",
        "email": "alice@test.com",
        "password": "hunter22",
    })
    assert response.status_code == 400
    assert response.json()["error"] == "User with this email or username already exists"


def test_register_duplicate_username(client, alice):
    response = client.post(f"{API}/auth/register", json={
        "username": "alice",
        "email": "another@test.com",
        "password": "hunter22",
    })
    assert response.status_code == 400


def test_register_short_password(client):
    response = client.post(f"{API}/auth/register", json={
        "username": "shorty",
        "email": "shorty@test.com",
        "password": "abc",
    })
    assert response.status_code == 422
    assert response.json()["error"] == "Validation error"


def test_login_success(client, alice):
    response = client.post(f"{API}/auth/login", json={
        "email": "alice@test.com",
        "password": "secret123",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["id"] == alice.id
    assert app.state.token_issuer.verify(data["token"]) == alice.id


def test_login_wrong_password(client, alice):
    response = client.post(f"{API}/auth/login", json={
        "email": "alice@test.com",
        "password": "wrong",
    })
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid email or password"


def test_login_nonexistent_user(client):
    response = client.post(f"{API}/auth/login", json={
        "email": "nobody@test.com",
        "password": "whatever",
    })
    assert response.status_code == 401


def test_profile(client, alice, alice_headers):
    response = client.get(f"{API}/auth/profile", headers=alice_headers)
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["id"] == alice.id
    assert user["username"] == "alice"
    assert "createdAt" in user


def test_profile_without_token(client):
    response = client.get(f"{API}/auth/profile")
    assert response.status_code == 401


def test_profile_with_garbage_token(client):
    response = client.get(
        f"{API}/auth/profile", headers={"Authorization": "Bearer garbage"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid or expired token"


def test_profile_with_expired_token(client, alice):
    issuer = TokenIssuer(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_in=timedelta(seconds=-10),
    )
    headers = {"Authorization": f"Bearer {issuer.issue(alice.id)}"}
    response = client.get(f"{API}/auth/profile", headers=headers)
    assert response.status_code == 401


def test_profile_for_deleted_user(client, db, alice, alice_headers):
    db.delete(alice)
    db.flush()
    response = client.get(f"{API}/auth/profile", headers=alice_headers)
    assert response.status_code == 401


def test_logout(client, alice_headers):
    response = client.post(f"{API}/auth/logout", headers=alice_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"


def test_token_still_valid_after_logout(client, alice_headers):
    client.post(f"{API}/auth/logout", headers=alice_headers)
    response = client.get(f"{API}/auth/profile", headers=alice_headers)
    assert response.status_code == 200


def test_logout_requires_token(client):
    response = client.post(f"{API}/auth/logout")
    assert response.status_code == 401
