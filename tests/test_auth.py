from fastapi.testclient import TestClient

from app.core.security import create_token, decode_token, hash_password, verify_password
from app.main import app
from datetime import timedelta

client = TestClient(app)

API = "/api/v1"


def test_signup_returns_token_and_creates_defaults(db):
    response = client.post(
        f"{API}/auth/signup",
        json={"email": "Asha@Example.com", "password": "secret123", "full_name": "Asha"}
    )
    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["access_token"]

    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json() == {"id": body["user_id"], "email": "asha@example.com", "full_name": "Asha"}

    subscription = client.get(
        f"{API}/billing/subscription",
        headers={"Authorization": f"Bearer {body['access_token']}"}
    ).json()
    assert subscription["shop_limit"] == 0
    assert subscription["menu_limit"] == 0
    assert subscription["store_plan"] == "base"
    assert subscription["menu_plan"] == "menu_base"


def test_duplicate_email_conflicts():
    payload = {"email": "dup@example.com", "password": "secret123"}
    assert client.post(f"{API}/auth/signup", json=payload).status_code == 201

    response = client.post(f"{API}/auth/signup", json=payload)
    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"


def test_signin():
    client.post(f"{API}/auth/signup", json={"email": "ravi@example.com", "password": "secret123"})

    response = client.post(f"{API}/auth/signin", json={"email": "RAVI@example.com", "password": "secret123"})
    assert response.status_code == 200
    assert response.json()["access_token"]

    response = client.post(f"{API}/auth/signin", json={"email": "ravi@example.com", "password": "wrong-pass"})
    assert response.status_code == 401

    response = client.post(f"{API}/auth/signin", json={"email": "nobody@example.com", "password": "secret123"})
    assert response.status_code == 401


def test_invalid_bearer_token():
    response = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["error"] == "Unauthorized: Invalid token"


def test_shop_owner_token_is_not_an_account_token():
    token = create_token({"sub": "owner-1", "shop_id": "s1", "kind": "shop_owner"}, timedelta(minutes=5))
    response = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_expired_token_rejected():
    from app.core.exceptions import AuthenticationError
    import pytest

    token = create_token({"sub": "u1", "kind": "account"}, timedelta(minutes=-5))
    with pytest.raises(AuthenticationError):
        decode_token(token, "account")


def test_password_hashing():
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)
    assert not verify_password("secret123", "")
