from fastapi.testclient import TestClient

from app.core.config import settings
from app.main import app
from conftest import signup
from utils.constants import BUCKET_PRODUCT_IMAGES

client = TestClient(app)

API = "/api/v1"


def test_profile_created_on_signup():
    headers, _ = signup(client, full_name="Anitha R")
    profile = client.get(f"{API}/profile", headers=headers).json()
    email = client.get(f"{API}/auth/me", headers=headers).json()["email"]
    assert profile == {
        "username": "",
        "full_name": "Anitha R",
        "phone_number": "",
        "contact_email": email,
        "avatar_url": ""
    }


def test_update_profile_syncs_account_name(auth_headers):
    response = client.put(
        f"{API}/profile",
        json={"full_name": "Kavya S", "phone_number": "9876543210", "email": "ignored@example.com"},
        headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["full_name"] == "Kavya S"
    assert response.json()["phone_number"] == "9876543210"

    assert client.get(f"{API}/auth/me", headers=auth_headers).json()["full_name"] == "Kavya S"

    # Fields left out are untouched
    client.put(f"{API}/profile", json={"username": "kavya"}, headers=auth_headers)
    profile = client.get(f"{API}/profile", headers=auth_headers).json()
    assert profile["username"] == "kavya"
    assert profile["full_name"] == "Kavya S"


def test_profile_requires_auth():
    assert client.get(f"{API}/profile").status_code == 401


def test_avatar_upload(auth_headers, storage):
    response = client.post(
        f"{API}/profile/avatar",
        files={"image": ("me.JPG", b"jpeg-bytes", "image/jpeg")},
        headers=auth_headers
    )
    assert response.status_code == 200
    avatar_url = response.json()["avatar_url"]
    assert avatar_url.startswith(f"{settings.files_base_url}/{BUCKET_PRODUCT_IMAGES}/")
    assert avatar_url.endswith(".jpg")

    path = avatar_url.rsplit("/", 1)[-1]
    assert storage.objects[(BUCKET_PRODUCT_IMAGES, path)] == (b"jpeg-bytes", "image/jpeg")


def test_avatar_must_be_an_image(auth_headers):
    response = client.post(
        f"{API}/profile/avatar",
        files={"image": ("me.pdf", b"%PDF", "application/pdf")},
        headers=auth_headers
    )
    assert response.status_code == 400
