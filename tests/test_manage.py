import asyncio

import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.security import create_shop_owner_token
from app.main import app
from utils.constants import BUCKET_SHOP_IMAGES

API = "/api/v1"

PHONE = "9876543210"


@pytest.fixture
def shop(client, store_headers):
    response = client.post(
        f"{API}/sites",
        json={
            "name": "Lakshmi Stores",
            "contact_number": PHONE,
            "products": [{"name": "Sugar", "price": 45}]
        },
        headers=store_headers
    )
    assert response.status_code == 201
    return response.json()["siteId"]


@pytest.fixture
def owner_client(shop, db):
    owner = asyncio.run(db.shop_owners.find_one({"phone": f"+91{PHONE}"}))
    owner_client = TestClient(app)
    owner_client.cookies.set(settings.SHOP_AUTH_COOKIE, create_shop_owner_token(owner["id"], shop))
    return owner_client


def test_requires_cookie():
    anonymous = TestClient(app)
    assert anonymous.get(f"{API}/manage/shop").status_code == 401

    anonymous.cookies.set(settings.SHOP_AUTH_COOKIE, "garbage")
    assert anonymous.get(f"{API}/manage/shop").status_code == 401


def test_otp_login_then_manage(client, shop):
    otp = client.post(f"{API}/auth/send-otp", json={"phone": PHONE}).json()["debug_otp"]
    login = client.post(f"{API}/auth/verify-otp", json={"phone": PHONE, "otp": otp})
    assert login.status_code == 200

    owner_client = TestClient(app)
    owner_client.cookies.set(settings.SHOP_AUTH_COOKIE, login.cookies[settings.SHOP_AUTH_COOKIE])

    response = owner_client.get(f"{API}/manage/shop")
    assert response.status_code == 200
    assert response.json()["shop"]["id"] == shop
    assert response.json()["shop"]["name"] == "Lakshmi Stores"


def test_update_shop_only_allowed_fields(owner_client):
    response = owner_client.put(
        f"{API}/manage/shop",
        json={"name": "Lakshmi Super Stores", "tagline": "Fresh daily", "slug": "hijacked", "user_id": "x"}
    )
    assert response.status_code == 200
    shop = response.json()["shop"]
    assert shop["name"] == "Lakshmi Super Stores"
    assert shop["tagline"] == "Fresh daily"
    assert shop["slug"] == "lakshmi-stores"
    assert shop["user_id"] != "x"


def test_update_shop_rejects_wrong_types(owner_client):
    response = owner_client.put(f"{API}/manage/shop", json={"contact_number": 9876543211})
    assert response.status_code == 200
    assert response.json()["shop"]["contact_number"] == "+919876543211"

    response = owner_client.put(f"{API}/manage/shop", json={"timing": {"open": "9"}, "description": 5})
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"

    # Public pages still render after the rejected update
    assert owner_client.get(f"{API}/shop/lakshmi-stores").status_code == 200
    assert owner_client.get(f"{API}/s/lakshmi-stores").status_code == 200


def test_cannot_manage_other_shop(owner_client):
    response = owner_client.put(f"{API}/manage/shop", json={"shopId": "another-shop", "name": "Mine now"})
    assert response.status_code == 403


def test_manage_products(owner_client, shop):
    response = owner_client.post(
        f"{API}/manage/products",
        json={"shopId": shop, "product": {"name": "Jaggery", "price": 70, "description": "Organic"}}
    )
    assert response.status_code == 200
    product = response.json()["product"]
    assert product["name"] == "Jaggery"

    response = owner_client.put(
        f"{API}/manage/products",
        json={"shopId": shop, "productId": product["id"], "updates": {"price": 80}}
    )
    assert response.status_code == 200

    products = owner_client.get(f"{API}/manage/shop").json()["shop"]["products"]
    assert {p["name"]: p["price"] for p in products} == {"Sugar": 45, "Jaggery": 80}

    response = owner_client.delete(f"{API}/manage/products", params={"shopId": shop, "productId": product["id"]})
    assert response.status_code == 200
    assert len(owner_client.get(f"{API}/manage/shop").json()["shop"]["products"]) == 1


def test_manage_product_validation(owner_client):
    response = owner_client.post(f"{API}/manage/products", json={"product": {"price": 10}})
    assert response.status_code == 400

    response = owner_client.put(f"{API}/manage/products", json={"updates": {"price": 1}})
    assert response.status_code == 400

    response = owner_client.delete(f"{API}/manage/products")
    assert response.status_code == 400


def test_upload_image(owner_client, shop, storage):
    response = owner_client.post(
        f"{API}/manage/images",
        files={"image": ("logo.png", b"\x89PNG fake", "image/png")},
        data={"type": "logo"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["path"].startswith(f"{shop}/logo-")
    assert body["path"].endswith(".png")
    assert body["url"] == f"{settings.files_base_url}/{BUCKET_SHOP_IMAGES}/{body['path']}"
    assert storage.objects[(BUCKET_SHOP_IMAGES, body["path"])] == (b"\x89PNG fake", "image/png")

    # Served back through the files route
    served = owner_client.get(f"{API}/files/{BUCKET_SHOP_IMAGES}/{body['path']}")
    assert served.status_code == 200
    assert served.content == b"\x89PNG fake"
    assert served.headers["content-type"] == "image/png"


def test_upload_rejects_non_images(owner_client, monkeypatch):
    response = owner_client.post(
        f"{API}/manage/images",
        files={"image": ("notes.txt", b"hello", "text/plain")},
        data={"type": "logo"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Only image files are allowed"

    monkeypatch.setattr(settings, "MAX_IMAGE_SIZE_MB", 0)
    response = owner_client.post(
        f"{API}/manage/images",
        files={"image": ("big.jpg", b"x" * 10, "image/jpeg")},
        data={"type": "hero"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Image must be less than 0MB"


def test_missing_file_is_404(client):
    assert client.get(f"{API}/files/{BUCKET_SHOP_IMAGES}/nope.png").status_code == 404
    assert client.get(f"{API}/files/not-a-bucket/x.png").status_code == 404
