from fastapi.testclient import TestClient

from app.main import app

client = TestClient(app)

API = "/api/v1"


def make_site(headers, products=None, type="Shop"):
    response = client.post(
        f"{API}/sites",
        json={"name": "Product Test", "type": type, "products": products or []},
        headers=headers
    )
    assert response.status_code == 201
    return response.json()["siteId"]


def test_add_update_delete_product(store_headers):
    site_id = make_site(store_headers)

    response = client.post(f"{API}/sites/{site_id}/products", json={"name": "Tea"}, headers=store_headers)
    assert response.status_code == 201
    product = response.json()
    assert product["price"] == 0
    assert product["description"] == ""
    assert product["is_live"] is True

    response = client.patch(
        f"{API}/sites/{site_id}/products/{product['id']}",
        json={"price": 15, "description": "Masala chai"},
        headers=store_headers
    )
    assert response.status_code == 200
    assert response.json()["price"] == 15
    assert response.json()["name"] == "Tea"

    response = client.post(
        f"{API}/sites/{site_id}/products/{product['id']}/live",
        json={"is_live": False},
        headers=store_headers
    )
    assert response.json()["is_live"] is False

    response = client.delete(f"{API}/sites/{site_id}/products/{product['id']}", headers=store_headers)
    assert response.status_code == 200

    response = client.delete(f"{API}/sites/{site_id}/products/{product['id']}", headers=store_headers)
    assert response.status_code == 404


def test_product_name_required(store_headers):
    site_id = make_site(store_headers)
    response = client.post(f"{API}/sites/{site_id}/products", json={"price": 10}, headers=store_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Product name is required"


def test_product_limit(store_headers):
    site_id = make_site(store_headers, products=[{"name": f"Item {i}"} for i in range(10)])

    response = client.post(f"{API}/sites/{site_id}/products", json={"name": "Eleventh"}, headers=store_headers)
    assert response.status_code == 403
    assert response.json()["code"] == "PLAN_LIMIT"


def test_products_of_unowned_site(client, store_headers, auth_headers):
    site_id = make_site(store_headers)
    response = client.post(f"{API}/sites/{site_id}/products", json={"name": "Sneaky"}, headers=auth_headers)
    assert response.status_code == 404
