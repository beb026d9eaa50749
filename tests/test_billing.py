import asyncio
from datetime import timedelta

from fastapi.testclient import TestClient

from app.main import app
from conftest import signup
from utils.time_utils import utcnow

client = TestClient(app)

API = "/api/v1"


def test_plans_catalog():
    plans = {p["code"]: p for p in client.get(f"{API}/billing/plans").json()}
    assert set(plans) == {"base", "pro", "menu_base", "menu_pro"}
    assert (plans["base"]["price"], plans["base"]["site_limit"], plans["base"]["product_limit"]) == (349, 1, 10)
    assert (plans["pro"]["price"], plans["pro"]["site_limit"], plans["pro"]["product_limit"]) == (649, 2, 15)
    assert (plans["menu_base"]["price"], plans["menu_base"]["site_limit"]) == (249, 1)
    assert (plans["menu_pro"]["price"], plans["menu_pro"]["product_limit"]) == (449, 20)
    assert plans["menu_pro"]["family"] == "menu"


def test_recharge_sets_limit_and_history(auth_headers):
    response = client.post(f"{API}/billing/recharge", json={"plan": "menu_pro"}, headers=auth_headers)
    assert response.status_code == 200
    subscription = response.json()
    assert subscription["menu_plan"] == "menu_pro"
    assert subscription["menu_limit"] == 2
    assert subscription["menu"]["active"] is True
    assert subscription["menu"]["days_left"] == 30
    assert subscription["store"]["active"] is False
    assert subscription["store"]["days_left"] == 0

    history = client.get(f"{API}/billing/history", headers=auth_headers).json()["records"]
    assert len(history) == 1
    assert history[0]["plan_name"] == "menu_pro Menu"
    assert history[0]["amount"] == 449
    assert history[0]["status"] == "Success"


def test_recharge_while_active_conflicts(store_headers):
    response = client.post(f"{API}/billing/recharge", json={"plan": "pro"}, headers=store_headers)
    assert response.status_code == 409
    assert response.json()["error"].startswith("Your Store plan is still active")

    # The other family is independent
    response = client.post(f"{API}/billing/recharge", json={"plan": "menu_base"}, headers=store_headers)
    assert response.status_code == 200


def test_unknown_plan(auth_headers):
    response = client.post(f"{API}/billing/recharge", json={"plan": "gold"}, headers=auth_headers)
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_expired_plan_blocks_publishing(client, db):
    headers, user_id = signup(client)
    client.post(f"{API}/billing/recharge", json={"plan": "base"}, headers=headers)

    asyncio.run(db.subscriptions.update_one(
        {"user_id": user_id},
        {"$set": {"store_expires_at": utcnow() - timedelta(days=1)}}
    ))
    asyncio.run(db.billing_history.update_many(
        {"user_id": user_id},
        {"$set": {"created_at": utcnow() - timedelta(days=31)}}
    ))

    response = client.post(f"{API}/sites", json={"name": "Late Shop"}, headers=headers)
    assert response.status_code == 403
    assert response.json()["error"] == "Store plan has expired. Please recharge."

    # An expired family can be recharged again
    response = client.post(f"{API}/billing/recharge", json={"plan": "pro"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["shop_limit"] == 2

    history = client.get(f"{API}/billing/history", headers=headers).json()["records"]
    assert [r["plan_name"] for r in history] == ["pro Store", "base Store"]


def test_subscription_usage_counts(store_headers):
    client.post(f"{API}/sites", json={"name": "Counted"}, headers=store_headers)
    subscription = client.get(f"{API}/billing/subscription", headers=store_headers).json()
    assert subscription["store"]["used"] == 1
    assert subscription["store"]["limit"] == 1
    assert subscription["menu"]["used"] == 0
