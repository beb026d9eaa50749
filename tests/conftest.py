import uuid
from typing import Dict, Tuple

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.core.exceptions import ConflictError, ResourceNotFoundError
from app.db import mongo
from app.main import app
from app.services import storage_service
from utils.constants import STORAGE_BUCKETS

API = "/api/v1"


class InMemoryStorage(storage_service.StorageService):
    """Keeps objects in a dict instead of GridFS."""

    def __init__(self):
        self.objects: Dict[Tuple[str, str], Tuple[bytes, str]] = {}

    def _check(self, bucket):
        if bucket not in STORAGE_BUCKETS:
            raise ResourceNotFoundError(f"Unknown bucket: {bucket}")

    async def upload(self, bucket, path, data, content_type, upsert=False):
        self._check(bucket)
        if (bucket, path) in self.objects and not upsert:
            raise ConflictError(f"The resource already exists: {path}")
        self.objects[(bucket, path)] = (data, content_type)
        return path

    async def download(self, bucket, path):
        self._check(bucket)
        if (bucket, path) not in self.objects:
            raise ResourceNotFoundError("File not found")
        return self.objects[(bucket, path)]


@pytest.fixture(autouse=True)
def db():
    client = AsyncMongoMockClient()
    database = client["voicesite_test"]
    mongo.use_database(database, client)
    yield database
    mongo.use_database(None)


@pytest.fixture(autouse=True)
def storage(monkeypatch):
    fake = InMemoryStorage()
    monkeypatch.setattr(storage_service, "_storage_service", fake)
    return fake


@pytest.fixture
def client():
    return TestClient(app)


def signup(client, full_name="Test Owner"):
    email = f"owner-{uuid.uuid4().hex[:8]}@example.com"
    response = client.post(
        f"{API}/auth/signup",
        json={"email": email, "password": "secret123", "full_name": full_name}
    )
    assert response.status_code == 201
    body = response.json()
    return {"Authorization": f"Bearer {body['access_token']}"}, body["user_id"]


@pytest.fixture
def auth_headers(client):
    """Fresh account without any plan."""
    headers, _ = signup(client)
    return headers


@pytest.fixture
def store_headers(client):
    """Fresh account with an active base Store plan."""
    headers, _ = signup(client)
    response = client.post(f"{API}/billing/recharge", json={"plan": "base"}, headers=headers)
    assert response.status_code == 200
    return headers
