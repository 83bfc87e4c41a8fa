"""
Shared test fixtures.

Settings are read once at import time, so the environment is prepared before
anything from ``app`` is imported. Every test gets fresh tables in a
temporary SQLite database.
"""

import os
import tempfile

_TEST_DIR = tempfile.mkdtemp(prefix="painting-gateway-tests-")
TEST_DB_PATH = os.path.join(_TEST_DIR, "test.db")

os.environ["JWT_SECRET"] = "test-signing-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_TO_FILE"] = "false"
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"
os.environ["USER_KEY_POLICY"] = "custom"
os.environ["SQLALCHEMY_DATABASE_URI"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402

import app.models  # noqa: E402,F401
from app.database import Base, async_session  # noqa: E402
from app.dependencies.auth import get_image_client  # noqa: E402
from app.main import app  # noqa: E402
from app.services.gemini import GeminiImageClient  # noqa: E402

ADMIN_PASSWORD = "admin-pass-1"

IMAGE_PAYLOAD = {
    "candidates": [
        {
            "content": {
                "parts": [
                    {"text": "Here is your image"},
                    {"inlineData": {"mimeType": "image/png", "data": "aGVsbG8="}},
                ]
            }
        }
    ]
}


@pytest.fixture(autouse=True)
def reset_database():
    """Recreate all tables for every test."""
    engine = create_engine(f"sqlite:///{TEST_DB_PATH}")
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    engine.dispose()
    yield
    engine = create_engine(f"sqlite:///{TEST_DB_PATH}")
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
async def db():
    """Async database session on the test database."""
    async with async_session() as session:
        yield session


@pytest.fixture
def client():
    """Test client fixture."""
    return TestClient(app)


class UpstreamStub:
    """Records upstream requests and answers them with a configurable reply."""

    def __init__(self):
        self.requests = []
        self.error = None
        self.respond(200, json=IMAGE_PAYLOAD)

    def respond(self, status_code: int, **kwargs):
        self._status_code = status_code
        self._kwargs = kwargs

    def fail_with(self, error: Exception):
        self.error = error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self._status_code, **self._kwargs)


@pytest.fixture
def upstream():
    """Replace the upstream HTTP client with an in-process mock transport."""
    stub = UpstreamStub()

    async def override_image_client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(stub.handler)) as http_client:
            yield GeminiImageClient(http_client)

    app.dependency_overrides[get_image_client] = override_image_client
    yield stub
    app.dependency_overrides.pop(get_image_client, None)


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client):
    """Bootstrap the admin account and return its auth headers."""
    response = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return bearer(response.json()["token"])


@pytest.fixture
def provider(client, admin_headers):
    """An active provider routed by ``nano``."""
    response = client.post(
        "/api/admin/providers",
        headers=admin_headers,
        json={
            "name": "nano",
            "displayName": "Nano Banana",
            "modelId": "gemini-2.5-flash-image",
            "baseUrl": "https://upstream.example.com/",
            "apiKey": "sk-upstream-abcd1234",
        },
    )
    assert response.status_code == 200
    return response.json()["provider"]


@pytest.fixture
def user_key(client, admin_headers):
    """A user key ``alice-key-1`` owned by Alice."""
    response = client.post(
        "/api/admin/users",
        headers=admin_headers,
        json={"name": "Alice", "key": "alice-key-1"},
    )
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def user_headers(client, user_key):
    response = client.post("/api/auth/login", json={"key": "alice-key-1"})
    assert response.status_code == 200
    return bearer(response.json()["token"])
