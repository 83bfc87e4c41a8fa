"""
Tests for the admin endpoints: login, password, providers and user keys.
"""

from fastapi.testclient import TestClient

from app.main import app
from tests.conftest import ADMIN_PASSWORD, bearer


# Admin login and password

def test_first_admin_login_bootstraps_and_sets_cookie(client):
    response = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    data = response.json()
    assert data["bootstrapped"] is True
    assert data["token"]
    assert response.headers["cache-control"] == "no-store"

    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith("pw_admin_session=")
    assert "HttpOnly" in set_cookie
    assert "samesite=lax" in set_cookie.lower()
    assert "Path=/" in set_cookie
    assert "Max-Age=604800" in set_cookie


def test_second_admin_login_with_other_password_fails(client, admin_headers):
    response = client.post("/api/admin/login", json={"password": "something-else"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid password"}

    response = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    assert response.json()["bootstrapped"] is False


def test_admin_login_requires_password(client):
    response = client.post("/api/admin/login", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing password"}


def test_change_password(client, admin_headers):
    response = client.put(
        "/api/admin/password",
        headers=admin_headers,
        json={"currentPassword": ADMIN_PASSWORD, "newPassword": "brand-new-pass"},
    )
    assert response.status_code == 200
    assert response.json() == {"success": True}

    assert client.post("/api/admin/login", json={"password": ADMIN_PASSWORD}).status_code == 401
    assert client.post("/api/admin/login", json={"password": "brand-new-pass"}).status_code == 200

    # Issued tokens stay valid after a password change
    assert client.get("/api/admin/providers", headers=admin_headers).status_code == 200


def test_change_password_validation(client, admin_headers):
    response = client.put(
        "/api/admin/password",
        headers=admin_headers,
        json={"currentPassword": ADMIN_PASSWORD},
    )
    assert response.status_code == 400

    response = client.put(
        "/api/admin/password",
        headers=admin_headers,
        json={"currentPassword": ADMIN_PASSWORD, "newPassword": "short"},
    )
    assert response.status_code == 400
    assert "at least 6" in response.json()["error"]

    response = client.put(
        "/api/admin/password",
        headers=admin_headers,
        json={"currentPassword": "wrong-password", "newPassword": "long-enough"},
    )
    assert response.status_code == 401


def test_change_password_requires_admin_session():
    response = TestClient(app).put(
        "/api/admin/password",
        json={"currentPassword": "a", "newPassword": "bbbbbbbb"},
    )
    assert response.status_code == 401


# Providers

def test_create_and_list_providers(client, admin_headers, provider):
    assert provider["name"] == "nano"
    assert provider["displayName"] == "Nano Banana"
    assert provider["apiKeyMasked"] == "****************1234"
    assert provider["hasApiKey"] is True
    assert provider["isActive"] is True
    assert "apiKey" not in provider

    response = client.get("/api/admin/providers", headers=admin_headers)
    assert response.status_code == 200
    providers = response.json()["providers"]
    assert len(providers) == 1
    listed = providers[0]
    assert listed["apiKey"] == "sk-upstream-abcd1234"
    assert listed["modelId"] == "gemini-2.5-flash-image"
    assert listed["baseUrl"] == "https://upstream.example.com/"
    assert {"id", "createdAt", "updatedAt"} <= set(listed)


def test_update_provider_keeps_key_when_blank(client, admin_headers, provider):
    response = client.post(
        "/api/admin/providers",
        headers=admin_headers,
        json={
            "id": provider["id"],
            "name": "nano",
            "displayName": "Nano Banana Pro",
            "modelId": "gemini-3-pro-image",
            "baseUrl": "https://upstream.example.com",
            "apiKey": "",
            "isActive": False,
        },
    )
    assert response.status_code == 200
    saved = response.json()["provider"]
    assert saved["id"] == provider["id"]
    assert saved["displayName"] == "Nano Banana Pro"
    assert saved["isActive"] is False
    assert saved["apiKeyMasked"].endswith("1234")

    listed = client.get("/api/admin/providers", headers=admin_headers).json()["providers"]
    assert listed[0]["apiKey"] == "sk-upstream-abcd1234"


def test_provider_validation(client, admin_headers):
    base = {
        "name": "nano",
        "displayName": "Nano",
        "modelId": "m",
        "baseUrl": "https://upstream.example.com",
        "apiKey": "k",
    }

    response = client.post("/api/admin/providers", headers=admin_headers, json={**base, "modelId": "  "})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}

    response = client.post("/api/admin/providers", headers=admin_headers, json={**base, "baseUrl": "ftp://host"})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid baseUrl"}

    response = client.post("/api/admin/providers", headers=admin_headers, json={**base, "baseUrl": "not a url"})
    assert response.status_code == 400

    response = client.post("/api/admin/providers", headers=admin_headers, json={**base, "apiKey": None})
    assert response.status_code == 400
    assert response.json() == {"error": "apiKey is required for create"}

    response = client.post("/api/admin/providers", headers=admin_headers, json={**base, "id": 404})
    assert response.status_code == 404


def test_delete_provider(client, admin_headers, provider):
    response = client.delete(f"/api/admin/providers/{provider['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"ok": True}

    assert client.get("/api/admin/providers", headers=admin_headers).json() == {"providers": []}

    response = client.delete(f"/api/admin/providers/{provider['id']}", headers=admin_headers)
    assert response.status_code == 404

    response = client.delete("/api/admin/providers/not-a-number", headers=admin_headers)
    assert response.status_code == 400


def test_provider_endpoints_reject_user_tokens(client, user_headers):
    response = client.get("/api/admin/providers", headers=user_headers)
    assert response.status_code == 403


# User keys

def test_create_and_list_users(client, admin_headers, user_key):
    assert user_key["key"] == "alice-key-1"
    assert user_key["user"]["name"] == "Alice"
    assert user_key["user"]["plainKey"] == "alice-key-1"
    assert user_key["user"]["usageCount"] == 0
    assert user_key["user"]["isActive"] is True

    response = client.get("/api/admin/users", headers=admin_headers)
    assert response.status_code == 200
    users = response.json()["users"]
    assert len(users) == 1
    listed = users[0]
    assert listed["name"] == "Alice"
    assert len(listed["keyId"]) == 64
    assert listed["usages"] == []
    assert listed["lastUsedAt"] is None
    assert "key" not in listed


def test_create_user_response_is_not_cached(client, admin_headers):
    response = client.post("/api/admin/users", headers=admin_headers, json={"name": "Bob", "key": "bob-key"})
    assert response.status_code == 200
    assert response.headers["cache-control"] == "no-store"


def test_create_user_validation(client, admin_headers, user_key):
    response = client.post("/api/admin/users", headers=admin_headers, json={"name": "  ", "key": "k"})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing name"}

    response = client.post("/api/admin/users", headers=admin_headers, json={"name": "Bob"})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing key"}

    response = client.post("/api/admin/users", headers=admin_headers, json={"name": "Bob", "key": "alice-key-1"})
    assert response.status_code == 400
    assert response.json() == {"error": "Key already exists"}


def test_patch_user(client, admin_headers, user_key):
    user_id = user_key["user"]["id"]

    response = client.patch(
        f"/api/admin/users/{user_id}",
        headers=admin_headers,
        json={"name": "Alice B.", "plainKey": " alice-key-2 "},
    )
    assert response.status_code == 200
    assert response.json() == {
        "user": {"id": user_id, "name": "Alice B.", "plainKey": "alice-key-2", "isActive": True}
    }

    assert client.post("/api/auth/login", json={"key": "alice-key-1"}).status_code == 401
    assert client.post("/api/auth/login", json={"key": "alice-key-2"}).status_code == 200


def test_patch_user_errors(client, admin_headers, user_key):
    user_id = user_key["user"]["id"]

    response = client.patch(f"/api/admin/users/{user_id}", headers=admin_headers, json={})
    assert response.status_code == 400
    assert response.json() == {"error": "No fields to update"}

    response = client.patch("/api/admin/users/9999", headers=admin_headers, json={"name": "Ghost"})
    assert response.status_code == 404

    response = client.patch("/api/admin/users/abc", headers=admin_headers, json={"name": "Ghost"})
    assert response.status_code == 400

    client.post("/api/admin/users", headers=admin_headers, json={"name": "Bob", "key": "bob-key"})
    response = client.patch(f"/api/admin/users/{user_id}", headers=admin_headers, json={"plainKey": "bob-key"})
    assert response.status_code == 400
    assert response.json() == {"error": "Key already exists"}


def test_deactivated_user_is_locked_out(client, admin_headers, user_key, user_headers):
    user_id = user_key["user"]["id"]
    assert client.get("/api/models", headers=user_headers).status_code == 200

    response = client.patch(f"/api/admin/users/{user_id}", headers=admin_headers, json={"isActive": False})
    assert response.status_code == 200
    assert response.json()["user"]["isActive"] is False

    response = client.get("/api/models", headers=user_headers)
    assert response.status_code == 403
    assert response.json() == {"error": "User disabled"}

    response = client.post("/api/auth/login", json={"key": "alice-key-1"})
    assert response.status_code == 403


def test_deleted_user_token_stops_working(client, admin_headers, user_key, user_headers):
    user_id = user_key["user"]["id"]

    response = client.delete(f"/api/admin/users/{user_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"ok": True}

    response = client.get("/api/models", headers=user_headers)
    assert response.status_code == 401
    assert response.json() == {"error": "User not found"}

    response = client.delete(f"/api/admin/users/{user_id}", headers=admin_headers)
    assert response.status_code == 404


def test_admin_token_works_as_cookie(client):
    token = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD}).json()["token"]
    fresh = TestClient(app)
    response = fresh.get("/api/admin/users", headers={"Cookie": f"pw_admin_session={token}"})
    assert response.status_code == 200
    assert fresh.get("/api/admin/users", headers=bearer(token)).status_code == 200
