"""
Tests for the aura API routes.
"""

import base64
import uuid

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from api_gateway import dependencies
from api_gateway.main import app

JPEG_BYTES = b"\xff\xd8\xff\xe0 fake jpeg body"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_scan_check_for_new_user(client):
    response = client.get("/api/v1/aura/scan/check")
    assert response.status_code == 200
    assert response.json() == {"can_scan": True, "remaining": 2, "is_subscribed": False}


def test_scan_with_url(client, current_user):
    response = client.post("/api/v1/aura/scan", json={"image_url": "https://x/y.jpg"})

    assert response.status_code == 201
    data = response.json()
    assert data["user_id"] == current_user["user_id"]
    assert data["image_url"] == "https://x/y.jpg"
    assert 1 <= data["energy_level"] <= 100
    assert 1 <= data["mood_score"] <= 10
    assert len(data["strengths"]) == 3
    assert data["personality"]
    uuid.UUID(data["id"])


def test_scan_with_image_data(client):
    data = base64.b64encode(JPEG_BYTES).decode()
    response = client.post("/api/v1/aura/scan", json={"image_data": data})
    assert response.status_code == 201
    assert response.json()["image_url"] is None


@pytest.mark.parametrize("body", [{}, {"image_url": "not-a-url"}, {"image_data": "%%%"}])
def test_scan_bad_input_is_400(client, body):
    response = client.post("/api/v1/aura/scan", json=body)
    assert response.status_code == 400


def test_scan_over_daily_limit_is_429(client):
    for i in range(2):
        assert client.post("/api/v1/aura/scan", json={"image_url": f"https://x/{i}.jpg"}).status_code == 201

    response = client.post("/api/v1/aura/scan", json={"image_url": "https://x/3.jpg"})

    assert response.status_code == 429
    assert "Daily scan limit" in response.json()["detail"]
    assert client.get("/api/v1/aura/scan/check").json()["can_scan"] is False


def test_scan_upload(client):
    response = client.post(
        "/api/v1/aura/scan/upload",
        files={"image": ("photo.jpg", JPEG_BYTES, "image/jpeg")},
    )
    assert response.status_code == 201
    assert response.json()["image_url"] is None


def test_scan_upload_accepts_files_above_base64_limit(client):
    """A 3 MB photo is under the 4 MB upload cap even though its base64 form is over 3 MB."""
    photo = JPEG_BYTES + b"\0" * (3 * 1024 * 1024)
    response = client.post(
        "/api/v1/aura/scan/upload",
        files={"image": ("photo.jpg", photo, "image/jpeg")},
    )
    assert response.status_code == 201
    assert response.json()["image_url"] is None


def test_scan_upload_over_4mb_is_400(client):
    photo = JPEG_BYTES + b"\0" * (4 * 1024 * 1024)
    response = client.post(
        "/api/v1/aura/scan/upload",
        files={"image": ("photo.jpg", photo, "image/jpeg")},
    )
    assert response.status_code == 400
    assert "4MB" in response.json()["detail"]


def test_scan_upload_rejects_other_types(client):
    response = client.post(
        "/api/v1/aura/scan/upload",
        files={"image": ("anim.gif", b"GIF89a", "image/gif")},
    )
    assert response.status_code == 400


def test_get_list_delete_flow(client):
    created = client.post("/api/v1/aura/scan", json={"image_url": "https://x/y.jpg"}).json()

    got = client.get(f"/api/v1/aura/{created['id']}")
    assert got.status_code == 200
    assert got.json()["id"] == created["id"]

    page = client.get("/api/v1/aura", params={"page": 1, "page_size": 10}).json()
    assert page["total_count"] == 1
    assert page["page_size"] == 10
    assert page["data"][0]["id"] == created["id"]

    assert client.get("/api/v1/aura/latest").json()["id"] == created["id"]
    assert client.get("/api/v1/aura/today").json()["id"] == created["id"]

    assert client.delete(f"/api/v1/aura/{created['id']}").status_code == 204
    assert client.get(f"/api/v1/aura/{created['id']}").status_code == 404
    assert client.delete(f"/api/v1/aura/{created['id']}").status_code == 404


def test_list_clamps_page_size(client):
    page = client.get("/api/v1/aura", params={"page": 0, "page_size": 500}).json()
    assert page["page"] == 1
    assert page["page_size"] == 100
    assert page["data"] == []


def test_invalid_reading_id_is_400(client):
    assert client.get("/api/v1/aura/not-a-uuid").status_code == 400
    assert client.delete("/api/v1/aura/not-a-uuid").status_code == 400


def test_latest_and_today_404_without_readings(client):
    assert client.get("/api/v1/aura/latest").status_code == 404
    assert client.get("/api/v1/aura/today").status_code == 404


def test_stats(client):
    client.post("/api/v1/aura/scan", json={"image_url": "https://x/y.jpg"})
    stats = client.get("/api/v1/aura/stats").json()
    assert stats["total_readings"] == 1
    assert sum(stats["color_distribution"].values()) == 1


# --- authentication ----------------------------------------------------------


@pytest.fixture()
def unauthenticated_client(aura_service, monkeypatch):
    """Client with the real auth dependency and a known JWT secret."""
    monkeypatch.setattr(dependencies.settings, "jwt_secret_key", "test-secret")
    app.dependency_overrides[dependencies.get_aura_service] = lambda: aura_service
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_missing_token_is_401(unauthenticated_client):
    assert unauthenticated_client.get("/api/v1/aura/scan/check").status_code == 401


def test_invalid_token_is_401(unauthenticated_client):
    response = unauthenticated_client.get(
        "/api/v1/aura/scan/check", headers={"Authorization": "Bearer garbage"}
    )
    assert response.status_code == 401


def test_valid_token_reaches_route(unauthenticated_client):
    token = jwt.encode({"sub": "user-42", "email": "a@b.c"}, "test-secret", algorithm="HS256")
    response = unauthenticated_client.get(
        "/api/v1/aura/scan/check", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 200
    assert response.json()["remaining"] == 2


def test_token_without_subject_is_401(unauthenticated_client):
    token = jwt.encode({"email": "a@b.c"}, "test-secret", algorithm="HS256")
    response = unauthenticated_client.get(
        "/api/v1/aura/scan/check", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401
