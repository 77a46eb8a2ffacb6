"""Tests for the admin media upload endpoints."""

from __future__ import annotations

from pathlib import Path

from fastapi.testclient import TestClient

from klystra_agency.config import Settings


def test_upload_image_returns_served_url(admin_client: TestClient, api_env: Settings) -> None:
    response = admin_client.post(
        "/api/upload/image",
        files={"image": ("Hero Shot.png", b"\x89PNG fake image", "image/png")},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["url"].startswith("/uploads/hero-shot-")
    assert body["url"].endswith(".png")

    stored = Path(api_env.upload_dir) / body["url"].removeprefix("/uploads/")
    assert stored.read_bytes() == b"\x89PNG fake image"

    served = admin_client.get(body["url"])
    assert served.status_code == 200
    assert served.content == b"\x89PNG fake image"


def test_upload_accepts_generic_file_field(admin_client: TestClient) -> None:
    response = admin_client.post(
        "/api/upload/video",
        files={"file": ("promo.mp4", b"fake video", "video/mp4")},
    )

    assert response.status_code == 200
    assert response.json()["url"].endswith(".mp4")


def test_upload_without_file(admin_client: TestClient) -> None:
    response = admin_client.post("/api/upload/image")

    assert response.status_code == 400
    assert response.json()["message"] == "No file uploaded"


def test_upload_wrong_media_type(admin_client: TestClient) -> None:
    response = admin_client.post(
        "/api/upload/video",
        files={"video": ("notes.txt", b"plain text", "text/plain")},
    )
    assert response.status_code == 400


def test_upload_too_large(admin_client: TestClient, api_env: Settings) -> None:
    oversized = b"x" * (api_env.max_upload_bytes + 1)

    response = admin_client.post(
        "/api/upload/image",
        files={"image": ("big.png", oversized, "image/png")},
    )

    assert response.status_code == 413
    assert response.json()["success"] is False
    assert list(Path(api_env.upload_dir).iterdir()) == []


def test_upload_requires_session(client: TestClient, api_env: Settings) -> None:
    response = client.post(
        "/api/upload/image",
        files={"image": ("a.png", b"data", "image/png")},
    )

    assert response.status_code == 401
    assert list(Path(api_env.upload_dir).iterdir()) == []


def test_oversized_upload_without_session_is_unauthorized(
    client: TestClient, api_env: Settings
) -> None:
    oversized = b"x" * (api_env.max_upload_bytes * 4)

    response = client.post(
        "/api/upload/video",
        files={"video": ("huge.mp4", oversized, "video/mp4")},
    )

    assert response.status_code == 401
    assert list(Path(api_env.upload_dir).iterdir()) == []


def test_upload_far_over_limit_is_rejected(admin_client: TestClient, api_env: Settings) -> None:
    oversized = b"x" * (api_env.max_upload_bytes * 4)

    response = admin_client.post(
        "/api/upload/video",
        files={"video": ("huge.mp4", oversized, "video/mp4")},
    )

    assert response.status_code == 413
    assert list(Path(api_env.upload_dir).iterdir()) == []


def test_text_field_is_not_a_file(admin_client: TestClient) -> None:
    response = admin_client.post("/api/upload/image", data={"image": "not-a-file"})

    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "image", "message": "No file uploaded"}]
