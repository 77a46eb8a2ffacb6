"""Tests for the contact form endpoints."""

from __future__ import annotations

from collections.abc import Callable

from fastapi.testclient import TestClient

from conftest import EDITOR_PASSWORD, EDITOR_USERNAME

CONTACT = {
    "firstName": "Ada",
    "lastName": "Lovelace",
    "email": "ada@example.com",
    "subject": "web-development",
    "message": "Hello, I need a website built.",
}


def test_submit_contact_message(client: TestClient) -> None:
    response = client.post("/api/contact", json=CONTACT)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["id"]
    assert body["message"].startswith("Thank you")


def test_submitting_twice_creates_two_messages(admin_client: TestClient) -> None:
    first = admin_client.post("/api/contact", json=CONTACT).json()["id"]
    second = admin_client.post("/api/contact", json=CONTACT).json()["id"]

    listed = admin_client.get("/api/contact").json()

    assert first != second
    assert [message["id"] for message in listed] == [first, second]


def test_short_message_is_rejected(client: TestClient) -> None:
    response = client.post("/api/contact", json={**CONTACT, "message": "short"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert [error["field"] for error in body["errors"]] == ["message"]


def test_missing_fields_are_listed(client: TestClient) -> None:
    response = client.post("/api/contact", json={"email": "broken"})

    assert response.status_code == 400
    assert {error["field"] for error in response.json()["errors"]} == {
        "firstName",
        "lastName",
        "email",
        "subject",
        "message",
    }


def test_non_object_body_is_rejected(client: TestClient) -> None:
    response = client.post("/api/contact", json=["not", "an", "object"])
    assert response.status_code == 400


def test_listing_requires_session(client: TestClient) -> None:
    assert client.get("/api/contact").status_code == 401


def test_listing_requires_admin(
    client: TestClient, editor_user: str, login_as: Callable[[str, str], str]
) -> None:
    login_as(EDITOR_USERNAME, EDITOR_PASSWORD)

    response = client.get("/api/contact")

    assert response.status_code == 403
    assert response.json() == {"success": False, "message": "Forbidden - Admin access required"}


def test_admin_sees_stored_fields(admin_client: TestClient) -> None:
    admin_client.post("/api/contact", json=CONTACT)

    [message] = admin_client.get("/api/contact").json()

    for key, value in CONTACT.items():
        assert message[key] == value
    assert message["createdAt"]
