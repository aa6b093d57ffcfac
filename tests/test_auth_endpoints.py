"""Tests for passphrase and session endpoints."""

from dataclasses import replace

from fastapi.testclient import TestClient

from wedding_gallery.api.app import create_app
from wedding_gallery.api.sessions import SESSION_COOKIE_NAME


def test_health(client) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_sections_lists_public_fields(client) -> None:
    response = client.get("/api/auth/sections")

    assert response.status_code == 200
    assert response.json() == {
        "sections": [
            {"id": "ceremony", "name": "Ceremony", "isAuthorized": False},
            {"id": "reception", "name": "Reception", "isAuthorized": False},
            {"id": "party", "name": "Party", "isAuthorized": False},
        ]
    }


def test_verify_grants_section_and_sets_cookie(client) -> None:
    response = client.post(
        "/api/auth/verify", json={"sectionId": "ceremony", "passphrase": "rings"}
    )

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["section"] == {"id": "ceremony", "name": "Ceremony"}
    assert SESSION_COOKIE_NAME in response.cookies

    sections = client.get("/api/auth/sections").json()["sections"]
    assert [section["isAuthorized"] for section in sections] == [True, False, False]


def test_verify_accumulates_sections(client, unlock) -> None:
    unlock("ceremony")
    unlock("party")
    unlock("ceremony")

    response = client.get("/api/auth/status")

    assert response.json() == {
        "isAuthenticated": True,
        "authorizedSections": ["ceremony", "party"],
    }


def test_status_lists_sections_in_unlock_order(client, unlock) -> None:
    unlock("party")
    unlock("ceremony")

    response = client.get("/api/auth/status")

    assert response.json()["authorizedSections"] == ["party", "ceremony"]


def test_verify_missing_fields(client) -> None:
    response = client.post("/api/auth/verify", json={"sectionId": "ceremony"})

    assert response.status_code == 400
    assert response.json() == {"error": "Section ID and passphrase are required"}


def test_verify_without_body(client) -> None:
    response = client.post("/api/auth/verify")

    assert response.status_code == 400


def test_verify_unknown_section(client) -> None:
    response = client.post(
        "/api/auth/verify", json={"sectionId": "honeymoon", "passphrase": "rings"}
    )

    assert response.status_code == 404


def test_verify_wrong_passphrase(client) -> None:
    response = client.post(
        "/api/auth/verify", json={"sectionId": "ceremony", "passphrase": "cake"}
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid passphrase"}
    assert client.get("/api/auth/status").json()["isAuthenticated"] is False


def test_verify_reports_session_save_failure(client, session_store) -> None:
    session_store.fail_saves = True

    response = client.post(
        "/api/auth/verify", json={"sectionId": "ceremony", "passphrase": "rings"}
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Verification failed"}
    assert SESSION_COOKIE_NAME not in response.cookies
    assert client.get("/api/auth/status").json()["authorizedSections"] == []


def test_status_without_session(client) -> None:
    response = client.get("/api/auth/status")

    assert response.json() == {"isAuthenticated": False, "authorizedSections": []}


def test_tampered_cookie_is_ignored(client, unlock) -> None:
    unlock("ceremony")
    client.cookies.clear()
    client.cookies.set(SESSION_COOKIE_NAME, "not-a-signed-value")

    response = client.get("/api/auth/status")

    assert response.json()["isAuthenticated"] is False


def test_logout_destroys_session(client, unlock) -> None:
    unlock("ceremony")

    response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert client.get("/api/auth/status").json()["isAuthenticated"] is False


def test_logout_reports_destroy_failure(client, unlock, session_store) -> None:
    unlock("ceremony")
    session_store.fail_destroy = True

    response = client.post("/api/auth/logout")

    assert response.status_code == 500
    assert response.json() == {"error": "Logout failed"}
    assert client.get("/api/auth/status").json()["isAuthenticated"] is True


def test_responses_carry_security_headers(client) -> None:
    response = client.post("/api/auth/verify", json={"sectionId": "ceremony"})

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["Referrer-Policy"] == "no-referrer"
    assert response.headers["Cross-Origin-Resource-Policy"] == "same-origin"
    assert "Strict-Transport-Security" not in response.headers


def test_production_adds_hsts(container) -> None:
    settings = container.settings.model_copy(update={"environment": "production"})
    client = TestClient(create_app(replace(container, settings=settings)))

    response = client.get("/api/health")

    assert response.headers["Strict-Transport-Security"].startswith("max-age=")
