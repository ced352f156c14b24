"""Test suite for the /v1/auth routes."""

from __future__ import annotations

from fastapi.testclient import TestClient

from carlot.adapters.in_memory_auth_service import InMemoryAuthService
from carlot.domain.auth import AuthSession

# ==============================================================================
# Sign-up and sign-in
# ==============================================================================


def test_sign_up_returns_201_with_tokens(client: TestClient) -> None:
    response = client.post(
        "/v1/auth/sign-up",
        json={"email": "new@example.com", "password": "secret1", "full_name": "New Dealer"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "new@example.com"
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["refresh_token"]


def test_sign_up_then_profile_is_created(client: TestClient) -> None:
    session = client.post(
        "/v1/auth/sign-up",
        json={"email": "new@example.com", "password": "secret1", "full_name": "New Dealer", "phone": "555"},
    ).json()

    response = client.get(
        "/v1/profile", headers={"Authorization": f"Bearer {session['access_token']}"}
    )

    assert response.status_code == 200
    assert response.json()["full_name"] == "New Dealer"
    assert response.json()["phone"] == "555"


def test_sign_up_with_short_password_is_422(client: TestClient) -> None:
    response = client.post(
        "/v1/auth/sign-up",
        json={"email": "new@example.com", "password": "123", "full_name": "New Dealer"},
    )

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "password"


def test_sign_up_with_taken_email_is_409(client: TestClient, auth_session: AuthSession) -> None:
    response = client.post(
        "/v1/auth/sign-up",
        json={"email": "dealer@example.com", "password": "secret1", "full_name": "Again"},
    )

    assert response.status_code == 409


def test_sign_in(client: TestClient, auth_session: AuthSession) -> None:
    response = client.post(
        "/v1/auth/sign-in", json={"email": "dealer@example.com", "password": "secret1"}
    )

    assert response.status_code == 200
    assert response.json()["user_id"] == auth_session.user.id


def test_sign_in_with_wrong_password_is_401(client: TestClient, auth_session: AuthSession) -> None:
    response = client.post(
        "/v1/auth/sign-in", json={"email": "dealer@example.com", "password": "nope-nope"}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid login credentials"


def test_auth_service_outage_is_502(client: TestClient, auth_service: InMemoryAuthService) -> None:
    auth_service.unavailable = True

    response = client.post(
        "/v1/auth/sign-in", json={"email": "dealer@example.com", "password": "secret1"}
    )

    assert response.status_code == 502
    assert response.json()["code"] == "UPSTREAM_ERROR"


# ==============================================================================
# Refresh and sign-out
# ==============================================================================


def test_refresh_issues_new_access_token(client: TestClient, auth_session: AuthSession) -> None:
    response = client.post("/v1/auth/refresh", json={"refresh_token": auth_session.refresh_token})

    assert response.status_code == 200
    assert response.json()["access_token"] != auth_session.access_token


def test_refresh_with_unknown_token_is_401(client: TestClient) -> None:
    response = client.post("/v1/auth/refresh", json={"refresh_token": "nope"})

    assert response.status_code == 401


def test_sign_out_revokes_token(
    client: TestClient, auth_headers: dict[str, str]
) -> None:
    response = client.post("/v1/auth/sign-out", headers=auth_headers)

    assert response.status_code == 204
    assert client.get("/v1/profile", headers=auth_headers).status_code == 401


def test_sign_out_without_token_is_401(client: TestClient) -> None:
    response = client.post("/v1/auth/sign-out")

    assert response.status_code == 401
