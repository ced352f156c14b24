"""Test suite for GET /v1/documents/resolve."""

from __future__ import annotations

from fastapi.testclient import TestClient

from carlot.adapters.in_memory_auth_service import InMemoryAuthService
from carlot.adapters.in_memory_object_storage import InMemoryObjectStorage
from carlot.domain.auth import AuthSession


def test_resolve_signs_stored_document(
    client: TestClient,
    auth_headers: dict[str, str],
    auth_session: AuthSession,
    storage: InMemoryObjectStorage,
) -> None:
    key = f"{auth_session.user.id}/1-id.pdf"
    storage.upload("client-documents", key, b"%PDF")
    url = storage.get_public_url("client-documents", key)

    response = client.get("/v1/documents/resolve", headers=auth_headers, params={"url": url})

    assert response.status_code == 200
    assert response.json() == {
        "url": f"{url}?expires=60&signature=test",
        "signed": True,
        "available": True,
    }


def test_resolve_missing_document(
    client: TestClient,
    auth_headers: dict[str, str],
    auth_session: AuthSession,
    storage: InMemoryObjectStorage,
) -> None:
    url = storage.get_public_url("car-documents", f"{auth_session.user.id}/c/gone.pdf")

    response = client.get("/v1/documents/resolve", headers=auth_headers, params={"url": url})

    assert response.json() == {"url": url, "signed": False, "available": False}


def test_other_vendor_cannot_resolve_client_document(
    client: TestClient,
    auth_session: AuthSession,
    auth_service: InMemoryAuthService,
    storage: InMemoryObjectStorage,
) -> None:
    key = f"{auth_session.user.id}/1700000000000-aadhaar.pdf"
    storage.upload("client-documents", key, b"%PDF")
    other = auth_service.issue_session(
        auth_service.add_user("b@example.com", "secret2", {"full_name": "Dealer Two"})
    )

    response = client.get(
        "/v1/documents/resolve",
        headers={"Authorization": f"Bearer {other.access_token}"},
        params={"url": storage.get_public_url("client-documents", key)},
    )

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_resolve_requires_token(client: TestClient) -> None:
    response = client.get("/v1/documents/resolve", params={"url": "https://example.com/a.pdf"})

    assert response.status_code == 401


def test_resolve_requires_url(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.get("/v1/documents/resolve", headers=auth_headers)

    assert response.status_code == 422
