"""The full app wired to the in-memory adapters of the shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from carlot.adapters.in_memory_auth_service import InMemoryAuthService
from carlot.adapters.in_memory_car_asset_repository import InMemoryCarAssetRepository
from carlot.adapters.in_memory_car_repository import InMemoryCarRepository
from carlot.adapters.in_memory_change_feed import InMemoryChangeFeed
from carlot.adapters.in_memory_object_storage import InMemoryObjectStorage
from carlot.adapters.in_memory_sale_repository import InMemorySaleRepository
from carlot.adapters.in_memory_vendor_repository import InMemoryVendorRepository
from carlot.domain.auth import AuthSession
from carlot.entrypoints.http.app import build_app
from carlot.entrypoints.http.dependencies import (
    get_auth_service,
    get_car_asset_repository,
    get_car_repository,
    get_sale_repository,
    get_vendor_repository,
)
from carlot.infra.container import AppContainer
from carlot.infra.settings import Settings


@pytest.fixture
def app(
    tmp_path: Path,
    change_feed: InMemoryChangeFeed,
    storage: InMemoryObjectStorage,
    car_repository: InMemoryCarRepository,
    asset_repository: InMemoryCarAssetRepository,
    sale_repository: InMemorySaleRepository,
    vendor_repository: InMemoryVendorRepository,
    auth_service: InMemoryAuthService,
) -> FastAPI:
    container = AppContainer(
        settings=Settings(STORAGE_ROOT=tmp_path, SIGNED_URL_TTL_SECONDS=60),
        change_feed=change_feed,
        storage=storage,
    )
    test_app = build_app(container)
    test_app.dependency_overrides[get_car_repository] = lambda: car_repository
    test_app.dependency_overrides[get_car_asset_repository] = lambda: asset_repository
    test_app.dependency_overrides[get_sale_repository] = lambda: sale_repository
    test_app.dependency_overrides[get_vendor_repository] = lambda: vendor_repository
    test_app.dependency_overrides[get_auth_service] = lambda: auth_service
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create a test client."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def auth_headers(auth_session: AuthSession) -> dict[str, str]:
    return {"Authorization": f"Bearer {auth_session.access_token}"}
