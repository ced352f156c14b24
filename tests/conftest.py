"""Shared in-memory fixtures: one vendor, signed in, with empty stores."""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Callable

import pytest

from carlot.adapters.in_memory_auth_service import InMemoryAuthService
from carlot.adapters.in_memory_car_asset_repository import InMemoryCarAssetRepository
from carlot.adapters.in_memory_car_repository import InMemoryCarRepository
from carlot.adapters.in_memory_change_feed import InMemoryChangeFeed
from carlot.adapters.in_memory_object_storage import InMemoryObjectStorage
from carlot.adapters.in_memory_sale_repository import InMemorySaleRepository
from carlot.adapters.in_memory_store import InMemoryDatabase
from carlot.adapters.in_memory_vendor_repository import InMemoryVendorRepository
from carlot.domain.auth import AuthSession
from carlot.domain.car import Car, CarDetails, CarStatus
from carlot.domain.vendor import Vendor
from carlot.use_cases.vendor_session import VendorSession

FIXED_NOW = 1_700_000_000.5


@pytest.fixture
def change_feed() -> InMemoryChangeFeed:
    return InMemoryChangeFeed()


@pytest.fixture
def db(change_feed: InMemoryChangeFeed) -> InMemoryDatabase:
    return InMemoryDatabase(change_feed=change_feed)


@pytest.fixture
def car_repository(db: InMemoryDatabase) -> InMemoryCarRepository:
    return InMemoryCarRepository(db)


@pytest.fixture
def asset_repository(db: InMemoryDatabase) -> InMemoryCarAssetRepository:
    return InMemoryCarAssetRepository(db)


@pytest.fixture
def sale_repository(db: InMemoryDatabase) -> InMemorySaleRepository:
    return InMemorySaleRepository(db)


@pytest.fixture
def vendor_repository(db: InMemoryDatabase) -> InMemoryVendorRepository:
    return InMemoryVendorRepository(db)


@pytest.fixture
def storage() -> InMemoryObjectStorage:
    return InMemoryObjectStorage()


@pytest.fixture
def auth_service() -> InMemoryAuthService:
    return InMemoryAuthService()


@pytest.fixture
def auth_session(auth_service: InMemoryAuthService) -> AuthSession:
    user = auth_service.add_user("dealer@example.com", "secret1", {"full_name": "Dealer One"})
    return auth_service.issue_session(user)


@pytest.fixture
def vendor_session(
    auth_service: InMemoryAuthService,
    vendor_repository: InMemoryVendorRepository,
    auth_session: AuthSession,
) -> VendorSession:
    session = VendorSession(auth_service, vendor_repository)
    session.open(auth_session.access_token)
    return session


@pytest.fixture
def vendor(vendor_session: VendorSession) -> Vendor:
    return vendor_session.require_vendor()


@pytest.fixture
def clock() -> Callable[[], float]:
    return lambda: FIXED_NOW


@pytest.fixture
def car_details() -> CarDetails:
    return CarDetails(
        brand="Toyota",
        model="Corolla",
        year=2020,
        color="White",
        fuel_type="Petrol",
        transmission="Manual",
        mileage=42000,
        price=Decimal("850000"),
    )


@pytest.fixture
def make_car(
    car_repository: InMemoryCarRepository, car_details: CarDetails, vendor: Vendor
) -> Callable[..., Car]:
    """Insert a car for the signed-in vendor, overriding any detail field."""

    def _make(status: CarStatus = CarStatus.AVAILABLE, vendor_id: str | None = None, **overrides) -> Car:
        details = replace(car_details, **overrides)
        return car_repository.add(vendor_id or vendor.id, details, status).value

    return _make
