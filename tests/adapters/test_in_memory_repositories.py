"""
Test suite for the in-memory repositories.

These are the contract implementations the use-case and route tests run
against, so their ordering and scoping rules are pinned down here.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from carlot.adapters.in_memory_car_asset_repository import InMemoryCarAssetRepository
from carlot.adapters.in_memory_car_repository import InMemoryCarRepository
from carlot.adapters.in_memory_change_feed import InMemoryChangeFeed
from carlot.adapters.in_memory_sale_repository import InMemorySaleRepository
from carlot.adapters.in_memory_store import InMemoryDatabase
from carlot.adapters.in_memory_vendor_repository import InMemoryVendorRepository
from carlot.domain.car import CarDetails, CarStatus
from carlot.domain.changes import ChangeType
from carlot.domain.sale import NewSale
from carlot.domain.stats import UNKNOWN
from carlot.domain.vendor import Vendor


@pytest.fixture
def feed() -> InMemoryChangeFeed:
    return InMemoryChangeFeed()


@pytest.fixture
def db(feed: InMemoryChangeFeed) -> InMemoryDatabase:
    return InMemoryDatabase(change_feed=feed)


@pytest.fixture
def cars(db: InMemoryDatabase) -> InMemoryCarRepository:
    return InMemoryCarRepository(db)


@pytest.fixture
def sales(db: InMemoryDatabase) -> InMemorySaleRepository:
    return InMemorySaleRepository(db)


def _details(**overrides) -> CarDetails:
    values = {
        "brand": "Toyota",
        "model": "Corolla",
        "year": 2020,
        "color": "White",
        "fuel_type": "Petrol",
        "transmission": "Manual",
        "mileage": 42000,
        "price": Decimal("850000"),
    }
    values.update(overrides)
    return CarDetails(**values)


def _new_sale(car_id: str, vendor_id: str = "v1", **overrides) -> NewSale:
    values = {
        "car_id": car_id,
        "vendor_id": vendor_id,
        "client_name": "Asha Rao",
        "client_email": "asha@example.com",
        "sale_date": date(2024, 5, 1),
        "payment_method": "cash",
        "sale_price": Decimal("800000"),
    }
    values.update(overrides)
    return NewSale(**values)


# ==============================================================================
# Cars
# ==============================================================================


def test_add_and_get_car_scoped_to_vendor(cars: InMemoryCarRepository) -> None:
    car = cars.add("v1", _details(), CarStatus.AVAILABLE).value

    assert cars.get("v1", car.id).value == car
    assert cars.get("v2", car.id).value is None
    assert car.created_at is not None


def test_list_for_vendor_is_newest_first(cars: InMemoryCarRepository) -> None:
    first = cars.add("v1", _details(model="Corolla"), CarStatus.AVAILABLE).value
    second = cars.add("v1", _details(model="Camry"), CarStatus.AVAILABLE).value
    cars.add("v2", _details(model="Yaris"), CarStatus.AVAILABLE)

    listed = cars.list_for_vendor("v1").value

    assert [car.id for car in listed] == [second.id, first.id]


def test_find_by_natural_key_is_exact_and_vendor_scoped(cars: InMemoryCarRepository) -> None:
    car = cars.add("v1", _details(chassis_number="MA3FB"), CarStatus.AVAILABLE).value

    assert cars.find_by_natural_key("v1", "chassis_number", "MA3FB").value == car
    assert cars.find_by_natural_key("v1", "chassis_number", "ma3fb").value is None
    assert cars.find_by_natural_key("v2", "chassis_number", "MA3FB").value is None


def test_find_identical_compares_six_fields(cars: InMemoryCarRepository) -> None:
    car = cars.add("v1", _details(), CarStatus.AVAILABLE).value

    assert cars.find_identical("v1", _details(fuel_type="Diesel")).value == car
    assert cars.find_identical("v1", _details(mileage=42001)).value is None


def test_update_status_publishes_change(cars: InMemoryCarRepository, feed: InMemoryChangeFeed) -> None:
    car = cars.add("v1", _details(), CarStatus.AVAILABLE).value
    subscription = feed.subscribe(("cars",), "v1")

    cars.update_status(car.id, CarStatus.SOLD)

    assert cars.get("v1", car.id).value.status is CarStatus.SOLD
    event = subscription.poll(timeout=0)
    assert event.change_type is ChangeType.UPDATE
    assert event.record_id == car.id


def test_configured_failure_returns_err(db: InMemoryDatabase, cars: InMemoryCarRepository) -> None:
    db.fail("cars.add", "disk full")

    result = cars.add("v1", _details(), CarStatus.AVAILABLE)

    assert result.ok is False
    assert result.message == "disk full"
    assert db.cars == {}

    db.recover("cars.add")
    assert cars.add("v1", _details(), CarStatus.AVAILABLE).ok


def test_delete_car(cars: InMemoryCarRepository) -> None:
    car = cars.add("v1", _details(), CarStatus.AVAILABLE).value

    assert cars.delete(car.id).ok
    assert cars.get("v1", car.id).value is None


# ==============================================================================
# Assets
# ==============================================================================


def test_list_images_groups_by_car(db: InMemoryDatabase) -> None:
    assets = InMemoryCarAssetRepository(db)
    a1 = assets.add_image("c1", "http://x/1.jpg", True).value
    a2 = assets.add_image("c1", "http://x/2.jpg", False).value
    assets.add_image("c3", "http://x/3.jpg", True)

    grouped = assets.list_images(["c1", "c2"]).value

    assert grouped == {"c1": [a1, a2], "c2": []}


def test_delete_assets_only_touches_one_car(db: InMemoryDatabase) -> None:
    assets = InMemoryCarAssetRepository(db)
    assets.add_image("c1", "http://x/1.jpg", True)
    assets.add_document("c1", "rc.pdf", "http://x/rc.pdf", "application/pdf")
    kept = assets.add_document("c2", "rc.pdf", "http://x/rc2.pdf", None).value

    assets.delete_images("c1")
    assets.delete_documents("c1")

    assert assets.list_images(["c1"]).value == {"c1": []}
    assert assets.list_documents("c1").value == []
    assert assets.list_documents("c2").value == [kept]


# ==============================================================================
# Sales
# ==============================================================================


def test_list_with_cars_orders_by_date_then_insertion(
    cars: InMemoryCarRepository, sales: InMemorySaleRepository
) -> None:
    car = cars.add("v1", _details(), CarStatus.SOLD).value
    older = sales.add(_new_sale(car.id, sale_date=date(2024, 1, 1))).value
    tie_first = sales.add(_new_sale(car.id, sale_date=date(2024, 3, 1))).value
    tie_second = sales.add(_new_sale(car.id, sale_date=date(2024, 3, 1))).value

    listed = sales.list_with_cars("v1").value

    assert [s.id for s in listed] == [tie_second.id, tie_first.id, older.id]
    assert listed[0].car_brand == "Toyota"
    assert [s.id for s in sales.list_with_cars("v1", limit=1).value] == [tie_second.id]


def test_list_with_cars_handles_missing_car(sales: InMemorySaleRepository) -> None:
    sales.add(_new_sale("gone"))

    (joined,) = sales.list_with_cars("v1").value

    assert joined.car_brand == UNKNOWN
    assert joined.car_year == 0


def test_sale_prices_and_delete_for_car(sales: InMemorySaleRepository) -> None:
    sales.add(_new_sale("c1", sale_price=Decimal("100")))
    sales.add(_new_sale("c2", sale_price=Decimal("250.50")))
    sales.add(_new_sale("c3", vendor_id="v2"))

    assert sales.sale_prices("v1").value == [Decimal("100"), Decimal("250.50")]

    sales.delete_for_car("c1")

    assert sales.list_for_car("c1").value == []
    assert sales.sale_prices("v1").value == [Decimal("250.50")]


# ==============================================================================
# Vendors
# ==============================================================================


def test_vendor_add_get_update(db: InMemoryDatabase) -> None:
    vendors = InMemoryVendorRepository(db)
    vendors.add(Vendor(id="v1", email="a@b.c", full_name="Dealer One", phone="123"))

    updated = vendors.update("v1", {"full_name": "Dealer Uno", "phone": None}).value

    assert updated.full_name == "Dealer Uno"
    assert updated.phone is None
    assert vendors.get("v1").value == updated


def test_vendor_add_twice_and_update_missing(db: InMemoryDatabase) -> None:
    vendors = InMemoryVendorRepository(db)
    vendor = Vendor(id="v1", email="a@b.c", full_name="Dealer One")
    vendors.add(vendor)

    assert vendors.add(vendor).ok is False
    assert vendors.update("v9", {"phone": None}).ok is False
