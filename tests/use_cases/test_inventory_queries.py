"""Test suite for ListVendorCars and GetCarDetails."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Callable

import pytest

from carlot.adapters.in_memory_car_asset_repository import InMemoryCarAssetRepository
from carlot.adapters.in_memory_car_repository import InMemoryCarRepository
from carlot.adapters.in_memory_sale_repository import InMemorySaleRepository
from carlot.adapters.in_memory_store import InMemoryDatabase
from carlot.domain.car import Car, CarStatus
from carlot.domain.errors import NotFoundError, UpstreamError
from carlot.domain.sale import NewSale
from carlot.domain.vendor import Vendor
from carlot.use_cases.get_car_details import GetCarDetails
from carlot.use_cases.list_vendor_cars import ListVendorCars, ListVendorCarsRequest, matches_search


@pytest.fixture
def list_cars(
    car_repository: InMemoryCarRepository, asset_repository: InMemoryCarAssetRepository
) -> ListVendorCars:
    return ListVendorCars(car_repository, asset_repository)


@pytest.fixture
def get_details(
    car_repository: InMemoryCarRepository,
    asset_repository: InMemoryCarAssetRepository,
    sale_repository: InMemorySaleRepository,
) -> GetCarDetails:
    return GetCarDetails(car_repository, asset_repository, sale_repository)


# ==============================================================================
# ListVendorCars
# ==============================================================================


def test_lists_newest_first_with_images(
    list_cars: ListVendorCars,
    vendor: Vendor,
    make_car: Callable[..., Car],
    asset_repository: InMemoryCarAssetRepository,
) -> None:
    older = make_car(model="Corolla")
    newer = make_car(model="Camry")
    image = asset_repository.add_image(older.id, "http://x/1.jpg", True).value

    listed = list_cars.execute(ListVendorCarsRequest(vendor_id=vendor.id))

    assert [item.car.id for item in listed] == [newer.id, older.id]
    assert listed[0].images == []
    assert listed[1].images == [image]


def test_filters_by_status_and_search(
    list_cars: ListVendorCars, vendor: Vendor, make_car: Callable[..., Car]
) -> None:
    make_car(model="Corolla", color="White")
    red = make_car(model="Camry", color="Red")
    make_car(model="Yaris", color="Red", status=CarStatus.SOLD)

    listed = list_cars.execute(
        ListVendorCarsRequest(vendor_id=vendor.id, search="red", status=CarStatus.AVAILABLE)
    )

    assert [item.car.id for item in listed] == [red.id]


def test_other_vendors_cars_are_not_listed(
    list_cars: ListVendorCars, vendor: Vendor, make_car: Callable[..., Car]
) -> None:
    make_car(vendor_id="someone-else")

    assert list_cars.execute(ListVendorCarsRequest(vendor_id=vendor.id)) == []


def test_list_failure_raises(list_cars: ListVendorCars, vendor: Vendor, db: InMemoryDatabase) -> None:
    db.fail("cars.list_for_vendor")

    with pytest.raises(UpstreamError):
        list_cars.execute(ListVendorCarsRequest(vendor_id=vendor.id))


@pytest.mark.parametrize(
    ("search", "expected"),
    [("toy", True), ("COROLLA", True), ("2020", True), ("white", True), ("  ", True), ("honda", False)],
)
def test_matches_search(make_car: Callable[..., Car], search: str, expected: bool) -> None:
    assert matches_search(make_car(), search) is expected


# ==============================================================================
# GetCarDetails
# ==============================================================================


def test_details_include_assets_and_sales(
    get_details: GetCarDetails,
    vendor: Vendor,
    make_car: Callable[..., Car],
    asset_repository: InMemoryCarAssetRepository,
    sale_repository: InMemorySaleRepository,
) -> None:
    car = make_car(status=CarStatus.SOLD)
    asset_repository.add_image(car.id, "http://x/1.jpg", False)
    asset_repository.add_image(car.id, "http://x/2.jpg", True)
    asset_repository.add_document(car.id, "rc.pdf", "http://x/rc.pdf", "application/pdf")
    sale_repository.add(
        NewSale(
            car_id=car.id,
            vendor_id=vendor.id,
            client_name="Asha Rao",
            client_email="asha@example.com",
            sale_date=date(2024, 5, 1),
            payment_method="cash",
            sale_price=Decimal("800000"),
        )
    )

    view = get_details.execute(vendor.id, car.id)

    assert view.car == car
    assert len(view.images) == 2
    assert view.primary_image_index == 1
    assert view.documents[0].document_name == "rc.pdf"
    assert view.sales[0].client_name == "Asha Rao"


def test_primary_index_defaults_to_zero(
    get_details: GetCarDetails, vendor: Vendor, make_car: Callable[..., Car]
) -> None:
    assert get_details.execute(vendor.id, make_car().id).primary_image_index == 0


def test_other_vendors_car_is_not_found(
    get_details: GetCarDetails, vendor: Vendor, make_car: Callable[..., Car]
) -> None:
    foreign = make_car(vendor_id="someone-else")

    with pytest.raises(NotFoundError):
        get_details.execute(vendor.id, foreign.id)


def test_details_read_failure_raises(
    get_details: GetCarDetails, vendor: Vendor, make_car: Callable[..., Car], db: InMemoryDatabase
) -> None:
    car = make_car()
    db.fail("car_documents.list")

    with pytest.raises(UpstreamError):
        get_details.execute(vendor.id, car.id)
