"""
Test suite for CarMapper.

- DTO -> domain: str price to Decimal, all optional fields kept
- Domain -> DTO: Decimal to str, enums to values, datetimes to ISO strings
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from carlot.domain.car import Car, CarDocument, CarImage, CarStatus, CarWithImages
from carlot.domain.sale import Sale
from carlot.entrypoints.http.dtos.cars import CarDetailsDTO
from carlot.entrypoints.http.mappers.car_mapper import CarMapper, parse_price
from carlot.use_cases.check_duplicate_car import DuplicateFound, NoDuplicate
from carlot.use_cases.get_car_details import CarDetailsView


@pytest.fixture
def car() -> Car:
    return Car(
        id="c-1",
        vendor_id="v-1",
        brand="Honda",
        model="City",
        year=2020,
        color="White",
        fuel_type="Petrol",
        transmission="Manual",
        mileage=42000,
        price=Decimal("650000.00"),
        status=CarStatus.SOLD,
        registration_number="MH12AB1234",
        created_at=datetime(2024, 3, 1, 10, 30, tzinfo=timezone.utc),
    )


def _image(image_id: str, primary: bool) -> CarImage:
    return CarImage(id=image_id, car_id="c-1", image_url=f"http://x/{image_id}.jpg", is_primary=primary)


# ==============================================================================
# DTO -> Domain
# ==============================================================================


class TestToDomainDetails:
    def test_converts_price_to_decimal(self) -> None:
        dto = CarDetailsDTO(brand="Honda", price="650000.50", registration_number="MH12AB1234")

        details = CarMapper.to_domain_details(dto)

        assert details.price == Decimal("650000.50")
        assert isinstance(details.price, Decimal)
        assert details.brand == "Honda"
        assert details.registration_number == "MH12AB1234"

    def test_missing_price_stays_none(self) -> None:
        details = CarMapper.to_domain_details(CarDetailsDTO())

        assert details.price is None
        assert details.year is None


class TestParsePrice:
    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_is_none(self, value: str | None) -> None:
        assert parse_price(value) is None

    def test_strips_whitespace(self) -> None:
        assert parse_price(" 1200.5 ") == Decimal("1200.5")

    def test_rejects_garbage(self) -> None:
        with pytest.raises(ValueError, match="Must be a valid decimal"):
            parse_price("six lakh")


# ==============================================================================
# Domain -> DTO
# ==============================================================================


class TestToCarResponse:
    def test_maps_boundary_types(self, car: Car) -> None:
        dto = CarMapper.to_car_response(car)

        assert dto.price == "650000.00"
        assert dto.status == "sold"
        assert dto.created_at == "2024-03-01T10:30:00+00:00"
        assert dto.registration_number == "MH12AB1234"
        assert dto.chassis_number is None

    def test_missing_created_at(self, car: Car) -> None:
        assert CarMapper.to_car_response(replace(car, created_at=None)).created_at is None


class TestToListResponse:
    def test_summary_uses_primary_image(self, car: Car) -> None:
        items = [CarWithImages(car=car, images=[_image("a", False), _image("b", True)])]

        dto = CarMapper.to_list_response(items)

        assert dto.total == 1
        assert dto.cars[0].primary_image_url == "http://x/b.jpg"
        assert len(dto.cars[0].images) == 2

    def test_summary_falls_back_to_first_image(self, car: Car) -> None:
        dto = CarMapper.to_summary(CarWithImages(car=car, images=[_image("a", False)]))

        assert dto.primary_image_url == "http://x/a.jpg"

    def test_summary_without_images(self, car: Car) -> None:
        dto = CarMapper.to_summary(CarWithImages(car=car))

        assert dto.primary_image_url is None
        assert dto.images == []


class TestToDetailsResponse:
    def test_maps_documents_and_sales(self, car: Car) -> None:
        sale = Sale(
            id="s-1",
            car_id="c-1",
            vendor_id="v-1",
            client_name="Asha Rao",
            client_email="asha@example.com",
            sale_date=date(2024, 3, 18),
            payment_method="cash",
            sale_price=Decimal("640000.00"),
            client_documents='["http://x/id.pdf"]',
        )
        view = CarDetailsView(
            car=car,
            images=[_image("a", False), _image("b", True)],
            documents=[
                CarDocument(
                    id="d-1",
                    car_id="c-1",
                    document_name="rc.pdf",
                    document_url="http://x/rc.pdf",
                    document_type="application/pdf",
                )
            ],
            sales=[sale],
        )

        dto = CarMapper.to_details_response(view)

        assert dto.primary_image_index == 1
        assert dto.documents[0].document_type == "application/pdf"
        assert dto.sales[0].sale_price == "640000.00"
        assert dto.sales[0].sale_date == "2024-03-18"
        assert dto.sales[0].document_urls == ["http://x/id.pdf"]


class TestToDuplicateResponse:
    def test_found(self) -> None:
        dto = CarMapper.to_duplicate_response(DuplicateFound(description="exists", car_id="c-1"))

        assert dto.duplicate is True
        assert dto.existing_car_id == "c-1"

    def test_not_found(self) -> None:
        dto = CarMapper.to_duplicate_response(NoDuplicate())

        assert dto.duplicate is False
        assert dto.description is None
