"""
Test suite for the /v1/cars routes.

Routes run against the in-memory adapters; the use cases are real.
"""

from __future__ import annotations

from typing import Any, Callable
from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from carlot.adapters.in_memory_car_asset_repository import InMemoryCarAssetRepository
from carlot.adapters.in_memory_object_storage import InMemoryObjectStorage
from carlot.adapters.in_memory_store import InMemoryDatabase
from carlot.domain.car import Car, CarStatus
from carlot.entrypoints.http.dependencies import get_check_duplicate_use_case
from carlot.use_cases.check_duplicate_car import DuplicateCheckFailed

DETAILS_FORM: dict[str, Any] = {
    "brand": "Honda",
    "model": "City",
    "year": "2020",
    "color": "White",
    "fuel_type": "Petrol",
    "transmission": "Manual",
    "mileage": "42000",
    "price": "650000.00",
    "registration_number": "MH12AB1234",
}

FRONT = ("images", ("front.jpg", b"jpg-1", "image/jpeg"))
BACK = ("images", ("back.jpg", b"jpg-2", "image/jpeg"))
RC = ("documents", ("rc.pdf", b"%PDF", "application/pdf"))


# ==============================================================================
# Listing and details
# ==============================================================================


def test_list_requires_token(client: TestClient) -> None:
    response = client.get("/v1/cars")

    assert response.status_code == 401


def test_list_returns_vendor_cars_with_images(
    client: TestClient,
    auth_headers: dict[str, str],
    make_car: Callable[..., Car],
    asset_repository: InMemoryCarAssetRepository,
) -> None:
    car = make_car()
    make_car(vendor_id="someone-else")
    asset_repository.add_image(car.id, "http://storage.test/storage/car-images/a.jpg", True)

    response = client.get("/v1/cars", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    summary = data["cars"][0]
    assert summary["car"]["id"] == car.id
    assert summary["car"]["price"] == "850000"
    assert summary["primary_image_url"] == "http://storage.test/storage/car-images/a.jpg"


def test_list_filters_by_search_and_status(
    client: TestClient, auth_headers: dict[str, str], make_car: Callable[..., Car]
) -> None:
    make_car()
    honda = make_car(brand="Honda", model="City", status=CarStatus.SOLD)

    by_search = client.get("/v1/cars", headers=auth_headers, params={"search": "honda"}).json()
    by_status = client.get("/v1/cars", headers=auth_headers, params={"status": "sold"}).json()

    assert [c["car"]["id"] for c in by_search["cars"]] == [honda.id]
    assert [c["car"]["id"] for c in by_status["cars"]] == [honda.id]


def test_list_rejects_unknown_status(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.get("/v1/cars", headers=auth_headers, params={"status": "leased"})

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "status"


def test_get_car_details(
    client: TestClient,
    auth_headers: dict[str, str],
    make_car: Callable[..., Car],
    asset_repository: InMemoryCarAssetRepository,
) -> None:
    car = make_car()
    asset_repository.add_image(car.id, "http://storage.test/storage/car-images/a.jpg", False)
    asset_repository.add_image(car.id, "http://storage.test/storage/car-images/b.jpg", True)

    response = client.get(f"/v1/cars/{car.id}", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["car"]["brand"] == "Toyota"
    assert data["primary_image_index"] == 1
    assert data["documents"] == []
    assert data["sales"] == []


def test_get_other_vendors_car_is_404(
    client: TestClient, auth_headers: dict[str, str], make_car: Callable[..., Car]
) -> None:
    car = make_car(vendor_id="someone-else")

    response = client.get(f"/v1/cars/{car.id}", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


# ==============================================================================
# Step validation
# ==============================================================================


def test_validate_details_step(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.post(
        "/v1/cars/validate", headers=auth_headers, params={"step": "details"}, data=DETAILS_FORM
    )

    assert response.status_code == 200
    assert response.json() == {"step": "details", "next_step": "images"}


def test_validate_details_reports_first_missing_field(
    client: TestClient, auth_headers: dict[str, str]
) -> None:
    form = {**DETAILS_FORM, "brand": "", "color": ""}

    response = client.post(
        "/v1/cars/validate", headers=auth_headers, params={"step": "details"}, data=form
    )

    assert response.status_code == 422
    assert response.json()["detail"] == "Brand is required"


def test_validate_images_step_needs_an_image(client: TestClient, auth_headers: dict[str, str]) -> None:
    without = client.post(
        "/v1/cars/validate", headers=auth_headers, params={"step": "images"}, data=DETAILS_FORM
    )
    with_image = client.post(
        "/v1/cars/validate",
        headers=auth_headers,
        params={"step": "images"},
        data=DETAILS_FORM,
        files=[FRONT],
    )

    assert without.status_code == 422
    assert with_image.json()["next_step"] == "documents"


def test_documents_step_cannot_be_advanced(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.post(
        "/v1/cars/validate", headers=auth_headers, params={"step": "documents"}, data=DETAILS_FORM
    )

    assert response.status_code == 422


def test_validate_rejects_malformed_price(client: TestClient, auth_headers: dict[str, str]) -> None:
    form = {**DETAILS_FORM, "price": "six lakh"}

    response = client.post(
        "/v1/cars/validate", headers=auth_headers, params={"step": "details"}, data=form
    )

    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


# ==============================================================================
# Duplicate check
# ==============================================================================


def test_duplicate_check_finds_registration_match(
    client: TestClient, auth_headers: dict[str, str], make_car: Callable[..., Car]
) -> None:
    existing = make_car(registration_number="MH12AB1234")

    response = client.post(
        "/v1/cars/duplicates",
        headers=auth_headers,
        json={"brand": "Honda", "registration_number": "MH12AB1234"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["duplicate"] is True
    assert data["existing_car_id"] == existing.id
    assert "registration number" in data["description"]


def test_duplicate_check_without_match(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.post(
        "/v1/cars/duplicates", headers=auth_headers, json={"registration_number": "KA01"}
    )

    assert response.json() == {"duplicate": False, "description": None, "existing_car_id": None}


def test_failed_duplicate_check_is_503(
    app: FastAPI, client: TestClient, auth_headers: dict[str, str]
) -> None:
    checker = Mock()
    checker.execute.return_value = DuplicateCheckFailed()
    app.dependency_overrides[get_check_duplicate_use_case] = lambda: checker

    response = client.post("/v1/cars/duplicates", headers=auth_headers, json=DETAILS_FORM)

    assert response.status_code == 503
    assert response.json()["code"] == "DUPLICATE_CHECK_UNAVAILABLE"


# ==============================================================================
# Onboarding
# ==============================================================================


def test_onboard_car_uploads_assets(
    client: TestClient, auth_headers: dict[str, str], storage: InMemoryObjectStorage
) -> None:
    response = client.post(
        "/v1/cars",
        headers=auth_headers,
        data={**DETAILS_FORM, "primary_image_index": "1"},
        files=[FRONT, BACK, RC],
    )

    assert response.status_code == 201
    data = response.json()
    assert data["car"]["status"] == "available"
    assert data["car"]["registration_number"] == "MH12AB1234"
    assert [image["is_primary"] for image in data["images"]] == [False, True]
    assert data["documents"][0]["document_name"] == "rc.pdf"
    assert [bucket for bucket, _ in storage.uploads] == ["car-images", "car-images", "car-documents"]


def test_onboard_without_images_is_422(
    client: TestClient, auth_headers: dict[str, str], db: InMemoryDatabase
) -> None:
    response = client.post("/v1/cars", headers=auth_headers, data=DETAILS_FORM)

    assert response.status_code == 422
    assert db.cars == {}


def test_onboard_duplicate_is_409(
    client: TestClient,
    auth_headers: dict[str, str],
    make_car: Callable[..., Car],
    storage: InMemoryObjectStorage,
) -> None:
    existing = make_car(registration_number="MH12AB1234")

    response = client.post("/v1/cars", headers=auth_headers, data=DETAILS_FORM, files=[FRONT])

    assert response.status_code == 409
    assert response.json()["context"] == {"existing_car_id": existing.id}
    assert storage.uploads == []


def test_onboard_upload_failure_is_502_with_car_id(
    client: TestClient,
    auth_headers: dict[str, str],
    storage: InMemoryObjectStorage,
    db: InMemoryDatabase,
) -> None:
    storage.fail_uploads.add("car-documents")

    response = client.post("/v1/cars", headers=auth_headers, data=DETAILS_FORM, files=[FRONT, RC])

    assert response.status_code == 502
    context = response.json()["context"]
    assert context["step"] == "upload_document"
    assert context["car_id"] in db.cars
    assert len(db.images) == 1


# ==============================================================================
# Delete
# ==============================================================================


def test_delete_car(
    client: TestClient, auth_headers: dict[str, str], make_car: Callable[..., Car], db: InMemoryDatabase
) -> None:
    car = make_car()

    response = client.delete(f"/v1/cars/{car.id}", headers=auth_headers)

    assert response.status_code == 204
    assert car.id not in db.cars


@pytest.mark.parametrize("operation", ["car_images.delete", "cars.delete"])
def test_delete_failure_is_502(
    client: TestClient,
    auth_headers: dict[str, str],
    make_car: Callable[..., Car],
    db: InMemoryDatabase,
    operation: str,
) -> None:
    car = make_car()
    db.fail(operation)

    response = client.delete(f"/v1/cars/{car.id}", headers=auth_headers)

    assert response.status_code == 502
    assert car.id in db.cars
