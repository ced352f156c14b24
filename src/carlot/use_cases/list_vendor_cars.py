from __future__ import annotations

from dataclasses import dataclass

from carlot.domain.car import Car, CarStatus, CarWithImages
from carlot.domain.errors import UpstreamError
from carlot.domain.result import Err
from carlot.ports.car_asset_repository import CarAssetRepository
from carlot.ports.car_repository import CarRepository


@dataclass(frozen=True, slots=True)
class ListVendorCarsRequest:
    vendor_id: str
    search: str | None = None
    status: CarStatus | None = None


def matches_search(car: Car, search: str) -> bool:
    """Case-insensitive substring match on brand, model, color or year."""
    needle = search.strip().lower()
    if not needle:
        return True
    haystack = (car.brand, car.model, car.color, str(car.year))
    return any(needle in value.lower() for value in haystack)


class ListVendorCars:
    """Vendor's inventory, newest first, each car with its images."""

    def __init__(self, car_repository: CarRepository, asset_repository: CarAssetRepository) -> None:
        self._cars = car_repository
        self._assets = asset_repository

    def execute(self, request: ListVendorCarsRequest) -> list[CarWithImages]:
        """
        Raises:
            UpstreamError: If cars or images could not be loaded
        """
        listed = self._cars.list_for_vendor(request.vendor_id)
        if isinstance(listed, Err):
            raise UpstreamError("Failed to load cars", vendor_id=request.vendor_id)

        cars = listed.value
        if request.status is not None:
            cars = [car for car in cars if car.status is request.status]
        if request.search:
            cars = [car for car in cars if matches_search(car, request.search)]
        if not cars:
            return []

        images = self._assets.list_images([car.id for car in cars])
        if isinstance(images, Err):
            raise UpstreamError("Failed to load car images", vendor_id=request.vendor_id)
        return [CarWithImages(car=car, images=images.value.get(car.id, [])) for car in cars]
