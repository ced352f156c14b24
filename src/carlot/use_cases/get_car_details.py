"""Get car details use case."""

from __future__ import annotations

from dataclasses import dataclass, field

from carlot.domain.car import Car, CarDocument, CarImage
from carlot.domain.errors import NotFoundError, UpstreamError
from carlot.domain.result import Err
from carlot.domain.sale import Sale
from carlot.ports.car_asset_repository import CarAssetRepository
from carlot.ports.car_repository import CarRepository
from carlot.ports.sale_repository import SaleRepository


@dataclass(frozen=True, slots=True)
class CarDetailsView:
    """Everything shown on a car's detail page."""

    car: Car
    images: list[CarImage] = field(default_factory=list)
    documents: list[CarDocument] = field(default_factory=list)
    sales: list[Sale] = field(default_factory=list)

    @property
    def primary_image_index(self) -> int:
        for index, image in enumerate(self.images):
            if image.is_primary:
                return index
        return 0


class GetCarDetails:
    """
    Load one of the vendor's cars together with images, documents and sales.

    A car owned by another vendor reads as not found.
    """

    def __init__(
        self,
        car_repository: CarRepository,
        asset_repository: CarAssetRepository,
        sale_repository: SaleRepository,
    ) -> None:
        self._cars = car_repository
        self._assets = asset_repository
        self._sales = sale_repository

    def execute(self, vendor_id: str, car_id: str) -> CarDetailsView:
        """
        Raises:
            NotFoundError: If the vendor has no car with this id
            UpstreamError: If any read failed
        """
        found = self._cars.get(vendor_id, car_id)
        if isinstance(found, Err):
            raise UpstreamError("Failed to load car", car_id=car_id)
        if found.value is None:
            raise NotFoundError(resource="Car", identifier=car_id)
        car = found.value

        images = self._assets.list_images([car.id])
        if isinstance(images, Err):
            raise UpstreamError("Failed to load car images", car_id=car.id)
        documents = self._assets.list_documents(car.id)
        if isinstance(documents, Err):
            raise UpstreamError("Failed to load car documents", car_id=car.id)
        sales = self._sales.list_for_car(car.id)
        if isinstance(sales, Err):
            raise UpstreamError("Failed to load sales", car_id=car.id)

        return CarDetailsView(
            car=car,
            images=images.value.get(car.id, []),
            documents=documents.value,
            sales=sales.value,
        )
