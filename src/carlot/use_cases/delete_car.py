"""Delete a car and everything attached to it."""

from __future__ import annotations

import logging

from carlot.domain.errors import NotFoundError, UpstreamError
from carlot.domain.filenames import CAR_DOCUMENTS_BUCKET, CAR_IMAGES_BUCKET
from carlot.domain.result import Err
from carlot.ports.car_asset_repository import CarAssetRepository
from carlot.ports.car_repository import CarRepository
from carlot.ports.object_storage import ObjectStorage
from carlot.ports.sale_repository import SaleRepository

logger = logging.getLogger(__name__)


class DeleteCar:
    """
    Cascading delete of one of the vendor's cars.

    Stored image and document objects are removed first on a best-effort
    basis: a failed removal is logged and the delete goes on. Rows are then
    deleted in the order images, documents, sales, car; a failed row delete
    stops the cascade with ``UpstreamError``.
    """

    def __init__(
        self,
        car_repository: CarRepository,
        asset_repository: CarAssetRepository,
        sale_repository: SaleRepository,
        storage: ObjectStorage,
    ) -> None:
        self._cars = car_repository
        self._assets = asset_repository
        self._sales = sale_repository
        self._storage = storage

    def execute(self, vendor_id: str, car_id: str) -> None:
        found = self._cars.get(vendor_id, car_id)
        if isinstance(found, Err):
            raise UpstreamError("Failed to load car", car_id=car_id)
        if found.value is None:
            raise NotFoundError(resource="Car", identifier=car_id)

        self._remove_objects(car_id)

        steps = (
            ("delete_images", self._assets.delete_images),
            ("delete_documents", self._assets.delete_documents),
            ("delete_sales", self._sales.delete_for_car),
            ("delete_car", self._cars.delete),
        )
        for step, delete in steps:
            result = delete(car_id)
            if isinstance(result, Err):
                logger.error(
                    "Car delete halted",
                    extra={"car_id": car_id, "step": step, "error": result.message},
                )
                raise UpstreamError("Failed to delete car", car_id=car_id, step=step)

        logger.info("Car deleted", extra={"vendor_id": vendor_id, "car_id": car_id})

    def _remove_objects(self, car_id: str) -> None:
        images = self._assets.list_images([car_id])
        documents = self._assets.list_documents(car_id)
        urls_by_bucket: dict[str, list[str]] = {CAR_IMAGES_BUCKET: [], CAR_DOCUMENTS_BUCKET: []}
        if isinstance(images, Err):
            logger.warning("Could not list images for removal", extra={"car_id": car_id})
        else:
            urls_by_bucket[CAR_IMAGES_BUCKET] = [i.image_url for i in images.value.get(car_id, [])]
        if isinstance(documents, Err):
            logger.warning("Could not list documents for removal", extra={"car_id": car_id})
        else:
            urls_by_bucket[CAR_DOCUMENTS_BUCKET] = [d.document_url for d in documents.value]

        for bucket, urls in urls_by_bucket.items():
            keys = [key for key in (self._storage.key_from_url(bucket, url) for url in urls) if key]
            if not keys:
                continue
            removed = self._storage.remove(bucket, keys)
            if isinstance(removed, Err):
                logger.warning(
                    "Stored objects not removed",
                    extra={"car_id": car_id, "bucket": bucket, "error": removed.message},
                )
