from __future__ import annotations

from carlot.adapters.in_memory_store import InMemoryDatabase, new_id
from carlot.domain.car import CarDocument, CarImage
from carlot.domain.result import Ok, Result
from carlot.ports.car_asset_repository import CarAssetRepository


class InMemoryCarAssetRepository(CarAssetRepository):
    """Canonical contract implementation for tests."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def add_image(self, car_id: str, image_url: str, is_primary: bool) -> Result[CarImage]:
        if err := self._db.failure("car_images.add"):
            return err
        image = CarImage(id=new_id(), car_id=car_id, image_url=image_url, is_primary=is_primary)
        self._db.images[image.id] = image
        return Ok(image)

    def add_document(
        self,
        car_id: str,
        document_name: str,
        document_url: str,
        document_type: str | None,
    ) -> Result[CarDocument]:
        if err := self._db.failure("car_documents.add"):
            return err
        document = CarDocument(
            id=new_id(),
            car_id=car_id,
            document_name=document_name,
            document_url=document_url,
            document_type=document_type,
        )
        self._db.documents[document.id] = document
        return Ok(document)

    def list_images(self, car_ids: list[str]) -> Result[dict[str, list[CarImage]]]:
        if err := self._db.failure("car_images.list"):
            return err
        grouped: dict[str, list[CarImage]] = {car_id: [] for car_id in car_ids}
        for image in self._db.images.values():
            if image.car_id in grouped:
                grouped[image.car_id].append(image)
        return Ok(grouped)

    def list_documents(self, car_id: str) -> Result[list[CarDocument]]:
        if err := self._db.failure("car_documents.list"):
            return err
        return Ok([doc for doc in self._db.documents.values() if doc.car_id == car_id])

    def delete_images(self, car_id: str) -> Result[None]:
        if err := self._db.failure("car_images.delete"):
            return err
        for image_id in [i.id for i in self._db.images.values() if i.car_id == car_id]:
            del self._db.images[image_id]
        return Ok(None)

    def delete_documents(self, car_id: str) -> Result[None]:
        if err := self._db.failure("car_documents.delete"):
            return err
        for doc_id in [d.id for d in self._db.documents.values() if d.car_id == car_id]:
            del self._db.documents[doc_id]
        return Ok(None)
