from __future__ import annotations

from abc import ABC, abstractmethod

from carlot.domain.car import CarDocument, CarImage
from carlot.domain.result import Result


class CarAssetRepository(ABC):
    """Port for the ``car_images`` and ``car_documents`` tables."""

    @abstractmethod
    def add_image(self, car_id: str, image_url: str, is_primary: bool) -> Result[CarImage]: ...

    @abstractmethod
    def add_document(
        self,
        car_id: str,
        document_name: str,
        document_url: str,
        document_type: str | None,
    ) -> Result[CarDocument]: ...

    @abstractmethod
    def list_images(self, car_ids: list[str]) -> Result[dict[str, list[CarImage]]]:
        """Images grouped by car id, in insertion order."""
        ...

    @abstractmethod
    def list_documents(self, car_id: str) -> Result[list[CarDocument]]: ...

    @abstractmethod
    def delete_images(self, car_id: str) -> Result[None]: ...

    @abstractmethod
    def delete_documents(self, car_id: str) -> Result[None]: ...
