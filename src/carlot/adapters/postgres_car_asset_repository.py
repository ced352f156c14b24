"""PostgreSQL implementation of CarAssetRepository."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from carlot.adapters.postgres_base import PostgresRepository, parse_uuid
from carlot.domain.car import CarDocument, CarImage
from carlot.domain.result import Err, Ok, Result
from carlot.infra.db.models.car_asset import CarDocumentRow, CarImageRow
from carlot.ports.car_asset_repository import CarAssetRepository


class PostgresCarAssetRepository(PostgresRepository, CarAssetRepository):
    def add_image(self, car_id: str, image_url: str, is_primary: bool) -> Result[CarImage]:
        car_uuid = parse_uuid(car_id)
        if car_uuid is None:
            return Err(f"Invalid car id: {car_id}")
        row = CarImageRow(car_id=car_uuid, image_url=image_url, is_primary=is_primary)
        try:
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        except SQLAlchemyError as exc:
            return self._fail("car_images.add", exc)
        return Ok(self._image_to_domain(row))

    def add_document(
        self,
        car_id: str,
        document_name: str,
        document_url: str,
        document_type: str | None,
    ) -> Result[CarDocument]:
        car_uuid = parse_uuid(car_id)
        if car_uuid is None:
            return Err(f"Invalid car id: {car_id}")
        row = CarDocumentRow(
            car_id=car_uuid,
            document_name=document_name,
            document_url=document_url,
            document_type=document_type,
        )
        try:
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        except SQLAlchemyError as exc:
            return self._fail("car_documents.add", exc)
        return Ok(self._document_to_domain(row))

    def list_images(self, car_ids: list[str]) -> Result[dict[str, list[CarImage]]]:
        grouped: dict[str, list[CarImage]] = {car_id: [] for car_id in car_ids}
        uuids = [u for u in (parse_uuid(car_id) for car_id in car_ids) if u is not None]
        if not uuids:
            return Ok(grouped)
        query = (
            select(CarImageRow)
            .where(CarImageRow.car_id.in_(uuids))
            .order_by(CarImageRow.created_at)
        )
        try:
            rows = self._session.execute(query).scalars().all()
        except SQLAlchemyError as exc:
            return self._fail("car_images.list", exc)
        for row in rows:
            grouped.setdefault(str(row.car_id), []).append(self._image_to_domain(row))
        return Ok(grouped)

    def list_documents(self, car_id: str) -> Result[list[CarDocument]]:
        car_uuid = parse_uuid(car_id)
        if car_uuid is None:
            return Ok([])
        query = (
            select(CarDocumentRow)
            .where(CarDocumentRow.car_id == car_uuid)
            .order_by(CarDocumentRow.created_at)
        )
        try:
            rows = self._session.execute(query).scalars().all()
        except SQLAlchemyError as exc:
            return self._fail("car_documents.list", exc)
        return Ok([self._document_to_domain(row) for row in rows])

    def delete_images(self, car_id: str) -> Result[None]:
        return self._delete_for_car(CarImageRow, car_id, "car_images.delete")

    def delete_documents(self, car_id: str) -> Result[None]:
        return self._delete_for_car(CarDocumentRow, car_id, "car_documents.delete")

    def _delete_for_car(
        self,
        model: type[CarImageRow] | type[CarDocumentRow],
        car_id: str,
        operation: str,
    ) -> Result[None]:
        car_uuid = parse_uuid(car_id)
        if car_uuid is None:
            return Err(f"Invalid car id: {car_id}")
        try:
            self._session.execute(delete(model).where(model.car_id == car_uuid))
            self._session.commit()
        except SQLAlchemyError as exc:
            return self._fail(operation, exc)
        return Ok(None)

    def _image_to_domain(self, row: CarImageRow) -> CarImage:
        return CarImage(
            id=str(row.id),
            car_id=str(row.car_id),
            image_url=row.image_url,
            is_primary=row.is_primary,
        )

    def _document_to_domain(self, row: CarDocumentRow) -> CarDocument:
        return CarDocument(
            id=str(row.id),
            car_id=str(row.car_id),
            document_name=row.document_name,
            document_url=row.document_url,
            document_type=row.document_type,
        )
