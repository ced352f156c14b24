"""PostgreSQL implementation of SaleRepository."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from carlot.adapters.postgres_base import PostgresRepository, parse_uuid
from carlot.domain.changes import ChangeType
from carlot.domain.result import Err, Ok, Result
from carlot.domain.sale import NewSale, Sale
from carlot.domain.stats import UNKNOWN, SaleWithCar
from carlot.infra.db.models.sale import SaleRow
from carlot.ports.sale_repository import SaleRepository


class PostgresSaleRepository(PostgresRepository, SaleRepository):
    """
    PostgreSQL implementation of SaleRepository.

    Joined listings load the referenced car eagerly (``SaleRow.car``);
    a sale whose car no longer exists reports "Unknown" identity.
    """

    def add(self, sale: NewSale) -> Result[Sale]:
        car_uuid = parse_uuid(sale.car_id)
        vendor_uuid = parse_uuid(sale.vendor_id)
        if car_uuid is None or vendor_uuid is None:
            return Err("Invalid car or vendor id")
        row = SaleRow(
            car_id=car_uuid,
            vendor_id=vendor_uuid,
            client_name=sale.client_name,
            client_email=sale.client_email,
            client_phone=sale.client_phone,
            client_address=sale.client_address,
            sale_date=sale.sale_date,
            payment_method=sale.payment_method,
            sale_price=sale.sale_price,
            client_documents=sale.client_documents,
        )
        try:
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        except SQLAlchemyError as exc:
            return self._fail("sales.add", exc)
        self._publish("sales", ChangeType.INSERT, row.vendor_id, row.id)
        return Ok(self._to_domain(row))

    def list_for_car(self, car_id: str) -> Result[list[Sale]]:
        car_uuid = parse_uuid(car_id)
        if car_uuid is None:
            return Ok([])
        query = select(SaleRow).where(SaleRow.car_id == car_uuid).order_by(SaleRow.created_at)
        try:
            rows = self._session.execute(query).scalars().all()
        except SQLAlchemyError as exc:
            return self._fail("sales.list_for_car", exc)
        return Ok([self._to_domain(row) for row in rows])

    def list_with_cars(self, vendor_id: str, limit: int | None = None) -> Result[list[SaleWithCar]]:
        vendor_uuid = parse_uuid(vendor_id)
        if vendor_uuid is None:
            return Ok([])
        query = (
            select(SaleRow)
            .where(SaleRow.vendor_id == vendor_uuid)
            .order_by(SaleRow.sale_date.desc(), SaleRow.created_at.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        try:
            rows = self._session.execute(query).scalars().unique().all()
        except SQLAlchemyError as exc:
            return self._fail("sales.list_with_cars", exc)
        return Ok([self._to_joined(row) for row in rows])

    def sale_prices(self, vendor_id: str) -> Result[list[Decimal]]:
        vendor_uuid = parse_uuid(vendor_id)
        if vendor_uuid is None:
            return Ok([])
        query = select(SaleRow.sale_price).where(SaleRow.vendor_id == vendor_uuid)
        try:
            prices = self._session.execute(query).scalars().all()
        except SQLAlchemyError as exc:
            return self._fail("sales.sale_prices", exc)
        return Ok(list(prices))

    def delete_for_car(self, car_id: str) -> Result[None]:
        car_uuid = parse_uuid(car_id)
        if car_uuid is None:
            return Err(f"Invalid car id: {car_id}")
        statement = (
            delete(SaleRow)
            .where(SaleRow.car_id == car_uuid)
            .returning(SaleRow.id, SaleRow.vendor_id)
        )
        try:
            deleted = self._session.execute(statement).all()
            self._session.commit()
        except SQLAlchemyError as exc:
            return self._fail("sales.delete", exc)
        for sale_id, vendor_uuid in deleted:
            self._publish("sales", ChangeType.DELETE, vendor_uuid, sale_id)
        return Ok(None)

    def _to_domain(self, row: SaleRow) -> Sale:
        return Sale(
            id=str(row.id),
            car_id=str(row.car_id),
            vendor_id=str(row.vendor_id),
            client_name=row.client_name,
            client_email=row.client_email,
            client_phone=row.client_phone,
            client_address=row.client_address,
            sale_date=row.sale_date,
            payment_method=row.payment_method,
            sale_price=row.sale_price,
            client_documents=row.client_documents,
            created_at=row.created_at,
        )

    def _to_joined(self, row: SaleRow) -> SaleWithCar:
        car = row.car
        return SaleWithCar(
            id=str(row.id),
            client_name=row.client_name,
            client_email=row.client_email,
            client_phone=row.client_phone,
            client_address=row.client_address,
            sale_date=row.sale_date,
            sale_price=row.sale_price,
            payment_method=row.payment_method,
            car_brand=car.brand if car else UNKNOWN,
            car_model=car.model if car else UNKNOWN,
            car_year=car.year if car else 0,
            car_color=car.color if car else UNKNOWN,
        )
