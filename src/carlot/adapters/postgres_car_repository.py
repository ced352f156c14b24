"""PostgreSQL implementation of CarRepository."""

from __future__ import annotations

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError

from carlot.adapters.postgres_base import PostgresRepository, parse_uuid
from carlot.domain.car import Car, CarDetails, CarStatus
from carlot.domain.changes import ChangeType
from carlot.domain.result import Err, Ok, Result
from carlot.infra.db.models.car import CarRow
from carlot.ports.car_repository import CarRepository

_NATURAL_KEY_COLUMNS = {
    "registration_number": CarRow.registration_number,
    "chassis_number": CarRow.chassis_number,
    "engine_number": CarRow.engine_number,
}


class PostgresCarRepository(PostgresRepository, CarRepository):
    """
    PostgreSQL implementation of CarRepository.

    - Lookups are always filtered by vendor_id
    - Converts CarRow (infrastructure) to Car (domain)
    """

    def find_by_natural_key(self, vendor_id: str, field: str, value: str) -> Result[Car | None]:
        column = _NATURAL_KEY_COLUMNS.get(field)
        if column is None:
            return Err(f"Unknown natural key: {field}")
        vendor_uuid = parse_uuid(vendor_id)
        if vendor_uuid is None:
            return Ok(None)
        query = (
            select(CarRow)
            .where(CarRow.vendor_id == vendor_uuid)
            .where(column == value)
            .limit(1)
        )
        try:
            row = self._session.execute(query).scalars().first()
        except SQLAlchemyError as exc:
            return self._fail("cars.find_by_natural_key", exc)
        return Ok(self._to_domain(row) if row else None)

    def find_identical(self, vendor_id: str, details: CarDetails) -> Result[Car | None]:
        vendor_uuid = parse_uuid(vendor_id)
        if vendor_uuid is None:
            return Ok(None)
        query = (
            select(CarRow)
            .where(CarRow.vendor_id == vendor_uuid)
            .where(CarRow.brand == details.brand)
            .where(CarRow.model == details.model)
            .where(CarRow.year == details.year)
            .where(CarRow.color == details.color)
            .where(CarRow.mileage == details.mileage)
            .where(CarRow.price == details.price)
            .limit(1)
        )
        try:
            row = self._session.execute(query).scalars().first()
        except SQLAlchemyError as exc:
            return self._fail("cars.find_identical", exc)
        return Ok(self._to_domain(row) if row else None)

    def add(self, vendor_id: str, details: CarDetails, status: CarStatus) -> Result[Car]:
        vendor_uuid = parse_uuid(vendor_id)
        if vendor_uuid is None:
            return Err(f"Invalid vendor id: {vendor_id}")
        row = CarRow(
            vendor_id=vendor_uuid,
            brand=details.brand,
            model=details.model,
            year=details.year,
            color=details.color,
            fuel_type=details.fuel_type,
            transmission=details.transmission,
            mileage=details.mileage,
            price=details.price,
            description=details.description,
            engine_capacity=details.engine_capacity,
            body_type=details.body_type,
            condition=details.condition,
            registration_number=details.registration_number,
            chassis_number=details.chassis_number,
            engine_number=details.engine_number,
            status=status.value,
        )
        try:
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        except SQLAlchemyError as exc:
            return self._fail("cars.add", exc)
        self._publish("cars", ChangeType.INSERT, row.vendor_id, row.id)
        return Ok(self._to_domain(row))

    def get(self, vendor_id: str, car_id: str) -> Result[Car | None]:
        vendor_uuid = parse_uuid(vendor_id)
        car_uuid = parse_uuid(car_id)
        if vendor_uuid is None or car_uuid is None:
            return Ok(None)
        query = select(CarRow).where(CarRow.id == car_uuid).where(CarRow.vendor_id == vendor_uuid)
        try:
            row = self._session.execute(query).scalar_one_or_none()
        except SQLAlchemyError as exc:
            return self._fail("cars.get", exc)
        return Ok(self._to_domain(row) if row else None)

    def list_for_vendor(self, vendor_id: str) -> Result[list[Car]]:
        vendor_uuid = parse_uuid(vendor_id)
        if vendor_uuid is None:
            return Ok([])
        query = (
            select(CarRow)
            .where(CarRow.vendor_id == vendor_uuid)
            .order_by(CarRow.created_at.desc())
        )
        try:
            rows = self._session.execute(query).scalars().all()
        except SQLAlchemyError as exc:
            return self._fail("cars.list_for_vendor", exc)
        return Ok([self._to_domain(row) for row in rows])

    def update_status(self, car_id: str, status: CarStatus) -> Result[None]:
        car_uuid = parse_uuid(car_id)
        if car_uuid is None:
            return Err(f"Invalid car id: {car_id}")
        statement = (
            update(CarRow)
            .where(CarRow.id == car_uuid)
            .values(status=status.value)
            .returning(CarRow.vendor_id)
        )
        try:
            vendor_uuid = self._session.execute(statement).scalar_one_or_none()
            self._session.commit()
        except SQLAlchemyError as exc:
            return self._fail("cars.update_status", exc)
        if vendor_uuid is not None:
            self._publish("cars", ChangeType.UPDATE, vendor_uuid, car_uuid)
        return Ok(None)

    def delete(self, car_id: str) -> Result[None]:
        car_uuid = parse_uuid(car_id)
        if car_uuid is None:
            return Err(f"Invalid car id: {car_id}")
        statement = delete(CarRow).where(CarRow.id == car_uuid).returning(CarRow.vendor_id)
        try:
            vendor_uuid = self._session.execute(statement).scalar_one_or_none()
            self._session.commit()
        except SQLAlchemyError as exc:
            return self._fail("cars.delete", exc)
        if vendor_uuid is not None:
            self._publish("cars", ChangeType.DELETE, vendor_uuid, car_uuid)
        return Ok(None)

    def _to_domain(self, row: CarRow) -> Car:
        """
        Convert database model (CarRow) to domain entity (Car).

        Args:
            row: SQLAlchemy CarRow model

        Returns:
            Car domain entity
        """
        return Car(
            id=str(row.id),
            vendor_id=str(row.vendor_id),
            brand=row.brand,
            model=row.model,
            year=row.year,
            color=row.color,
            fuel_type=row.fuel_type,
            transmission=row.transmission,
            mileage=row.mileage,
            price=row.price,  # Already Decimal from NUMERIC column
            status=CarStatus(row.status),
            description=row.description,
            engine_capacity=row.engine_capacity,
            body_type=row.body_type,
            condition=row.condition,
            registration_number=row.registration_number,
            chassis_number=row.chassis_number,
            engine_number=row.engine_number,
            created_at=row.created_at,
        )
