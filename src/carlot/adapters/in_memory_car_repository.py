from __future__ import annotations

from dataclasses import replace

from carlot.adapters.in_memory_store import InMemoryDatabase, new_id, utcnow
from carlot.domain.car import Car, CarDetails, CarStatus
from carlot.domain.changes import ChangeType
from carlot.domain.result import Ok, Result
from carlot.ports.car_repository import CarRepository


class InMemoryCarRepository(CarRepository):
    """
    Canonical contract implementation for tests.

    - Stores cars in insertion order
    - Natural-key and identical-details lookups are exact (case-sensitive)
    - ``list_for_vendor`` returns newest first
    """

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def find_by_natural_key(self, vendor_id: str, field: str, value: str) -> Result[Car | None]:
        if err := self._db.failure("cars.find_by_natural_key"):
            return err
        for car in self._vendor_cars(vendor_id):
            if getattr(car, field) == value:
                return Ok(car)
        return Ok(None)

    def find_identical(self, vendor_id: str, details: CarDetails) -> Result[Car | None]:
        if err := self._db.failure("cars.find_identical"):
            return err
        for car in self._vendor_cars(vendor_id):
            if (
                car.brand == details.brand
                and car.model == details.model
                and car.year == details.year
                and car.color == details.color
                and car.mileage == details.mileage
                and car.price == details.price
            ):
                return Ok(car)
        return Ok(None)

    def add(self, vendor_id: str, details: CarDetails, status: CarStatus) -> Result[Car]:
        if err := self._db.failure("cars.add"):
            return err
        car = Car(
            id=new_id(),
            vendor_id=vendor_id,
            brand=details.brand,
            model=details.model,
            year=details.year or 0,
            color=details.color,
            fuel_type=details.fuel_type,
            transmission=details.transmission,
            mileage=details.mileage or 0,
            price=details.price if details.price is not None else 0,
            status=status,
            description=details.description,
            engine_capacity=details.engine_capacity,
            body_type=details.body_type,
            condition=details.condition,
            registration_number=details.registration_number,
            chassis_number=details.chassis_number,
            engine_number=details.engine_number,
            created_at=utcnow(),
        )
        self._db.cars[car.id] = car
        self._db.notify("cars", ChangeType.INSERT, vendor_id, car.id)
        return Ok(car)

    def get(self, vendor_id: str, car_id: str) -> Result[Car | None]:
        if err := self._db.failure("cars.get"):
            return err
        car = self._db.cars.get(car_id)
        if car is None or car.vendor_id != vendor_id:
            return Ok(None)
        return Ok(car)

    def list_for_vendor(self, vendor_id: str) -> Result[list[Car]]:
        if err := self._db.failure("cars.list_for_vendor"):
            return err
        return Ok(list(reversed(self._vendor_cars(vendor_id))))

    def update_status(self, car_id: str, status: CarStatus) -> Result[None]:
        if err := self._db.failure("cars.update_status"):
            return err
        car = self._db.cars.get(car_id)
        if car is not None:
            self._db.cars[car_id] = replace(car, status=status)
            self._db.notify("cars", ChangeType.UPDATE, car.vendor_id, car_id)
        return Ok(None)

    def delete(self, car_id: str) -> Result[None]:
        if err := self._db.failure("cars.delete"):
            return err
        car = self._db.cars.pop(car_id, None)
        if car is not None:
            self._db.notify("cars", ChangeType.DELETE, car.vendor_id, car_id)
        return Ok(None)

    def _vendor_cars(self, vendor_id: str) -> list[Car]:
        return [car for car in self._db.cars.values() if car.vendor_id == vendor_id]
