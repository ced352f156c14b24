from __future__ import annotations

from abc import ABC, abstractmethod

from carlot.domain.car import Car, CarDetails, CarStatus
from carlot.domain.result import Result


class CarRepository(ABC):
    """
    Port for the ``cars`` table.

    Every method returns a Result; store failures come back as ``Err`` and
    are never raised. All lookups are scoped to one vendor except the
    by-id writes, which the caller performs after an ownership check.
    """

    @abstractmethod
    def find_by_natural_key(self, vendor_id: str, field: str, value: str) -> Result[Car | None]:
        """
        Return the first vendor car whose ``field`` equals ``value`` exactly.

        ``field`` is one of registration_number, chassis_number, engine_number.
        """
        ...

    @abstractmethod
    def find_identical(self, vendor_id: str, details: CarDetails) -> Result[Car | None]:
        """Exact match on (brand, model, year, color, mileage, price)."""
        ...

    @abstractmethod
    def add(self, vendor_id: str, details: CarDetails, status: CarStatus) -> Result[Car]: ...

    @abstractmethod
    def get(self, vendor_id: str, car_id: str) -> Result[Car | None]: ...

    @abstractmethod
    def list_for_vendor(self, vendor_id: str) -> Result[list[Car]]:
        """Vendor's cars, newest first."""
        ...

    @abstractmethod
    def update_status(self, car_id: str, status: CarStatus) -> Result[None]: ...

    @abstractmethod
    def delete(self, car_id: str) -> Result[None]: ...
