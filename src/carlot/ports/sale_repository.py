from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from carlot.domain.result import Result
from carlot.domain.sale import NewSale, Sale
from carlot.domain.stats import SaleWithCar


class SaleRepository(ABC):
    """Port for the ``sales`` table."""

    @abstractmethod
    def add(self, sale: NewSale) -> Result[Sale]: ...

    @abstractmethod
    def list_for_car(self, car_id: str) -> Result[list[Sale]]: ...

    @abstractmethod
    def list_with_cars(self, vendor_id: str, limit: int | None = None) -> Result[list[SaleWithCar]]:
        """Vendor's sales joined with car identity, most recent ``sale_date`` first."""
        ...

    @abstractmethod
    def sale_prices(self, vendor_id: str) -> Result[list[Decimal]]: ...

    @abstractmethod
    def delete_for_car(self, car_id: str) -> Result[None]: ...
