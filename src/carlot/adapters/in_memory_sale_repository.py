from __future__ import annotations

from decimal import Decimal

from carlot.adapters.in_memory_store import InMemoryDatabase, new_id, utcnow
from carlot.domain.changes import ChangeType
from carlot.domain.result import Ok, Result
from carlot.domain.sale import NewSale, Sale
from carlot.domain.stats import UNKNOWN, SaleWithCar
from carlot.ports.sale_repository import SaleRepository


class InMemorySaleRepository(SaleRepository):
    """
    Canonical contract implementation for tests.

    Joined listings order by sale_date descending; ties keep the most
    recently inserted sale first.
    """

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    def add(self, sale: NewSale) -> Result[Sale]:
        if err := self._db.failure("sales.add"):
            return err
        row = Sale(
            id=new_id(),
            car_id=sale.car_id,
            vendor_id=sale.vendor_id,
            client_name=sale.client_name,
            client_email=sale.client_email,
            client_phone=sale.client_phone,
            client_address=sale.client_address,
            sale_date=sale.sale_date,
            payment_method=sale.payment_method,
            sale_price=sale.sale_price,
            client_documents=sale.client_documents,
            created_at=utcnow(),
        )
        self._db.sales[row.id] = row
        self._db.notify("sales", ChangeType.INSERT, row.vendor_id, row.id)
        return Ok(row)

    def list_for_car(self, car_id: str) -> Result[list[Sale]]:
        if err := self._db.failure("sales.list_for_car"):
            return err
        return Ok([sale for sale in self._db.sales.values() if sale.car_id == car_id])

    def list_with_cars(self, vendor_id: str, limit: int | None = None) -> Result[list[SaleWithCar]]:
        if err := self._db.failure("sales.list_with_cars"):
            return err
        sales = [s for s in reversed(self._db.sales.values()) if s.vendor_id == vendor_id]
        sales.sort(key=lambda s: s.sale_date, reverse=True)
        if limit is not None:
            sales = sales[:limit]
        return Ok([self._join(sale) for sale in sales])

    def sale_prices(self, vendor_id: str) -> Result[list[Decimal]]:
        if err := self._db.failure("sales.sale_prices"):
            return err
        return Ok([s.sale_price for s in self._db.sales.values() if s.vendor_id == vendor_id])

    def delete_for_car(self, car_id: str) -> Result[None]:
        if err := self._db.failure("sales.delete"):
            return err
        for sale in [s for s in self._db.sales.values() if s.car_id == car_id]:
            del self._db.sales[sale.id]
            self._db.notify("sales", ChangeType.DELETE, sale.vendor_id, sale.id)
        return Ok(None)

    def _join(self, sale: Sale) -> SaleWithCar:
        car = self._db.cars.get(sale.car_id)
        return SaleWithCar(
            id=sale.id,
            client_name=sale.client_name,
            client_email=sale.client_email,
            client_phone=sale.client_phone,
            client_address=sale.client_address,
            sale_date=sale.sale_date,
            sale_price=sale.sale_price,
            payment_method=sale.payment_method,
            car_brand=car.brand if car else UNKNOWN,
            car_model=car.model if car else UNKNOWN,
            car_year=car.year if car else 0,
            car_color=car.color if car else UNKNOWN,
        )
