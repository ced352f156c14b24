from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

RECENT_SALES_LIMIT = 5
UNKNOWN = "Unknown"


@dataclass(frozen=True, slots=True)
class SaleWithCar:
    """A sale row joined with the identity of the car it references."""

    id: str
    client_name: str
    client_email: str
    sale_date: date
    sale_price: Decimal
    payment_method: str
    client_phone: str | None = None
    client_address: str | None = None
    car_brand: str = UNKNOWN
    car_model: str = UNKNOWN
    car_year: int = 0
    car_color: str = UNKNOWN


@dataclass(frozen=True, slots=True)
class RecentSale:
    id: str
    car_brand: str
    car_model: str
    car_year: int
    sale_price: Decimal
    sale_date: date
    client_name: str


@dataclass(frozen=True, slots=True)
class Customer:
    id: str
    client_name: str
    client_email: str
    client_phone: str | None
    client_address: str | None
    sale_price: Decimal
    sale_date: date
    payment_method: str
    car_brand: str
    car_model: str
    car_year: int
    car_color: str


@dataclass(frozen=True, slots=True)
class DashboardStats:
    total_cars: int = 0
    available_cars: int = 0
    sold_cars: int = 0
    total_revenue: Decimal = Decimal("0")
    recent_sales: list[RecentSale] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ProfileStats:
    dashboard: DashboardStats
    customers: list[Customer] = field(default_factory=list)
