"""Dashboard statistics and customer roster for a vendor, with live refresh."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from decimal import Decimal
from typing import Callable

from carlot.domain.car import CarStatus
from carlot.domain.errors import UpstreamError
from carlot.domain.result import Err
from carlot.domain.stats import (
    RECENT_SALES_LIMIT,
    Customer,
    DashboardStats,
    ProfileStats,
    RecentSale,
    SaleWithCar,
)
from carlot.ports.car_repository import CarRepository
from carlot.ports.change_feed import ChangeFeed
from carlot.ports.sale_repository import SaleRepository

logger = logging.getLogger(__name__)

WATCHED_TABLES = ("sales", "cars")


def _recent(sale: SaleWithCar) -> RecentSale:
    return RecentSale(
        id=sale.id,
        car_brand=sale.car_brand,
        car_model=sale.car_model,
        car_year=sale.car_year,
        sale_price=sale.sale_price,
        sale_date=sale.sale_date,
        client_name=sale.client_name,
    )


def _customer(sale: SaleWithCar) -> Customer:
    return Customer(
        id=sale.id,
        client_name=sale.client_name,
        client_email=sale.client_email,
        client_phone=sale.client_phone,
        client_address=sale.client_address,
        sale_price=sale.sale_price,
        sale_date=sale.sale_date,
        payment_method=sale.payment_method,
        car_brand=sale.car_brand,
        car_model=sale.car_model,
        car_year=sale.car_year,
        car_color=sale.car_color,
    )


class LoadProfileStats:
    """
    Derive a vendor's stats from raw rows.

    Counts come from partitioning all cars by status, revenue from the sum
    of every sale price. Recent sales and customers are both ordered by
    ``sale_date`` descending.
    """

    def __init__(self, car_repository: CarRepository, sale_repository: SaleRepository) -> None:
        self._cars = car_repository
        self._sales = sale_repository

    def execute(self, vendor_id: str) -> ProfileStats:
        """
        Raises:
            UpstreamError: If any of the underlying reads failed
        """
        cars = self._cars.list_for_vendor(vendor_id)
        if isinstance(cars, Err):
            raise UpstreamError("Failed to load cars", vendor_id=vendor_id)
        prices = self._sales.sale_prices(vendor_id)
        if isinstance(prices, Err):
            raise UpstreamError("Failed to load sales", vendor_id=vendor_id)
        recent = self._sales.list_with_cars(vendor_id, limit=RECENT_SALES_LIMIT)
        if isinstance(recent, Err):
            raise UpstreamError("Failed to load recent sales", vendor_id=vendor_id)
        history = self._sales.list_with_cars(vendor_id)
        if isinstance(history, Err):
            raise UpstreamError("Failed to load customers", vendor_id=vendor_id)

        sold = sum(1 for car in cars.value if car.status is CarStatus.SOLD)
        dashboard = DashboardStats(
            total_cars=len(cars.value),
            available_cars=len(cars.value) - sold,
            sold_cars=sold,
            total_revenue=sum(prices.value, Decimal("0")),
            recent_sales=[_recent(sale) for sale in recent.value],
        )
        return ProfileStats(
            dashboard=dashboard,
            customers=[_customer(sale) for sale in history.value],
        )


class WatchProfileStats:
    """
    Stream of stats snapshots that follows changes to the vendor's rows.

    ``load_stats`` is usually ``LoadProfileStats.execute``; the HTTP layer
    passes one that opens a fresh database session per reload.

    ``stream()`` returns a generator. Nothing subscribes until the first
    item is requested; each call opens its own subscription, closed again
    when the consumer stops iterating or the feed shuts down.

    The first item is always a snapshot. After that every change event on
    ``sales`` or ``cars`` triggers a full reload. With ``keepalive_seconds``
    set, ``None`` is yielded whenever that long passes without an event.
    """

    def __init__(
        self,
        load_stats: Callable[[str], ProfileStats],
        change_feed: ChangeFeed,
        keepalive_seconds: float | None = None,
    ) -> None:
        self._load_stats = load_stats
        self._feed = change_feed
        self._keepalive = keepalive_seconds

    def stream(self, vendor_id: str) -> Iterator[ProfileStats | None]:
        with self._feed.subscribe(WATCHED_TABLES, vendor_id) as subscription:
            yield self._load_stats(vendor_id)
            while not subscription.closed:
                event = subscription.poll(timeout=self._keepalive)
                if event is None:
                    if subscription.closed:
                        break
                    yield None
                    continue
                logger.debug(
                    "Reloading stats after change",
                    extra={"vendor_id": vendor_id, "table": event.table, "change": event.change_type.value},
                )
                try:
                    snapshot = self._load_stats(vendor_id)
                except UpstreamError as exc:
                    # keep following changes; the next event reloads everything again
                    logger.error(
                        "Stats reload failed",
                        extra={"vendor_id": vendor_id, "error": exc.message},
                    )
                    continue
                yield snapshot
