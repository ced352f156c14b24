"""Duplicate detection for cars about to be onboarded."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from carlot.domain.car import NATURAL_KEY_FIELDS, CarDetails
from carlot.domain.result import Err
from carlot.ports.car_repository import CarRepository

logger = logging.getLogger(__name__)

DUPLICATE_CHECK_FAILED_MESSAGE = "Error checking for duplicate cars. Please try again."


@dataclass(frozen=True, slots=True)
class NoDuplicate:
    pass


@dataclass(frozen=True, slots=True)
class DuplicateFound:
    description: str
    car_id: str


@dataclass(frozen=True, slots=True)
class DuplicateCheckFailed:
    message: str = DUPLICATE_CHECK_FAILED_MESSAGE


DuplicateCheckOutcome = Union[NoDuplicate, DuplicateFound, DuplicateCheckFailed]


def format_price(price: Decimal | None) -> str:
    """Rupee amount with thousands separators, dropping a zero fraction."""
    if price is None:
        return "₹0"
    if price == price.to_integral_value():
        return f"₹{int(price):,}"
    return f"₹{price:,.2f}"


class CheckDuplicateCar:
    """
    Look for an existing car of the same vendor that the candidate duplicates.

    Checks run in a fixed order and stop at the first hit:
    registration number, chassis number, engine number, and, only when
    none of those three was supplied, identical
    (brand, model, year, color, mileage, price).

    A failed lookup is reported as ``DuplicateCheckFailed``, never as
    "no duplicate": callers must block on it too.
    """

    def __init__(self, car_repository: CarRepository) -> None:
        self._repository = car_repository

    def execute(self, vendor_id: str, candidate: CarDetails) -> DuplicateCheckOutcome:
        candidate = candidate.normalized()
        for field, label in NATURAL_KEY_FIELDS:
            value = candidate.natural_key(field)
            if value is None:
                continue
            result = self._repository.find_by_natural_key(vendor_id, field, value)
            if isinstance(result, Err):
                return self._failed(vendor_id, field, result)
            if result.value is not None:
                existing = result.value
                return DuplicateFound(
                    description=(
                        f'A car with {label} "{value}" already exists ({existing.label})'
                    ),
                    car_id=existing.id,
                )

        if candidate.has_natural_key:
            return NoDuplicate()

        result = self._repository.find_identical(vendor_id, candidate)
        if isinstance(result, Err):
            return self._failed(vendor_id, "identical_details", result)
        if result.value is not None:
            return DuplicateFound(
                description=self._identical_description(candidate),
                car_id=result.value.id,
            )
        return NoDuplicate()

    def _identical_description(self, candidate: CarDetails) -> str:
        return (
            f"A car with identical details ({candidate.brand} {candidate.model} {candidate.year}, "
            f"{candidate.color}, {candidate.mileage}km, {format_price(candidate.price)}) already exists"
        )

    def _failed(self, vendor_id: str, check: str, err: Err) -> DuplicateCheckFailed:
        logger.error(
            "Error checking for duplicates",
            exc_info=err.cause,
            extra={"vendor_id": vendor_id, "check": check, "error": err.message},
        )
        return DuplicateCheckFailed()
