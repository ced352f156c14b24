from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum

from carlot.domain.errors import ValidationError


class CarStatus(str, Enum):
    AVAILABLE = "available"
    SOLD = "sold"


# Order matters: the first missing field is the one reported
REQUIRED_DETAIL_FIELDS: tuple[tuple[str, str], ...] = (
    ("brand", "Brand"),
    ("model", "Model"),
    ("year", "Year"),
    ("color", "Color"),
    ("fuel_type", "Fuel type"),
    ("transmission", "Transmission"),
    ("mileage", "Mileage"),
    ("price", "Price"),
)

NATURAL_KEY_FIELDS: tuple[tuple[str, str], ...] = (
    ("registration_number", "registration number"),
    ("chassis_number", "chassis number"),
    ("engine_number", "engine number"),
)


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True, slots=True)
class CarDetails:
    """Details entered on the first step of the onboarding wizard."""

    brand: str = ""
    model: str = ""
    year: int | None = None
    color: str = ""
    fuel_type: str = ""
    transmission: str = ""
    mileage: int | None = None
    price: Decimal | None = None
    description: str | None = None
    engine_capacity: str | None = None
    body_type: str | None = None
    condition: str | None = None
    registration_number: str | None = None
    chassis_number: str | None = None
    engine_number: str | None = None

    def missing_required_field(self) -> tuple[str, str] | None:
        """Return ``(field, label)`` of the first empty required field, if any."""
        for name, label in REQUIRED_DETAIL_FIELDS:
            value = getattr(self, name)
            if isinstance(value, str):
                if not value.strip():
                    return name, label
            elif not value:
                return name, label
        return None

    def validate(self) -> None:
        """
        Validate the required details.

        Raises:
            ValidationError: naming the first missing field
        """
        missing = self.missing_required_field()
        if missing is None:
            return
        name, label = missing
        message = f"{label} is required"
        raise ValidationError(
            message,
            errors=[{"field": name, "message": message, "code": "REQUIRED"}],
        )

    def natural_key(self, field_name: str) -> str | None:
        return _blank_to_none(getattr(self, field_name))

    @property
    def has_natural_key(self) -> bool:
        return any(self.natural_key(name) for name, _ in NATURAL_KEY_FIELDS)

    def normalized(self) -> CarDetails:
        """Trim identifiers and turn blank optional fields into ``None``."""
        return replace(
            self,
            brand=self.brand.strip(),
            model=self.model.strip(),
            color=self.color.strip(),
            fuel_type=self.fuel_type.strip(),
            transmission=self.transmission.strip(),
            description=_blank_to_none(self.description),
            engine_capacity=_blank_to_none(self.engine_capacity),
            body_type=_blank_to_none(self.body_type),
            condition=_blank_to_none(self.condition),
            registration_number=_blank_to_none(self.registration_number),
            chassis_number=_blank_to_none(self.chassis_number),
            engine_number=_blank_to_none(self.engine_number),
        )


@dataclass(frozen=True)
class Car:
    id: str
    vendor_id: str
    brand: str
    model: str
    year: int
    color: str
    fuel_type: str
    transmission: str
    mileage: int
    price: Decimal
    status: CarStatus = CarStatus.AVAILABLE
    description: str | None = None
    engine_capacity: str | None = None
    body_type: str | None = None
    condition: str | None = None
    registration_number: str | None = None
    chassis_number: str | None = None
    engine_number: str | None = None
    created_at: datetime | None = None

    @property
    def label(self) -> str:
        return f"{self.brand} {self.model} {self.year}"

    @property
    def is_sold(self) -> bool:
        return self.status is CarStatus.SOLD


@dataclass(frozen=True, slots=True)
class CarImage:
    id: str
    car_id: str
    image_url: str
    is_primary: bool = False


@dataclass(frozen=True, slots=True)
class CarDocument:
    id: str
    car_id: str
    document_name: str
    document_url: str
    document_type: str | None = None


@dataclass(frozen=True, slots=True)
class StagedFile:
    """A file held in memory until the workflow uploads it."""

    filename: str
    content: bytes
    content_type: str | None = None


@dataclass(frozen=True)
class CarWithImages:
    car: Car
    images: list[CarImage] = field(default_factory=list)

    @property
    def primary_image(self) -> CarImage | None:
        for image in self.images:
            if image.is_primary:
                return image
        return self.images[0] if self.images else None
