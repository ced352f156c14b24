from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from carlot.domain.car import StagedFile
from carlot.domain.errors import ValidationError


class PaymentMethod(str, Enum):
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"
    FINANCING = "financing"
    TRADE_IN = "trade_in"


@dataclass(frozen=True, slots=True)
class SaleForm:
    client_name: str
    client_email: str
    sale_date: date | None
    payment_method: PaymentMethod | None
    sale_price: Decimal | None = None
    client_phone: str | None = None
    client_address: str | None = None
    documents: list[StagedFile] = field(default_factory=list)

    def validate(self) -> None:
        """
        Validate required sale fields.

        sale_price may be omitted (the car's price is used instead) but
        must be positive when given.

        Raises:
            ValidationError: listing every invalid field
        """
        errors: list[dict[str, str]] = []
        if not self.client_name or not self.client_name.strip():
            errors.append({"field": "client_name", "message": "Client name is required"})
        if not self.client_email or not self.client_email.strip():
            errors.append({"field": "client_email", "message": "Client email is required"})
        if self.sale_date is None:
            errors.append({"field": "sale_date", "message": "Sale date is required"})
        if self.payment_method is None:
            errors.append({"field": "payment_method", "message": "Payment method is required"})
        if self.sale_price is not None and self.sale_price <= 0:
            errors.append({"field": "sale_price", "message": "Sale price must be > 0"})
        if errors:
            raise ValidationError(errors=errors)


@dataclass(frozen=True)
class Sale:
    id: str
    car_id: str
    vendor_id: str
    client_name: str
    client_email: str
    sale_date: date
    payment_method: str
    sale_price: Decimal
    client_phone: str | None = None
    client_address: str | None = None
    client_documents: str | None = "[]"
    created_at: datetime | None = None

    @property
    def document_urls(self) -> list[str]:
        """Decode the stored document list; malformed values read as empty."""
        if not self.client_documents:
            return []
        try:
            decoded = json.loads(self.client_documents)
        except ValueError:
            return []
        if not isinstance(decoded, list):
            return []
        return [url for url in decoded if isinstance(url, str)]


def encode_document_urls(urls: list[str]) -> str:
    return json.dumps(urls)


@dataclass(frozen=True, slots=True)
class NewSale:
    """Sale row as written by the sale workflow, before the store assigns an id."""

    car_id: str
    vendor_id: str
    client_name: str
    client_email: str
    sale_date: date
    payment_method: str
    sale_price: Decimal
    client_phone: str | None = None
    client_address: str | None = None
    client_documents: str = "[]"
