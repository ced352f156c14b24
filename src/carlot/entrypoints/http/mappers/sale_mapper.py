from __future__ import annotations

from datetime import date

from carlot.domain.car import StagedFile
from carlot.domain.sale import PaymentMethod, SaleForm
from carlot.entrypoints.http.dtos.sales import SaleResponseDTO
from carlot.entrypoints.http.mappers.car_mapper import parse_price
from carlot.use_cases.record_sale import RecordedSale


def _parse_date(value: str | None) -> date | None:
    if value is None or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"Must be a valid date (YYYY-MM-DD): {value}") from exc


def _parse_payment_method(value: str | None) -> PaymentMethod | None:
    if value is None or not value.strip():
        return None
    try:
        return PaymentMethod(value.strip())
    except ValueError as exc:
        allowed = ", ".join(method.value for method in PaymentMethod)
        raise ValueError(f"Payment method must be one of: {allowed}") from exc


class SaleMapper:
    """Maps the sale form to the domain and recorded sales to responses."""

    @staticmethod
    def to_domain_form(
        client_name: str,
        client_email: str,
        sale_date: str | None,
        payment_method: str | None,
        sale_price: str | None,
        client_phone: str | None,
        client_address: str | None,
        documents: list[StagedFile],
    ) -> SaleForm:
        """
        Builds the domain form from multipart fields.

        Blank values read as missing so that the form's own validation
        reports them; malformed values raise ValueError.
        """
        return SaleForm(
            client_name=client_name,
            client_email=client_email,
            sale_date=_parse_date(sale_date),
            payment_method=_parse_payment_method(payment_method),
            sale_price=parse_price(sale_price),
            client_phone=client_phone,
            client_address=client_address,
            documents=documents,
        )

    @staticmethod
    def to_response(recorded: RecordedSale) -> SaleResponseDTO:
        sale = recorded.sale
        return SaleResponseDTO(
            id=sale.id,
            car_id=sale.car_id,
            vendor_id=sale.vendor_id,
            client_name=sale.client_name,
            client_email=sale.client_email,
            client_phone=sale.client_phone,
            client_address=sale.client_address,
            sale_date=sale.sale_date.isoformat(),
            payment_method=sale.payment_method,
            sale_price=str(sale.sale_price),
            document_urls=sale.document_urls,
            car_status=recorded.car.status.value,
        )
