"""Record the sale of a car."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import Callable

from carlot.domain.car import Car, CarStatus
from carlot.domain.errors import CarAlreadySoldError, NotFoundError, UpstreamError, ValidationError
from carlot.domain.filenames import CLIENT_DOCUMENTS_BUCKET, client_document_key
from carlot.domain.result import Err
from carlot.domain.sale import NewSale, Sale, SaleForm, encode_document_urls
from carlot.ports.car_repository import CarRepository
from carlot.ports.object_storage import ObjectStorage
from carlot.ports.sale_repository import SaleRepository
from carlot.use_cases.vendor_session import VendorSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RecordSaleRequest:
    car_id: str
    form: SaleForm


@dataclass(frozen=True, slots=True)
class RecordedSale:
    sale: Sale
    car: Car


class RecordSale:
    """
    Mark a car as sold and store the buyer's details.

    Steps, in order: upload buyer documents, insert the sale row, flip the
    car to sold. The two writes are independent: if the status update
    fails the sale row stays and the car still reads available. The
    failure is logged with both ids and reported; nothing is compensated.
    Recording the same car again finds that sale row and only finishes the
    status update, so a car never gets a second sale.

    A car that is already sold is rejected before anything is written.
    """

    def __init__(
        self,
        session: VendorSession,
        car_repository: CarRepository,
        sale_repository: SaleRepository,
        storage: ObjectStorage,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._session = session
        self._cars = car_repository
        self._sales = sale_repository
        self._storage = storage
        self._clock = clock

    def execute(self, request: RecordSaleRequest) -> RecordedSale:
        """
        Execute the sale recording.

        Raises:
            UnauthorizedError: If no vendor is signed in
            ValidationError: If required sale fields are missing
            NotFoundError: If the car does not exist for this vendor
            CarAlreadySoldError: If the car is already sold
            UpstreamError: If a store or storage call failed
        """
        vendor = self._session.require_vendor()
        form = request.form
        form.validate()
        if form.sale_date is None or form.payment_method is None:
            raise ValidationError("Sale date and payment method are required")

        found = self._cars.get(vendor.id, request.car_id)
        if isinstance(found, Err):
            raise UpstreamError("Failed to load car", car_id=request.car_id)
        car = found.value
        if car is None:
            raise NotFoundError(resource="Car", identifier=request.car_id)
        if car.is_sold:
            raise CarAlreadySoldError(car.id)

        existing = self._sales.list_for_car(car.id)
        if isinstance(existing, Err):
            logger.error(
                "Could not look up earlier sales",
                extra={"car_id": car.id, "error": existing.message},
            )
            raise UpstreamError("Failed to check for an earlier sale", car_id=car.id, step="list_sales")
        if existing.value:
            # an earlier attempt stored the sale but never marked the car sold
            sale = existing.value[0]
            logger.warning(
                "Completing interrupted sale",
                extra={"car_id": car.id, "sale_id": sale.id},
            )
            return self._mark_sold(car, sale)

        document_urls: list[str] = []
        for index, document in enumerate(form.documents):
            key = client_document_key(vendor.id, document.filename, now=self._clock())
            uploaded = self._storage.upload(
                CLIENT_DOCUMENTS_BUCKET, key, document.content, document.content_type
            )
            if isinstance(uploaded, Err):
                logger.error(
                    "Client document upload failed",
                    extra={"car_id": car.id, "index": index, "error": uploaded.message},
                )
                raise UpstreamError(
                    f"Failed to upload client document: {uploaded.message}",
                    car_id=car.id,
                    step="upload_document",
                    index=index,
                )
            document_urls.append(self._storage.get_public_url(CLIENT_DOCUMENTS_BUCKET, key))

        inserted = self._sales.add(
            NewSale(
                car_id=car.id,
                vendor_id=car.vendor_id,
                client_name=form.client_name.strip(),
                client_email=form.client_email.strip(),
                client_phone=form.client_phone or None,
                client_address=form.client_address or None,
                sale_date=form.sale_date,
                payment_method=form.payment_method.value,
                sale_price=form.sale_price if form.sale_price is not None else car.price,
                client_documents=encode_document_urls(document_urls),
            )
        )
        if isinstance(inserted, Err):
            logger.error("Sale insert failed", extra={"car_id": car.id, "error": inserted.message})
            raise UpstreamError("Failed to record sale", car_id=car.id, step="insert_sale")

        return self._mark_sold(car, inserted.value)

    def _mark_sold(self, car: Car, sale: Sale) -> RecordedSale:
        updated = self._cars.update_status(car.id, CarStatus.SOLD)
        if isinstance(updated, Err):
            logger.error(
                "Sale recorded but car status not updated",
                extra={"car_id": car.id, "sale_id": sale.id, "error": updated.message},
            )
            raise UpstreamError(
                "Sale was recorded but the car could not be marked as sold",
                car_id=car.id,
                sale_id=sale.id,
                step="update_status",
            )

        logger.info("Car marked as sold", extra={"car_id": car.id, "sale_id": sale.id})
        return RecordedSale(sale=sale, car=replace(car, status=CarStatus.SOLD))
