from __future__ import annotations

from decimal import Decimal, InvalidOperation

from carlot.domain.car import Car, CarDetails, CarDocument, CarImage, CarWithImages
from carlot.domain.sale import Sale
from carlot.entrypoints.http.dtos.cars import (
    CarDetailsDTO,
    CarDetailsResponseDTO,
    CarDocumentDTO,
    CarImageDTO,
    CarListResponseDTO,
    CarResponseDTO,
    CarSaleDTO,
    CarSummaryDTO,
    DuplicateCheckResponseDTO,
    OnboardedCarResponseDTO,
)
from carlot.use_cases.check_duplicate_car import DuplicateCheckOutcome, DuplicateFound
from carlot.use_cases.get_car_details import CarDetailsView
from carlot.use_cases.onboard_car import OnboardedCar


def parse_price(value: str | None) -> Decimal | None:
    """Decimal from a form or JSON string; blank reads as not given."""
    if value is None or not value.strip():
        return None
    try:
        return Decimal(value.strip())
    except InvalidOperation as exc:
        raise ValueError(f"Must be a valid decimal: {value}") from exc


class CarMapper:
    """Maps between REST DTOs and domain models for cars."""

    @staticmethod
    def to_domain_details(dto: CarDetailsDTO) -> CarDetails:
        """
        Converts the details payload to domain details.

        Handles str → Decimal conversion for the price.
        """
        return CarDetails(
            brand=dto.brand,
            model=dto.model,
            year=dto.year,
            color=dto.color,
            fuel_type=dto.fuel_type,
            transmission=dto.transmission,
            mileage=dto.mileage,
            price=parse_price(dto.price),
            description=dto.description,
            engine_capacity=dto.engine_capacity,
            body_type=dto.body_type,
            condition=dto.condition,
            registration_number=dto.registration_number,
            chassis_number=dto.chassis_number,
            engine_number=dto.engine_number,
        )

    @staticmethod
    def to_car_response(car: Car) -> CarResponseDTO:
        return CarResponseDTO(
            id=car.id,
            vendor_id=car.vendor_id,
            brand=car.brand,
            model=car.model,
            year=car.year,
            color=car.color,
            fuel_type=car.fuel_type,
            transmission=car.transmission,
            mileage=car.mileage,
            price=str(car.price),  # Decimal → str at boundary
            status=car.status.value,
            description=car.description,
            engine_capacity=car.engine_capacity,
            body_type=car.body_type,
            condition=car.condition,
            registration_number=car.registration_number,
            chassis_number=car.chassis_number,
            engine_number=car.engine_number,
            created_at=car.created_at.isoformat() if car.created_at else None,
        )

    @staticmethod
    def to_image_response(image: CarImage) -> CarImageDTO:
        return CarImageDTO(id=image.id, image_url=image.image_url, is_primary=image.is_primary)

    @staticmethod
    def to_document_response(document: CarDocument) -> CarDocumentDTO:
        return CarDocumentDTO(
            id=document.id,
            document_name=document.document_name,
            document_url=document.document_url,
            document_type=document.document_type,
        )

    @staticmethod
    def to_sale_response(sale: Sale) -> CarSaleDTO:
        return CarSaleDTO(
            id=sale.id,
            client_name=sale.client_name,
            client_email=sale.client_email,
            client_phone=sale.client_phone,
            client_address=sale.client_address,
            sale_date=sale.sale_date.isoformat(),
            payment_method=sale.payment_method,
            sale_price=str(sale.sale_price),
            document_urls=sale.document_urls,
        )

    @staticmethod
    def to_summary(item: CarWithImages) -> CarSummaryDTO:
        primary = item.primary_image
        return CarSummaryDTO(
            car=CarMapper.to_car_response(item.car),
            primary_image_url=primary.image_url if primary else None,
            images=[CarMapper.to_image_response(image) for image in item.images],
        )

    @staticmethod
    def to_list_response(items: list[CarWithImages]) -> CarListResponseDTO:
        return CarListResponseDTO(
            cars=[CarMapper.to_summary(item) for item in items],
            total=len(items),
        )

    @staticmethod
    def to_details_response(view: CarDetailsView) -> CarDetailsResponseDTO:
        return CarDetailsResponseDTO(
            car=CarMapper.to_car_response(view.car),
            images=[CarMapper.to_image_response(image) for image in view.images],
            documents=[CarMapper.to_document_response(doc) for doc in view.documents],
            sales=[CarMapper.to_sale_response(sale) for sale in view.sales],
            primary_image_index=view.primary_image_index,
        )

    @staticmethod
    def to_onboarded_response(onboarded: OnboardedCar) -> OnboardedCarResponseDTO:
        return OnboardedCarResponseDTO(
            car=CarMapper.to_car_response(onboarded.car),
            images=[CarMapper.to_image_response(image) for image in onboarded.images],
            documents=[CarMapper.to_document_response(doc) for doc in onboarded.documents],
        )

    @staticmethod
    def to_duplicate_response(outcome: DuplicateCheckOutcome) -> DuplicateCheckResponseDTO:
        """Only a found duplicate maps here; a failed check is raised by the route."""
        if isinstance(outcome, DuplicateFound):
            return DuplicateCheckResponseDTO(
                duplicate=True,
                description=outcome.description,
                existing_car_id=outcome.car_id,
            )
        return DuplicateCheckResponseDTO(duplicate=False)
