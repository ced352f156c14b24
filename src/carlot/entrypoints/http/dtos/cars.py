from pydantic import BaseModel, ConfigDict, Field

_DECIMAL_PATTERN = r"^\d+(\.\d{1,2})?$"


class CarDetailsDTO(BaseModel):
    """Car details as entered on the first onboarding step."""

    brand: str = Field(default="", examples=["Honda"])
    model: str = Field(default="", examples=["City"])
    year: int | None = Field(default=None, examples=[2020], ge=1900)
    color: str = Field(default="", examples=["White"])
    fuel_type: str = Field(default="", examples=["Petrol"])
    transmission: str = Field(default="", examples=["Manual"])
    mileage: int | None = Field(default=None, description="Kilometres driven", examples=[42000], ge=0)
    price: str | None = Field(
        default=None,
        description="Asking price as decimal string",
        examples=["650000.00"],
        pattern=_DECIMAL_PATTERN,
    )
    description: str | None = None
    engine_capacity: str | None = Field(default=None, examples=["1497 cc"])
    body_type: str | None = Field(default=None, examples=["Sedan"])
    condition: str | None = Field(default=None, examples=["Excellent"])
    registration_number: str | None = Field(default=None, examples=["MH12AB1234"])
    chassis_number: str | None = None
    engine_number: str | None = None


class CarImageDTO(BaseModel):
    id: str
    image_url: str
    is_primary: bool


class CarDocumentDTO(BaseModel):
    id: str
    document_name: str
    document_url: str
    document_type: str | None = None


class CarResponseDTO(BaseModel):
    id: str
    vendor_id: str
    brand: str
    model: str
    year: int
    color: str
    fuel_type: str
    transmission: str
    mileage: int
    price: str
    status: str
    description: str | None = None
    engine_capacity: str | None = None
    body_type: str | None = None
    condition: str | None = None
    registration_number: str | None = None
    chassis_number: str | None = None
    engine_number: str | None = None
    created_at: str | None = None


class CarSummaryDTO(BaseModel):
    car: CarResponseDTO
    primary_image_url: str | None = None
    images: list[CarImageDTO]


class CarListResponseDTO(BaseModel):
    cars: list[CarSummaryDTO]
    total: int


class CarSaleDTO(BaseModel):
    id: str
    client_name: str
    client_email: str
    client_phone: str | None = None
    client_address: str | None = None
    sale_date: str
    payment_method: str
    sale_price: str
    document_urls: list[str]


class CarDetailsResponseDTO(BaseModel):
    car: CarResponseDTO
    images: list[CarImageDTO]
    documents: list[CarDocumentDTO]
    sales: list[CarSaleDTO]
    primary_image_index: int


class OnboardedCarResponseDTO(BaseModel):
    car: CarResponseDTO
    images: list[CarImageDTO]
    documents: list[CarDocumentDTO]


class StepValidationResponseDTO(BaseModel):
    step: str
    next_step: str


class DuplicateCheckResponseDTO(BaseModel):
    duplicate: bool
    description: str | None = None
    existing_car_id: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "duplicate": True,
                "description": 'A car with registration number "MH12AB1234" already exists (Honda City 2020)',
                "existing_car_id": "550e8400-e29b-41d4-a716-446655440000",
            }
        }
    )
