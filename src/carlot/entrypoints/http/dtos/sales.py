from pydantic import BaseModel, Field


class SaleResponseDTO(BaseModel):
    """A recorded sale; money as decimal string."""

    id: str
    car_id: str
    vendor_id: str
    client_name: str
    client_email: str
    client_phone: str | None = None
    client_address: str | None = None
    sale_date: str = Field(examples=["2024-03-18"])
    payment_method: str = Field(examples=["bank_transfer"])
    sale_price: str = Field(examples=["640000.00"])
    document_urls: list[str]
    car_status: str = Field(description="Status of the car after the sale", examples=["sold"])
