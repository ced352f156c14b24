from pydantic import BaseModel, ConfigDict, Field


class VendorResponseDTO(BaseModel):
    id: str
    email: str
    full_name: str
    phone: str | None = None
    profile_photo: str | None = None
    created_at: str | None = None


class ChangePasswordRequestDTO(BaseModel):
    current_password: str
    new_password: str
    confirm_password: str


class RecentSaleDTO(BaseModel):
    id: str
    car_brand: str
    car_model: str
    car_year: int
    sale_price: str
    sale_date: str
    client_name: str


class CustomerDTO(BaseModel):
    id: str
    client_name: str
    client_email: str
    client_phone: str | None = None
    client_address: str | None = None
    sale_price: str
    sale_date: str
    payment_method: str
    car_brand: str
    car_model: str
    car_year: int
    car_color: str


class DashboardStatsDTO(BaseModel):
    total_cars: int
    available_cars: int
    sold_cars: int
    total_revenue: str = Field(description="Sum of all sale prices as decimal string")
    recent_sales: list[RecentSaleDTO]


class ProfileStatsResponseDTO(BaseModel):
    dashboard: DashboardStatsDTO
    customers: list[CustomerDTO]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "dashboard": {
                    "total_cars": 3,
                    "available_cars": 2,
                    "sold_cars": 1,
                    "total_revenue": "640000.00",
                    "recent_sales": [
                        {
                            "id": "7d9f...",
                            "car_brand": "Honda",
                            "car_model": "City",
                            "car_year": 2020,
                            "sale_price": "640000.00",
                            "sale_date": "2024-03-18",
                            "client_name": "Asha Rao",
                        }
                    ],
                },
                "customers": [],
            }
        }
    )
