#!/usr/bin/env python3
"""
Seed a demo dealer account with deterministic random inventory.

Features:
- Deterministic: fixed seed → same dataset every run
- Idempotent: safe to run multiple times (the demo dealer's data is cleared first)
- Realism-lite: prices correlated with year + brand band, some cars already sold

Usage:
    python scripts/seed_cars.py
    # sign in afterwards with demo@carlot.app / demo-dealer
"""

from __future__ import annotations

import random
import sys
import uuid
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import delete, select

from carlot.adapters.password_hashing import hash_password
from carlot.domain.car import CarStatus
from carlot.domain.sale import PaymentMethod, encode_document_urls
from carlot.infra.db.models import (
    AuthUserRow,
    CarDocumentRow,
    CarImageRow,
    CarRow,
    SaleRow,
    VendorRow,
)
from carlot.infra.db.session import get_session


# ==============================================================================
# Configuration
# ==============================================================================

RANDOM_SEED = 42  # Fixed seed for deterministic results
NUM_CARS = 30  # Number of cars to generate
SOLD_SHARE = 0.3  # Fraction of cars that get a sale
CURRENT_YEAR = 2024

DEMO_EMAIL = "demo@carlot.app"
DEMO_PASSWORD = "demo-dealer"
DEMO_NAME = "Demo Motors"
DEMO_PHONE = "+91 98200 00000"


# ==============================================================================
# Indian Market Car Data
# ==============================================================================

# Brand categories with price bands (base prices in INR)
BRANDS = {
    "economy": {
        "brands": ["Maruti Suzuki", "Tata", "Renault", "Hyundai"],
        "base_price_min": Decimal("400000"),
        "base_price_max": Decimal("800000"),
    },
    "mid_range": {
        "brands": ["Honda", "Toyota", "Kia", "Mahindra", "Skoda"],
        "base_price_min": Decimal("800000"),
        "base_price_max": Decimal("1800000"),
    },
    "premium": {
        "brands": ["BMW", "Mercedes-Benz", "Audi", "Volvo"],
        "base_price_min": Decimal("3500000"),
        "base_price_max": Decimal("7000000"),
    },
}

MODELS_BY_BRAND = {
    "Maruti Suzuki": ["Swift", "Baleno", "Dzire", "Brezza", "Ertiga"],
    "Tata": ["Nexon", "Punch", "Tiago", "Harrier", "Altroz"],
    "Renault": ["Kwid", "Kiger", "Triber"],
    "Hyundai": ["i20", "Creta", "Venue", "Verna"],
    "Honda": ["City", "Amaze", "WR-V"],
    "Toyota": ["Innova", "Fortuner", "Glanza", "Urban Cruiser"],
    "Kia": ["Seltos", "Sonet", "Carens"],
    "Mahindra": ["XUV700", "Thar", "Scorpio", "XUV300"],
    "Skoda": ["Slavia", "Kushaq", "Octavia"],
    "BMW": ["3 Series", "5 Series", "X1", "X3"],
    "Mercedes-Benz": ["C-Class", "E-Class", "GLA", "GLC"],
    "Audi": ["A4", "A6", "Q3", "Q5"],
    "Volvo": ["S60", "XC40", "XC60"],
}

COLORS = ["White", "Silver", "Grey", "Black", "Red", "Blue"]
TRANSMISSIONS = ["Manual", "Automatic", "AMT"]
FUEL_TYPES = ["Petrol", "Diesel", "CNG", "Electric"]
CONDITIONS = ["Excellent", "Good", "Fair"]
STATES = ["MH", "KA", "DL", "TN", "GJ", "TS"]

CLIENT_NAMES = ["Asha Rao", "Vikram Iyer", "Neha Kapoor", "Arjun Mehta", "Priya Nair", "Rohan Das"]


# ==============================================================================
# Price Calculation with Realism
# ==============================================================================


def calculate_price(brand: str, year: int) -> Decimal:
    """
    Calculate price based on brand category and year.

    Logic:
    - Newer cars are more expensive
    - Premium brands cost more than economy
    - Price depreciates ~10% per year from base price
    """
    category = next(
        (data for data in BRANDS.values() if brand in data["brands"]),
        BRANDS["mid_range"],
    )
    base_price = Decimal(random.randint(int(category["base_price_min"]), int(category["base_price_max"])))

    years_old = max(0, CURRENT_YEAR - year)
    total_depreciation = min(Decimal("0.10") * years_old, Decimal("0.70"))
    depreciated_price = base_price * (Decimal("1") - total_depreciation)

    # Add some randomness (+/- 10%)
    variance = Decimal(str(random.uniform(0.90, 1.10)))
    final_price = depreciated_price * variance

    # Round to nearest 5000
    final_price = (final_price / 5000).quantize(Decimal("1")) * 5000
    return max(final_price, Decimal("150000"))


def registration_number() -> str:
    return (
        f"{random.choice(STATES)}{random.randint(1, 50):02d}"
        f"{random.choice('ABCDEFGHJK')}{random.choice('ABCDEFGHJK')}{random.randint(1000, 9999)}"
    )


# ==============================================================================
# Seed Generation
# ==============================================================================


def generate_car(vendor_id: uuid.UUID) -> CarRow:
    """Generate a single random available car with realistic data."""
    category = random.choice(list(BRANDS.keys()))
    brand = random.choice(BRANDS[category]["brands"])
    model = random.choice(MODELS_BY_BRAND[brand])

    # Year: 2015-2024 (weighted toward newer)
    year = random.choices(range(2015, 2025), weights=[1, 1, 2, 2, 3, 3, 4, 5, 6, 7], k=1)[0]
    years_old = CURRENT_YEAR - year
    max_mileage = min(200000, years_old * 15000 + random.randint(0, 20000))

    if year >= 2022:
        fuel_type = random.choices(FUEL_TYPES, weights=[5, 2, 1, 1], k=1)[0]
    else:
        fuel_type = random.choices(FUEL_TYPES, weights=[6, 3, 1, 0], k=1)[0]

    return CarRow(
        id=uuid.uuid4(),
        vendor_id=vendor_id,
        brand=brand,
        model=model,
        year=year,
        color=random.choice(COLORS),
        fuel_type=fuel_type,
        transmission=random.choice(TRANSMISSIONS),
        mileage=random.randint(0, max(1000, max_mileage)),
        price=calculate_price(brand, year),
        condition=random.choice(CONDITIONS),
        registration_number=registration_number(),
        status=CarStatus.AVAILABLE.value,
    )


def generate_sale(car: CarRow) -> SaleRow:
    """Sell ``car`` somewhere in the last 120 days, close to its asking price."""
    client = random.choice(CLIENT_NAMES)
    discount = Decimal(str(random.uniform(0.93, 1.0)))
    car.status = CarStatus.SOLD.value
    return SaleRow(
        car_id=car.id,
        vendor_id=car.vendor_id,
        client_name=client,
        client_email=f"{client.split()[0].lower()}@example.com",
        sale_date=date(CURRENT_YEAR, 12, 31) - timedelta(days=random.randint(0, 120)),
        payment_method=random.choice(list(PaymentMethod)).value,
        sale_price=(car.price * discount).quantize(Decimal("1")),
        client_documents=encode_document_urls([]),
    )


def reset_demo_vendor(session) -> uuid.UUID:
    """Create the demo auth user and vendor, or clear the existing demo vendor's data."""
    user = session.execute(select(AuthUserRow).where(AuthUserRow.email == DEMO_EMAIL)).scalar_one_or_none()
    if user is None:
        user = AuthUserRow(
            email=DEMO_EMAIL,
            password_hash=hash_password(DEMO_PASSWORD),
            user_metadata={"full_name": DEMO_NAME, "phone": DEMO_PHONE},
        )
        session.add(user)
        session.flush()

    if session.get(VendorRow, user.id) is None:
        session.add(VendorRow(id=user.id, email=DEMO_EMAIL, full_name=DEMO_NAME, phone=DEMO_PHONE))
        session.flush()

    car_ids = select(CarRow.id).where(CarRow.vendor_id == user.id)
    session.execute(delete(CarImageRow).where(CarImageRow.car_id.in_(car_ids)))
    session.execute(delete(CarDocumentRow).where(CarDocumentRow.car_id.in_(car_ids)))
    session.execute(delete(SaleRow).where(SaleRow.vendor_id == user.id))
    deleted = session.execute(delete(CarRow).where(CarRow.vendor_id == user.id)).rowcount
    print(f"   Deleted {deleted} existing cars")
    return user.id


def seed_cars(num_cars: int = NUM_CARS, seed: int = RANDOM_SEED) -> None:
    """
    Seed the demo dealer with random cars and sales.

    Args:
        num_cars: Number of cars to generate
        seed: Random seed for deterministic results
    """
    random.seed(seed)

    print(f"🌱 Seeding {DEMO_EMAIL} with {num_cars} cars (seed={seed})...")

    with get_session() as session:
        print("🗑️  Resetting demo dealer...")
        vendor_id = reset_demo_vendor(session)

        print(f"🚗 Generating {num_cars} cars...")
        cars = [generate_car(vendor_id) for _ in range(num_cars)]
        session.add_all(cars)
        session.flush()

        sold = random.sample(cars, k=int(num_cars * SOLD_SHARE))
        sales = [generate_sale(car) for car in sold]
        session.add_all(sales)
        session.flush()

        print(f"✅ Seeded {len(cars)} cars, {len(sales)} of them sold")

        print("\n📊 Sample cars:")
        for i, car in enumerate(cars[:5], 1):
            print(
                f"   {i}. {car.year} {car.brand} {car.model} - "
                f"₹{car.price:,.0f} ({car.transmission}, {car.fuel_type}, {car.status})"
            )

        if len(cars) > 5:
            print(f"   ... and {len(cars) - 5} more")


# ==============================================================================
# Main
# ==============================================================================


if __name__ == "__main__":
    try:
        seed_cars()
    except Exception as e:
        print(f"❌ Error seeding database: {e}", file=sys.stderr)
        sys.exit(1)
