from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from carlot.infra.db.models.base import Base


class CarRow(Base):
    __tablename__ = "cars"
    __table_args__ = (
        Index("ix_cars_vendor_registration", "vendor_id", "registration_number"),
        Index("ix_cars_vendor_chassis", "vendor_id", "chassis_number"),
        Index("ix_cars_vendor_engine", "vendor_id", "engine_number"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    vendor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("vendors.id"), nullable=False, index=True
    )

    brand: Mapped[str] = mapped_column(String(50), nullable=False)
    model: Mapped[str] = mapped_column(String(50), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    color: Mapped[str] = mapped_column(String(30), nullable=False)
    fuel_type: Mapped[str] = mapped_column(String(20), nullable=False)
    transmission: Mapped[str] = mapped_column(String(20), nullable=False)
    mileage: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2), nullable=False)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    engine_capacity: Mapped[str | None] = mapped_column(String(30), nullable=True)
    body_type: Mapped[str | None] = mapped_column(String(30), nullable=True)
    condition: Mapped[str | None] = mapped_column(String(30), nullable=True)
    # unique per vendor only by convention, checked before insert
    registration_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    chassis_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    engine_number: Mapped[str | None] = mapped_column(String(50), nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="available")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
