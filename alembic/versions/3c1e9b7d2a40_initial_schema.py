"""Initial schema: vendors, cars, assets, sales and auth

Revision ID: 3c1e9b7d2a40
Revises:
Create Date: 2026-02-02 10:41:07.118230

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1e9b7d2a40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(with_updated_at: bool = False) -> list[sa.Column]:
    columns = [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)
    ]
    if with_updated_at:
        columns.append(
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)
        )
    return columns


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "auth_users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("user_metadata", sa.JSON(), nullable=False),
        sa.Column("last_sign_in_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "auth_sessions",
        sa.Column("access_token", sa.String(length=128), primary_key=True),
        sa.Column("refresh_token", sa.String(length=128), nullable=False, unique=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("auth_users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("refresh_expires_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_auth_sessions_user_id", "auth_sessions", ["user_id"])

    op.create_table(
        "vendors",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("profile_photo", sa.Text(), nullable=True),
        *_timestamps(with_updated_at=True),
    )

    op.create_table(
        "cars",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("vendor_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("vendors.id"), nullable=False),
        sa.Column("brand", sa.String(length=50), nullable=False),
        sa.Column("model", sa.String(length=50), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("color", sa.String(length=30), nullable=False),
        sa.Column("fuel_type", sa.String(length=20), nullable=False),
        sa.Column("transmission", sa.String(length=20), nullable=False),
        sa.Column("mileage", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("engine_capacity", sa.String(length=30), nullable=True),
        sa.Column("body_type", sa.String(length=30), nullable=True),
        sa.Column("condition", sa.String(length=30), nullable=True),
        sa.Column("registration_number", sa.String(length=50), nullable=True),
        sa.Column("chassis_number", sa.String(length=50), nullable=True),
        sa.Column("engine_number", sa.String(length=50), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="available"),
        *_timestamps(with_updated_at=True),
    )
    op.create_index("ix_cars_vendor_id", "cars", ["vendor_id"])
    op.create_index("ix_cars_vendor_registration", "cars", ["vendor_id", "registration_number"])
    op.create_index("ix_cars_vendor_chassis", "cars", ["vendor_id", "chassis_number"])
    op.create_index("ix_cars_vendor_engine", "cars", ["vendor_id", "engine_number"])

    op.create_table(
        "car_images",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("car_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("cars.id"), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=False),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_car_images_car_id", "car_images", ["car_id"])

    op.create_table(
        "car_documents",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("car_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("cars.id"), nullable=False),
        sa.Column("document_name", sa.String(length=255), nullable=False),
        sa.Column("document_url", sa.Text(), nullable=False),
        sa.Column("document_type", sa.String(length=100), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_car_documents_car_id", "car_documents", ["car_id"])

    op.create_table(
        "sales",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("car_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("cars.id"), nullable=False),
        sa.Column("vendor_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("vendors.id"), nullable=False),
        sa.Column("client_name", sa.String(length=200), nullable=False),
        sa.Column("client_email", sa.String(length=255), nullable=False),
        sa.Column("client_phone", sa.String(length=50), nullable=True),
        sa.Column("client_address", sa.Text(), nullable=True),
        sa.Column("sale_date", sa.Date(), nullable=False),
        sa.Column("payment_method", sa.String(length=30), nullable=False),
        sa.Column("sale_price", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("client_documents", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_sales_car_id", "sales", ["car_id"])
    op.create_index("ix_sales_vendor_id", "sales", ["vendor_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_sales_vendor_id", table_name="sales")
    op.drop_index("ix_sales_car_id", table_name="sales")
    op.drop_table("sales")
    op.drop_index("ix_car_documents_car_id", table_name="car_documents")
    op.drop_table("car_documents")
    op.drop_index("ix_car_images_car_id", table_name="car_images")
    op.drop_table("car_images")
    op.drop_index("ix_cars_vendor_engine", table_name="cars")
    op.drop_index("ix_cars_vendor_chassis", table_name="cars")
    op.drop_index("ix_cars_vendor_registration", table_name="cars")
    op.drop_index("ix_cars_vendor_id", table_name="cars")
    op.drop_table("cars")
    op.drop_table("vendors")
    op.drop_index("ix_auth_sessions_user_id", table_name="auth_sessions")
    op.drop_table("auth_sessions")
    op.drop_table("auth_users")
