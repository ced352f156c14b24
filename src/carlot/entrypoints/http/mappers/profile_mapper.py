from __future__ import annotations

from carlot.domain.auth import AuthSession
from carlot.domain.stats import Customer, ProfileStats, RecentSale
from carlot.domain.vendor import Vendor
from carlot.entrypoints.http.dtos.auth import SessionResponseDTO
from carlot.entrypoints.http.dtos.profile import (
    CustomerDTO,
    DashboardStatsDTO,
    ProfileStatsResponseDTO,
    RecentSaleDTO,
    VendorResponseDTO,
)


class ProfileMapper:
    """Maps vendor profiles, stats and auth sessions to REST responses."""

    @staticmethod
    def to_vendor_response(vendor: Vendor) -> VendorResponseDTO:
        return VendorResponseDTO(
            id=vendor.id,
            email=vendor.email,
            full_name=vendor.full_name,
            phone=vendor.phone,
            profile_photo=vendor.profile_photo,
            created_at=vendor.created_at.isoformat() if vendor.created_at else None,
        )

    @staticmethod
    def to_recent_sale(sale: RecentSale) -> RecentSaleDTO:
        return RecentSaleDTO(
            id=sale.id,
            car_brand=sale.car_brand,
            car_model=sale.car_model,
            car_year=sale.car_year,
            sale_price=str(sale.sale_price),
            sale_date=sale.sale_date.isoformat(),
            client_name=sale.client_name,
        )

    @staticmethod
    def to_customer(customer: Customer) -> CustomerDTO:
        return CustomerDTO(
            id=customer.id,
            client_name=customer.client_name,
            client_email=customer.client_email,
            client_phone=customer.client_phone,
            client_address=customer.client_address,
            sale_price=str(customer.sale_price),
            sale_date=customer.sale_date.isoformat(),
            payment_method=customer.payment_method,
            car_brand=customer.car_brand,
            car_model=customer.car_model,
            car_year=customer.car_year,
            car_color=customer.car_color,
        )

    @staticmethod
    def to_stats_response(stats: ProfileStats) -> ProfileStatsResponseDTO:
        dashboard = stats.dashboard
        return ProfileStatsResponseDTO(
            dashboard=DashboardStatsDTO(
                total_cars=dashboard.total_cars,
                available_cars=dashboard.available_cars,
                sold_cars=dashboard.sold_cars,
                total_revenue=str(dashboard.total_revenue),
                recent_sales=[ProfileMapper.to_recent_sale(sale) for sale in dashboard.recent_sales],
            ),
            customers=[ProfileMapper.to_customer(customer) for customer in stats.customers],
        )

    @staticmethod
    def to_session_response(session: AuthSession) -> SessionResponseDTO:
        return SessionResponseDTO(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_at=session.expires_at.isoformat(),
            user_id=session.user.id,
            email=session.user.email,
        )
